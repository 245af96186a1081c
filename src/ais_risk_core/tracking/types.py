"""
Tracked target data model
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional


class AlarmState(Enum):
    """
    Composite alarm state of a target
    """
    DANGER = "danger"      # guard, collision, SART, MOB or EPIRB alarm
    WARNING = "warning"    # collision warning only


class DeviceClass(Enum):
    """
    Station category encoded in the MMSI prefix (ITU-R M.585)
    """
    SHIP = "ship"                       # MIDXXXXXX
    GROUP = "group"                     # 0MIDXXXXX
    COAST_STATION = "coast_station"     # 00MIDXXXX
    DIVER_RADIO = "diver_radio"         # 8MIDXXXXX
    SAR_AIRCRAFT = "sar_aircraft"       # 111MIDXXX
    AUXILIARY = "auxiliary"             # 98MIDXXXX
    ATON = "aton"                       # 99MIDXXXX
    SART = "sart"                       # 970XXXXXX
    MOB = "mob"                         # 972XXXXXX
    EPIRB = "epirb"                     # 974XXXXXX


class PublishedState(NamedTuple):
    """
    Closest-approach values as last handed to the publisher
    """
    cpa: Optional[int]
    tcpa: Optional[int]
    range: Optional[int]
    bearing: Optional[int]
    alarm_state: Optional[AlarmState]


# Raw fields written by ingestion. Everything else on Target is derived or
# session state and survives a snapshot upsert.
RAW_FIELDS = (
    "context",
    "name",
    "callsign",
    "imo",
    "latitude",
    "longitude",
    "sog",
    "cog",
    "hdg",
    "rot",
    "magvar",
    "type_id",
    "type_name",
    "status",
    "ais_class",
    "destination",
    "eta",
    "length",
    "beam",
    "draft",
    "is_off_position",
    "is_virtual",
    "last_seen_date",
)


@dataclass
class Target:
    """
    One tracked vessel or aid-to-navigation

    Raw fields come from the update merger. Derived fields are recomputed
    from scratch every tick by the kinematics engine and the classifier.
    """
    mmsi: str

    # raw
    context: Optional[str] = None
    name: Optional[str] = None
    callsign: Optional[str] = None
    imo: Optional[str] = None
    latitude: Optional[float] = None      # degrees
    longitude: Optional[float] = None     # degrees
    sog: Optional[float] = None           # m/s
    cog: Optional[float] = None           # radians, 0=North, CW
    hdg: Optional[float] = None           # radians
    rot: Optional[float] = None           # radians/s
    magvar: Optional[float] = None        # radians
    type_id: Optional[int] = None
    type_name: Optional[str] = None
    status: Optional[str] = None
    ais_class: Optional[str] = None
    destination: Optional[str] = None
    eta: Optional[str] = None
    length: Optional[float] = None        # meters
    beam: Optional[float] = None          # meters
    draft: Optional[float] = None         # meters
    is_off_position: Optional[bool] = None
    is_virtual: Optional[bool] = None
    last_seen_date: Optional[datetime] = None
    first_seen_date: Optional[datetime] = None

    # derived: kinematics
    x: Optional[float] = None
    y: Optional[float] = None
    vx: Optional[float] = None
    vy: Optional[float] = None
    range: Optional[int] = None           # meters
    bearing: Optional[int] = None         # degrees, [0, 360)
    cpa: Optional[int] = None             # meters
    tcpa: Optional[int] = None            # seconds

    # derived: alarms and priority
    guard_alarm: bool = False
    collision_alarm: bool = False
    collision_warning: bool = False
    sart_alarm: bool = False
    mob_alarm: bool = False
    epirb_alarm: bool = False
    alarm_state: Optional[AlarmState] = None
    alarm_type: Optional[str] = None
    order: Optional[int] = None

    # derived: age
    age: Optional[int] = None             # seconds since last position report
    is_valid: bool = False
    is_lost: bool = False
    mid: Optional[str] = None

    # session
    alarm_is_muted: bool = False
    last_published: Optional[PublishedState] = field(default=None, repr=False)
    last_notified_state: Optional[AlarmState] = field(default=None, repr=False)
    last_notified_type: Optional[str] = field(default=None, repr=False)

    @property
    def has_position(self) -> bool:
        """Latitude and longitude both known (0.0 is a valid coordinate)"""
        return self.latitude is not None and self.longitude is not None

    @property
    def is_danger(self) -> bool:
        return self.alarm_state is AlarmState.DANGER

    @property
    def is_aid_to_navigation(self) -> bool:
        return self.ais_class == "ATON" or self.mmsi.startswith("99")
