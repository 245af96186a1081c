"""
MMSI parsing and station classification

MMSI layouts (ITU-R M.585), digits 0-8:

    MIDXXXXXX   ship
    0MIDXXXXX   group of ships (e.g. US Coast Guard 03699999)
    00MIDXXXX   coast station
    8MIDXXXXX   diver's radio
    111MIDXXX   SAR aircraft
    98MIDXXXX   auxiliary craft associated with a parent ship
    99MIDXXXX   aid to navigation
    970MIDXXX   AIS SART
    972XXXXXX   MOB device (no MID)
    974XXXXXX   EPIRB-AIS (no MID)
"""
import re
from typing import Optional

from .types import DeviceClass

MMSI_LENGTH = 9
_MMSI_RE = re.compile(r"^[0-9]{9}$")

# longest prefix first
_PREFIX_CLASSES = (
    ("111", DeviceClass.SAR_AIRCRAFT),
    ("970", DeviceClass.SART),
    ("972", DeviceClass.MOB),
    ("974", DeviceClass.EPIRB),
    ("00", DeviceClass.COAST_STATION),
    ("98", DeviceClass.AUXILIARY),
    ("99", DeviceClass.ATON),
    ("0", DeviceClass.GROUP),
    ("8", DeviceClass.DIVER_RADIO),
)

# devices that are always an emergency, regardless of geometry
EMERGENCY_DEVICES = frozenset({DeviceClass.SART, DeviceClass.MOB, DeviceClass.EPIRB})


def is_valid_mmsi(mmsi) -> bool:
    """Exactly nine ASCII digits."""
    return isinstance(mmsi, str) and _MMSI_RE.match(mmsi) is not None


def mmsi_from_context(context) -> Optional[str]:
    """
    Extract the MMSI from an update context identifier

    Args:
        context: e.g. "vessels.urn:mrn:imo:mmsi:123456789"

    Returns:
        The last 9 characters if they are 9 digits, else None
    """
    if not context or not isinstance(context, str):
        return None
    candidate = context[-MMSI_LENGTH:]
    return candidate if is_valid_mmsi(candidate) else None


def classify_device(mmsi: str) -> DeviceClass:
    """
    Station category from the MMSI prefix

    Args:
        mmsi: 9-digit MMSI

    Returns:
        DeviceClass, SHIP when no special prefix matches
    """
    for prefix, device_class in _PREFIX_CLASSES:
        if mmsi.startswith(prefix):
            return device_class
    return DeviceClass.SHIP


def get_mid(mmsi: str) -> Optional[str]:
    """
    Maritime Identification Digits (flag state) embedded in the MMSI

    Returns:
        3-digit MID, or None for MOB/EPIRB devices which carry no MID
    """
    device_class = classify_device(mmsi)
    if device_class in (DeviceClass.MOB, DeviceClass.EPIRB):
        return None
    if device_class in (DeviceClass.SAR_AIRCRAFT, DeviceClass.SART):
        return mmsi[3:6]
    if device_class in (DeviceClass.COAST_STATION, DeviceClass.AUXILIARY, DeviceClass.ATON):
        return mmsi[2:5]
    if device_class in (DeviceClass.GROUP, DeviceClass.DIVER_RADIO):
        return mmsi[1:4]
    return mmsi[0:3]
