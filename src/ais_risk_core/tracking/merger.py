"""
Update Merger - applies delta updates and bulk snapshots to the TargetStore

Delta updates follow the SignalK delta layout:

    {
        "context": "vessels.urn:mrn:imo:mmsi:123456789",
        "updates": [
            {
                "timestamp": "2024-01-01T00:00:00Z",
                "values": [{"path": "navigation.speedOverGround", "value": 5.1}]
            }
        ]
    }

Each recognized (path, value) pair becomes a TargetPatch; only the fields a
patch sets are merged into the target.
"""
import logging
import re
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..utils import as_utc
from .identity import is_valid_mmsi, mmsi_from_context
from .store import TargetStore
from .types import Target

logger = logging.getLogger(__name__)


class _Unset:
    """Marker for a patch field that the update did not carry."""

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET: Any = _Unset()

_IMO_PREFIX_RE = re.compile(r"imo", re.IGNORECASE)


@dataclass(frozen=True)
class TargetPatch:
    """
    Raw field changes carried by one update value

    A field left as UNSET is not touched on merge; None is a real value
    meaning "unknown" (e.g. a position report without a fix).
    """
    name: Any = UNSET
    callsign: Any = UNSET
    imo: Any = UNSET
    latitude: Any = UNSET
    longitude: Any = UNSET
    last_seen_date: Any = UNSET
    cog: Any = UNSET
    sog: Any = UNSET
    hdg: Any = UNSET
    rot: Any = UNSET
    magvar: Any = UNSET
    type_id: Any = UNSET
    type_name: Any = UNSET
    status: Any = UNSET
    default_status: Any = UNSET     # status only if none is known yet
    ais_class: Any = UNSET
    destination: Any = UNSET
    length: Any = UNSET
    beam: Any = UNSET
    draft: Any = UNSET
    is_off_position: Any = UNSET
    is_virtual: Any = UNSET

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is UNSET for f in fields(self))

    def apply_to(self, target: Target):
        """Merge the set fields into target in place."""
        for f in fields(self):
            value = getattr(self, f.name)
            if value is UNSET:
                continue
            if f.name == "default_status":
                if target.status is None:
                    target.status = value
                continue
            setattr(target, f.name, value)


def _optional_float(value) -> Optional[float]:
    return None if value is None else float(value)


def _parse_identity(value: Mapping, timestamp: datetime) -> TargetPatch:
    # the root path carries one of name, callsign or IMO per message
    if value.get("name"):
        return TargetPatch(name=value["name"])
    callsign = (value.get("communication") or {}).get("callsignVhf")
    if callsign:
        return TargetPatch(callsign=callsign)
    imo = (value.get("registrations") or {}).get("imo")
    if imo:
        return TargetPatch(imo=_IMO_PREFIX_RE.sub("", str(imo)).strip())
    return TargetPatch()


def _parse_position(value: Mapping, timestamp: datetime) -> TargetPatch:
    return TargetPatch(
        latitude=_optional_float(value.get("latitude")),
        longitude=_optional_float(value.get("longitude")),
        last_seen_date=timestamp,
    )


def _parse_type(value: Mapping, timestamp: datetime) -> TargetPatch:
    return TargetPatch(type_id=value.get("id"), type_name=value.get("name"))


def _parse_aton_type(value: Mapping, timestamp: datetime) -> TargetPatch:
    return TargetPatch(
        type_id=value.get("id"),
        type_name=value.get("name"),
        default_status="default",
    )


def _scalar(field_name: str, convert: Callable = _optional_float):
    def parse(value, timestamp: datetime) -> TargetPatch:
        return TargetPatch(**{field_name: convert(value)})
    return parse


def _nested(field_name: str, key: str):
    def parse(value: Mapping, timestamp: datetime) -> TargetPatch:
        return TargetPatch(**{field_name: _optional_float(value.get(key))})
    return parse


def _flag(field_name: str):
    def parse(value, timestamp: datetime) -> TargetPatch:
        return TargetPatch(**{field_name: bool(value)})
    return parse


def _passthrough(value):
    return value


# Closed vocabulary of recognized paths; anything else is ignored.
PATH_PARSERS: Dict[str, Callable[[Any, datetime], TargetPatch]] = {
    "": _parse_identity,
    "navigation.position": _parse_position,
    "navigation.courseOverGroundTrue": _scalar("cog"),
    "navigation.speedOverGround": _scalar("sog"),
    "navigation.headingTrue": _scalar("hdg"),
    "navigation.rateOfTurn": _scalar("rot"),
    "navigation.magneticVariation": _scalar("magvar"),
    "navigation.state": _scalar("status", _passthrough),
    "navigation.destination.commonName": _scalar("destination", _passthrough),
    "sensors.ais.class": _scalar("ais_class", _passthrough),
    "design.aisShipType": _parse_type,
    "design.length": _nested("length", "overall"),
    "design.beam": _scalar("beam"),
    "design.draft": _nested("draft", "current"),
    "atonType": _parse_aton_type,
    "offPosition": _flag("is_off_position"),
    "virtual": _flag("is_virtual"),
}


def parse_timestamp(timestamp, default: Optional[datetime] = None) -> datetime:
    """
    Parse an ISO-8601 update timestamp ("2024-01-01T00:00:00Z")

    Args:
        timestamp: ISO string, datetime or None
        default: returned when timestamp is missing or unparseable
            (defaults to the current UTC time)

    Returns:
        Timezone-aware datetime
    """
    fallback = as_utc(default or datetime.now(timezone.utc))
    if isinstance(timestamp, datetime):
        parsed = timestamp
    elif isinstance(timestamp, str) and timestamp:
        try:
            parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        except ValueError:
            logger.debug("unparseable update timestamp %r", timestamp)
            return fallback
    else:
        return fallback
    return as_utc(parsed)


def parse_value(path: str, value: Any, timestamp: datetime) -> Optional[TargetPatch]:
    """
    Translate one (path, value) pair into a TargetPatch

    Returns:
        TargetPatch, or None for unrecognized paths and malformed values
    """
    parser = PATH_PARSERS.get(path)
    if parser is None:
        return None
    try:
        return parser(value, timestamp)
    except (AttributeError, TypeError, ValueError) as e:
        logger.debug("ignoring malformed value for %r: %r (%s)", path, value, e)
        return None


def process_update(
    delta: Mapping,
    store: TargetStore,
    now: Optional[datetime] = None
) -> Optional[str]:
    """
    Apply one delta update to the store

    Args:
        delta: SignalK-style delta (context + updates)
        store: TargetStore to mutate
        now: current time, used for missing timestamps and new targets

    Returns:
        The target MMSI, or None if the context does not end in a valid
        9-digit MMSI (nothing is mutated in that case)
    """
    context = delta.get("context") if isinstance(delta, Mapping) else None
    mmsi = mmsi_from_context(context)
    if mmsi is None:
        logger.debug("rejecting update with invalid context %r", context)
        return None

    now = as_utc(now or datetime.now(timezone.utc))
    target = store.get_or_create(mmsi, now)
    target.context = context

    for update in delta.get("updates") or []:
        if not isinstance(update, Mapping) or not update.get("values"):
            continue
        timestamp = parse_timestamp(update.get("timestamp"), now)
        for item in update["values"]:
            if not isinstance(item, Mapping):
                continue
            patch = parse_value(item.get("path"), item.get("value"), timestamp)
            if patch is not None and not patch.is_empty():
                store.upsert_from_delta(mmsi, patch, now)

    return mmsi


# ========================================
# Bulk snapshot
# ========================================

def _dig(obj: Any, *keys) -> Any:
    for key in keys:
        if not isinstance(obj, Mapping):
            return None
        obj = obj.get(key)
    return obj


def snapshot_fields(vessel: Mapping) -> Dict[str, Any]:
    """
    Flatten a full vessel object from a data model snapshot into raw fields

    Args:
        vessel: nested SignalK vessel/aton object

    Returns:
        Raw field name -> value, suitable for TargetStore.upsert_from_snapshot
    """
    position = _dig(vessel, "navigation", "position", "value") or {}
    position_ts = _dig(vessel, "navigation", "position", "timestamp")
    ship_type = _dig(vessel, "design", "aisShipType", "value") or {}
    aton_type = _dig(vessel, "atonType", "value") or {}
    imo = _dig(vessel, "registrations", "imo")

    return {
        "name": vessel.get("name"),
        "callsign": _dig(vessel, "communication", "callsignVhf"),
        "imo": _IMO_PREFIX_RE.sub("", str(imo)).strip() if imo else None,
        "latitude": _optional_float(position.get("latitude")),
        "longitude": _optional_float(position.get("longitude")),
        "last_seen_date": parse_timestamp(position_ts) if position_ts else None,
        "sog": _optional_float(_dig(vessel, "navigation", "speedOverGround", "value")),
        "cog": _optional_float(_dig(vessel, "navigation", "courseOverGroundTrue", "value")),
        "hdg": _optional_float(_dig(vessel, "navigation", "headingTrue", "value")),
        "rot": _optional_float(_dig(vessel, "navigation", "rateOfTurn", "value")),
        "magvar": _optional_float(_dig(vessel, "navigation", "magneticVariation", "value")),
        "type_id": ship_type.get("id", aton_type.get("id")),
        "type_name": ship_type.get("name", aton_type.get("name")),
        "status": _dig(vessel, "navigation", "state", "value"),
        "ais_class": _dig(vessel, "sensors", "ais", "class", "value") or "A",
        "destination": _dig(vessel, "navigation", "destination", "commonName", "value"),
        "eta": _dig(vessel, "navigation", "destination", "eta", "value"),
        "length": _optional_float(_dig(vessel, "design", "length", "value", "overall")),
        "beam": _optional_float(_dig(vessel, "design", "beam", "value")),
        "draft": _optional_float(_dig(vessel, "design", "draft", "value", "current")),
        "is_off_position": _dig(vessel, "offPosition", "value"),
        "is_virtual": _dig(vessel, "virtual", "value"),
    }


def load_snapshot(
    vessels: Mapping[str, Mapping],
    store: TargetStore,
    max_age_seconds: float,
    now: Optional[datetime] = None
) -> List[str]:
    """
    Seed the store from a full data model snapshot

    Entries without a valid MMSI, and entries whose last position report is
    already older than max_age_seconds, are skipped.

    Args:
        vessels: identifier -> nested vessel object
        store: TargetStore to fill
        max_age_seconds: discard threshold (seconds)
        now: current time

    Returns:
        MMSIs loaded
    """
    now = as_utc(now or datetime.now(timezone.utc))
    loaded = []
    for key, vessel in vessels.items():
        if not isinstance(vessel, Mapping):
            continue
        mmsi = vessel.get("mmsi")
        mmsi = str(mmsi) if mmsi is not None else mmsi_from_context(key)
        if not is_valid_mmsi(mmsi):
            logger.debug("skipping snapshot entry %r without a valid mmsi", key)
            continue

        values = snapshot_fields(vessel)
        last_seen = values["last_seen_date"]
        if last_seen is not None and (now - last_seen).total_seconds() >= max_age_seconds:
            logger.debug("skipping aged out snapshot entry %s", mmsi)
            continue

        values["context"] = key
        store.upsert_from_snapshot(mmsi, values, now)
        loaded.append(mmsi)

    logger.info("loaded %d of %d snapshot entries", len(loaded), len(vessels))
    return loaded
