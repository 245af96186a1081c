"""
Outputs for downstream collaborators: closest-approach records, change
detection for publishing, alarm notices and operator muting

Delivery itself (SignalK messages, sounds, UI) is the caller's job; these
functions only decide what should be delivered.
"""
import logging
from typing import Any, Dict, List, NamedTuple, Optional

from . import constants as C
from .tracking.identity import is_valid_mmsi
from .tracking.store import TargetStore
from .tracking.types import AlarmState, PublishedState, Target

logger = logging.getLogger(__name__)


class AlarmNotice(NamedTuple):
    """
    A notification the caller should raise
    """
    mmsi: str
    state: str        # "alarm" or "warn"
    message: str


def closest_approach_value(target: Target) -> Dict[str, Any]:
    """
    The navigation.closestApproach value for a target

    Returns:
        dict with distance, timeTo, range, bearing and the collision rating
    """
    return {
        "distance": target.cpa,
        "timeTo": target.tcpa,
        "range": target.range,
        "bearing": target.bearing,
        "collisionRiskRating": target.order,
        "collisionAlarmType": target.alarm_type,
        "collisionAlarmState": target.alarm_state.value if target.alarm_state else None,
    }


def _moved(current: Optional[float], previous: Optional[float], threshold: float) -> bool:
    return (
        current is not None
        and previous is not None
        and abs(current - previous) > threshold
    )


def has_target_data_changed(target: Target) -> bool:
    """
    True when the target's closest-approach data is worth publishing again

    Publishes on first sight, on alarm state change, when CPA / TCPA / range
    / bearing moved beyond their thresholds, or when CPA / TCPA appeared or
    disappeared.
    """
    last = target.last_published
    if last is None:
        return True
    if target.alarm_state is not last.alarm_state:
        return True
    if (
        _moved(target.cpa, last.cpa, C.PUBLISH_CPA_METERS)
        or _moved(target.tcpa, last.tcpa, C.PUBLISH_TCPA_SECONDS)
        or _moved(target.range, last.range, C.PUBLISH_RANGE_METERS)
        or _moved(target.bearing, last.bearing, C.PUBLISH_BEARING_DEGREES)
    ):
        return True
    return (target.cpa is None) != (last.cpa is None) or (target.tcpa is None) != (last.tcpa is None)


def mark_published(target: Target):
    target.last_published = PublishedState(
        cpa=target.cpa,
        tcpa=target.tcpa,
        range=target.range,
        bearing=target.bearing,
        alarm_state=target.alarm_state,
    )


def collect_publishable(store: TargetStore) -> List[Target]:
    """
    Non-self targets whose data changed enough to publish; marks them published
    """
    changed = []
    for target in store.all():
        if target.mmsi == store.self_mmsi:
            continue
        if has_target_data_changed(target):
            mark_published(target)
            changed.append(target)
    return changed


def alarm_message(target: Target) -> str:
    """Notification text, e.g. SEA BREEZE - GUARD,CPA ALARM"""
    name = target.name or f"<{target.mmsi}>"
    state = "alarm" if target.alarm_state is AlarmState.DANGER else target.alarm_state.value
    return f"{name} - {target.alarm_type} {state}".upper()


def collect_alarm_notices(store: TargetStore) -> List[AlarmNotice]:
    """
    Notices for targets whose alarm state or type changed since last notified

    Muted targets never produce notices. When an alarm clears or is muted
    the tracking resets, so a later alarm notifies again.
    """
    notices = []
    for target in store.all():
        if target.alarm_state is not None and not target.alarm_is_muted:
            changed = (
                target.alarm_state is not target.last_notified_state
                or target.alarm_type != target.last_notified_type
            )
            if changed:
                state = "alarm" if target.alarm_state is AlarmState.DANGER else "warn"
                notices.append(AlarmNotice(target.mmsi, state, alarm_message(target)))
                target.last_notified_state = target.alarm_state
                target.last_notified_type = target.alarm_type
        elif target.last_notified_state is not None:
            target.last_notified_state = None
            target.last_notified_type = None
    return notices


def has_active_alarm(store: TargetStore) -> bool:
    """Any unmuted target currently in an alarm or warning state"""
    return any(t.alarm_state is not None and not t.alarm_is_muted for t in store.all())


def mute_all_alarms(store: TargetStore) -> List[str]:
    """
    Mute every target currently in the danger state

    Returns:
        MMSIs newly muted
    """
    muted = []
    for target in store.all():
        if target.is_danger and not target.alarm_is_muted:
            logger.debug(
                "muting alarm for target %s %s %s", target.mmsi, target.name, target.alarm_type
            )
            target.alarm_is_muted = True
            muted.append(target.mmsi)
    return muted


def set_alarm_muted(store: TargetStore, mmsi: str, muted: bool) -> bool:
    """
    Set or clear the mute flag of one target

    Returns:
        True if the target exists and was updated

    Raises:
        ValueError: mmsi is not 9 digits
    """
    if not is_valid_mmsi(mmsi):
        raise ValueError(f"Invalid MMSI format (must be 9 digits). Got {mmsi!r}")
    target = store.get(mmsi)
    if target is None:
        return False
    target.alarm_is_muted = bool(muted)
    return True
