"""
Alarm classification and priority ranking

Priority order (lower = more urgent):
    base:  DANGER 10000 < WARNING 20000 < CLOSING 30000 < DIVERGING 40000
    TCPA > 0:      -1000, then up to -1000 more (TCPA 0 s → -1000, 1 h → 0)
    CPA > 0:       up to -2000 (CPA 0 NM → -2000, 5 NM → 0)
    range > 0:     +100 per NM, at most +5000
    range unknown: +50000
    clamped to [-99999, 99999]
"""
import logging
from typing import NamedTuple, Optional, Tuple

from .. import constants as C
from ..tracking.identity import classify_device, EMERGENCY_DEVICES
from ..tracking.types import AlarmState, DeviceClass, Target
from ..utils import round_half_up, clamp
from .profiles import CollisionProfile

logger = logging.getLogger(__name__)


class AlarmEvaluation(NamedTuple):
    """
    Alarm flags, composite state and priority of one target
    """
    guard_alarm: bool
    collision_alarm: bool
    collision_warning: bool
    sart_alarm: bool
    mob_alarm: bool
    epirb_alarm: bool
    alarm_state: Optional[AlarmState]
    alarm_type: Optional[str]
    order: int

    @property
    def is_dangerous(self) -> bool:
        return self.alarm_state is AlarmState.DANGER


def alarm_type_label(
    guard: bool,
    cpa: bool,
    sart: bool,
    mob: bool,
    epirb: bool
) -> Optional[str]:
    """Comma-joined names of the alarms that fired, in fixed order, or None"""
    fired = [
        name for name, active in (
            ("guard", guard),
            ("cpa", cpa),
            ("sart", sart),
            ("mob", mob),
            ("epirb", epirb),
        ) if active
    ]
    return ",".join(fired) if fired else None


def calculate_priority_order(
    alarm_state: Optional[AlarmState],
    range_m: Optional[float],
    cpa: Optional[float],
    tcpa: Optional[float]
) -> int:
    """
    Sortable priority of a target (lower = more urgent)

    Args:
        alarm_state: composite alarm state
        range_m: range (meters) or None
        cpa: CPA (meters) or None
        tcpa: TCPA (seconds) or None

    Returns:
        Priority order in [ORDER_MIN, ORDER_MAX]
    """
    closing = tcpa is not None and tcpa > 0

    if alarm_state is AlarmState.DANGER:
        order = C.ORDER_DANGER
    elif alarm_state is AlarmState.WARNING:
        order = C.ORDER_WARNING
    elif closing:
        order = C.ORDER_CLOSING
    else:
        order = C.ORDER_DIVERGING

    # sooner TCPA first; any closing solution beats none
    if closing:
        order -= C.HAS_TCPA_BONUS
        order -= max(0, round_half_up(
            C.TCPA_WEIGHT - C.TCPA_WEIGHT * tcpa / C.TCPA_WEIGHT_HORIZON
        ))

    # closer CPA first
    if cpa is not None and cpa > 0:
        order -= max(0, round_half_up(
            C.CPA_WEIGHT - C.CPA_WEIGHT * cpa / C.CPA_WEIGHT_HORIZON_NM / C.METERS_PER_NM
        ))

    # nearer targets first
    if range_m is not None and range_m > 0:
        order += min(
            C.RANGE_WEIGHT_MAX,
            round_half_up(C.RANGE_WEIGHT_PER_NM * range_m / C.METERS_PER_NM),
        )

    if range_m is None:
        order += C.ORDER_NO_RANGE

    return int(clamp(order, C.ORDER_MIN, C.ORDER_MAX))


def evaluate_alarms(
    mmsi: str,
    range_m: Optional[float],
    cpa: Optional[float],
    tcpa: Optional[float],
    sog: Optional[float],
    profile: CollisionProfile
) -> AlarmEvaluation:
    """
    Evaluate every alarm rule independently

    Args:
        mmsi: target MMSI (SART / MOB / EPIRB devices always alarm)
        range_m: range (meters) or None
        cpa: CPA (meters) or None
        tcpa: TCPA (seconds) or None
        sog: speed over ground (m/s) or None
        profile: active collision profile

    Returns:
        AlarmEvaluation
    """
    device_class = classify_device(mmsi)

    guard = profile.guard.is_triggered(range_m, sog)
    danger = profile.danger.is_triggered(cpa, tcpa, sog)
    warning = profile.warning.is_triggered(cpa, tcpa, sog)
    sart = device_class is DeviceClass.SART
    mob = device_class is DeviceClass.MOB
    epirb = device_class is DeviceClass.EPIRB

    if guard or danger or device_class in EMERGENCY_DEVICES:
        state = AlarmState.DANGER
    elif warning:
        state = AlarmState.WARNING
    else:
        state = None

    return AlarmEvaluation(
        guard_alarm=guard,
        collision_alarm=danger,
        collision_warning=warning,
        sart_alarm=sart,
        mob_alarm=mob,
        epirb_alarm=epirb,
        alarm_state=state,
        alarm_type=alarm_type_label(guard, danger or warning, sart, mob, epirb),
        order=calculate_priority_order(state, range_m, cpa, tcpa),
    )


def classify(target: Target, profile: CollisionProfile) -> bool:
    """
    Evaluate alarms for one target and store the result on it

    Never raises: a failure is logged and the target keeps its previous
    alarm fields.

    Args:
        target: non-self target with fresh kinematics
        profile: active collision profile

    Returns:
        True if the target was classified
    """
    try:
        result = evaluate_alarms(
            target.mmsi, target.range, target.cpa, target.tcpa, target.sog, profile
        )
    except Exception:
        logger.exception("error classifying target %s", target.mmsi)
        return False

    for name, value in result._asdict().items():
        setattr(target, name, value)
    return True


def sort_key(target: Target) -> Tuple[int, float, str]:
    """Deterministic ranking key: order, then range, then MMSI"""
    order = target.order if target.order is not None else C.ORDER_MAX
    range_m = target.range if target.range is not None else float("inf")
    return order, range_m, target.mmsi
