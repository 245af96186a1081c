"""
Kinematics Engine - projection, range, bearing, CPA and TCPA per target
"""
import logging
from typing import Optional

from ..constants import TCPA_MAX_SECONDS
from ..errors import NoFixError
from ..geometry import (
    latlon_to_planar,
    course_speed_to_velocity,
    haversine_distance,
    rhumb_line_bearing,
)
from ..risk.cpa_tcpa import calculate_cpa_tcpa
from ..utils import round_half_up, is_finite
from .store import TargetStore
from .types import Target

logger = logging.getLogger(__name__)


def require_fix(store: TargetStore, self_mmsi: str) -> Target:
    """
    Return the self target, or raise NoFixError if it has no position

    Raises:
        NoFixError: self target absent, or latitude/longitude unknown
    """
    own = store.get(self_mmsi)
    if own is None:
        raise NoFixError("No GPS position available (no data for our own vessel)", self_mmsi)
    if not own.has_position:
        raise NoFixError("No GPS position available (data is invalid)", self_mmsi)
    return own


def update_projection(target: Target, own: Target):
    """
    Planar position and velocity of a target

    The longitude scale always comes from the self vessel's latitude so
    every target shares one frame. Unknown speed/course count as zero;
    unknown position leaves x/y as None.
    """
    if target.has_position:
        target.x, target.y = latlon_to_planar(target.latitude, target.longitude, own.latitude)
    else:
        target.x = target.y = None

    sog = target.sog if is_finite(target.sog) else 0.0
    cog = target.cog if is_finite(target.cog) else 0.0
    target.vx, target.vy = course_speed_to_velocity(cog, sog)


def update_range_and_bearing(target: Target, own: Target):
    """Great-circle range (m) and rhumb-line bearing (deg) from own ship"""
    if not (own.has_position and target.has_position):
        target.range = None
        target.bearing = None
        return

    distance = haversine_distance(own.latitude, own.longitude, target.latitude, target.longitude)
    bearing = rhumb_line_bearing(own.latitude, own.longitude, target.latitude, target.longitude)

    target.range = round_half_up(distance) if is_finite(distance) else None
    if is_finite(bearing):
        bearing = round_half_up(bearing)
        target.bearing = 0 if bearing >= 360 else bearing
    else:
        target.bearing = None


def update_cpa(target: Target, own: Target, max_tcpa: float = TCPA_MAX_SECONDS):
    """CPA (m) and TCPA (s) from the planar projections; None when not actionable"""
    if None in (own.x, own.y, own.vx, own.vy, target.x, target.y, target.vx, target.vy):
        target.cpa = None
        target.tcpa = None
        return

    target.cpa, target.tcpa = calculate_cpa_tcpa(
        (own.x, own.y), (own.vx, own.vy),
        (target.x, target.y), (target.vx, target.vy),
        max_tcpa=max_tcpa,
    )


def update_target_kinematics(
    target: Target,
    own: Target,
    max_tcpa: float = TCPA_MAX_SECONDS
):
    """
    Recompute every kinematic field of one non-self target

    Args:
        target: target to update in place
        own: self target, already projected with update_projection
        max_tcpa: CPA horizon (seconds)
    """
    update_projection(target, own)
    update_range_and_bearing(target, own)
    update_cpa(target, own, max_tcpa)


def compute_kinematics(
    store: TargetStore,
    self_mmsi: Optional[str] = None,
    max_tcpa: float = TCPA_MAX_SECONDS
) -> Target:
    """
    Kinematics for every target in the store

    Args:
        store: TargetStore
        self_mmsi: own vessel MMSI (defaults to store.self_mmsi)
        max_tcpa: CPA horizon (seconds)

    Returns:
        The self target

    Raises:
        NoFixError: self target missing or without latitude/longitude.
            Nothing is updated in that case.
    """
    self_mmsi = self_mmsi or store.self_mmsi
    own = require_fix(store, self_mmsi)

    update_projection(own, own)
    for target in store.all():
        if target.mmsi != self_mmsi:
            update_target_kinematics(target, own, max_tcpa)
    return own
