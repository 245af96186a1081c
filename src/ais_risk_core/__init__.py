"""
AIS Risk Core - AIS target tracking, CPA/TCPA and collision alarm prioritization

Tracks an own vessel and the AIS targets around it from incremental updates,
and computes every tick each target's range, bearing, CPA, TCPA, alarm state
and priority order.
"""

from .tracking import Target, TargetStore, AlarmState, DeviceClass, process_update, load_snapshot
from .tracking.kinematics import compute_kinematics
from .risk import (
    calculate_cpa_tcpa,
    CollisionProfile,
    CollisionProfiles,
    default_profiles,
    classify,
)
from .tracker import TargetTracker, TickResult, TickStatus, recompute_tick, age_out, rank_targets
from .config import TrackerConfig
from .errors import AisRiskCoreError, NoFixError, ProfileError


__version__ = "0.1.0"
__author__ = "Maritime Robotics Lab"

__all__ = [
    # Main classes
    "TargetTracker",
    "TargetStore",
    "Target",
    "TrackerConfig",

    # Operations
    "process_update",
    "load_snapshot",
    "compute_kinematics",
    "calculate_cpa_tcpa",
    "classify",
    "recompute_tick",
    "age_out",
    "rank_targets",

    # Profiles
    "CollisionProfile",
    "CollisionProfiles",
    "default_profiles",

    # Types and enums
    "AlarmState",
    "DeviceClass",
    "TickResult",
    "TickStatus",

    # Errors
    "AisRiskCoreError",
    "NoFixError",
    "ProfileError",
]
