"""
Target tracking

Target store, update merging and per-target kinematics
"""

from .types import (
    Target,
    AlarmState,
    DeviceClass,
    PublishedState,
)

from .identity import (
    is_valid_mmsi,
    mmsi_from_context,
    classify_device,
    get_mid,
)

from .store import TargetStore

from .merger import (
    TargetPatch,
    process_update,
    load_snapshot,
)

from .kinematics import compute_kinematics

__all__ = [
    # types
    'Target',
    'AlarmState',
    'DeviceClass',
    'PublishedState',
    # identity
    'is_valid_mmsi',
    'mmsi_from_context',
    'classify_device',
    'get_mid',
    # store / merger
    'TargetStore',
    'TargetPatch',
    'process_update',
    'load_snapshot',
    # kinematics
    'compute_kinematics',
]
