"""
Risk Assessment Module

- CPA/TCPA 계산
- Collision profiles (warning / danger / guard thresholds)
- Alarm classification and priority order
"""

from .cpa_tcpa import (
    calculate_cpa_tcpa
)

from .profiles import (
    CpaThreshold,
    GuardZone,
    CollisionProfile,
    CollisionProfiles,
    default_profiles,
)

from .alarms import (
    AlarmEvaluation,
    evaluate_alarms,
    calculate_priority_order,
    classify,
)

__all__ = [
    # CPA/TCPA functions
    'calculate_cpa_tcpa',

    # Collision profiles
    'CpaThreshold',
    'GuardZone',
    'CollisionProfile',
    'CollisionProfiles',
    'default_profiles',

    # Classification
    'AlarmEvaluation',
    'evaluate_alarms',
    'calculate_priority_order',
    'classify',
]
