"""
Tracker configuration
"""
from dataclasses import dataclass, fields
from typing import Any, Mapping

from .constants import (
    TARGET_MAX_AGE,
    LOST_TARGET_WARNING_AGE,
    GPS_STALE_WARNING_SECONDS,
    TCPA_MAX_SECONDS,
)


@dataclass(frozen=True)
class TrackerConfig:
    """
    Timing limits used by a TargetTracker.

    Attributes:
        max_age_seconds: targets not heard from for longer are removed
        lost_age_seconds: targets not heard from for longer are flagged lost
        gps_stale_seconds: self position older than this is reported stale
        tcpa_max_seconds: CPA solutions further in the future are discarded
    """
    max_age_seconds: float = TARGET_MAX_AGE
    lost_age_seconds: float = LOST_TARGET_WARNING_AGE
    gps_stale_seconds: float = GPS_STALE_WARNING_SECONDS
    tcpa_max_seconds: float = TCPA_MAX_SECONDS

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or value <= 0:
                raise ValueError(f"{f.name} must be positive. Got {value}")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "TrackerConfig":
        """
        Build a config from a dict-like source, ignoring unknown keys.

        Args:
            values: e.g. a parsed settings file section

        Returns:
            TrackerConfig with defaults for missing keys
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: float(v) for k, v in values.items() if k in known})
