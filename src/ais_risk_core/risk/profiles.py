"""
Collision profiles - alarm thresholds per navigation situation

Each profile holds three threshold groups:
- warning / danger: CPA (NM), TCPA (seconds), minimum target speed (knots)
- guard: range (NM), minimum target speed (knots)

A minimum speed of 0 means "any speed, including stationary".
"""
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, Mapping

from ..constants import METERS_PER_NM, KNOTS_PER_M_PER_S
from ..errors import ProfileError

PROFILE_NAMES = ("anchor", "harbor", "coastal", "offshore")


def speed_gate(speed_kn: float, sog) -> bool:
    """
    Minimum speed check shared by guard, warning and danger thresholds

    Args:
        speed_kn: threshold (knots), 0 = always pass
        sog: target speed over ground (m/s) or None

    Returns:
        True if the target passes the gate
    """
    if speed_kn == 0:
        return True
    return sog is not None and sog > speed_kn / KNOTS_PER_M_PER_S


@dataclass(frozen=True)
class CpaThreshold:
    cpa: float      # NM
    tcpa: float     # seconds
    speed: float    # knots

    @property
    def cpa_meters(self) -> float:
        return self.cpa * METERS_PER_NM

    def is_triggered(self, cpa, tcpa, sog) -> bool:
        return (
            cpa is not None
            and cpa < self.cpa_meters
            and tcpa is not None
            and 0 < tcpa < self.tcpa
            and speed_gate(self.speed, sog)
        )


@dataclass(frozen=True)
class GuardZone:
    range: float    # NM
    speed: float    # knots

    @property
    def range_meters(self) -> float:
        return self.range * METERS_PER_NM

    def is_triggered(self, range_m, sog) -> bool:
        return (
            range_m is not None
            and range_m < self.range_meters
            and speed_gate(self.speed, sog)
        )


@dataclass(frozen=True)
class CollisionProfile:
    warning: CpaThreshold
    danger: CpaThreshold
    guard: GuardZone

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "CollisionProfile":
        try:
            return cls(
                warning=CpaThreshold(**{k: float(values["warning"][k]) for k in ("cpa", "tcpa", "speed")}),
                danger=CpaThreshold(**{k: float(values["danger"][k]) for k in ("cpa", "tcpa", "speed")}),
                guard=GuardZone(**{k: float(values["guard"][k]) for k in ("range", "speed")}),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ProfileError(f"invalid collision profile {values!r}: {e}") from e


@dataclass(frozen=True)
class CollisionProfiles:
    """
    Immutable snapshot of all named profiles plus the active selection

    Replace the whole object between ticks to change settings; the tracker
    never mutates it.
    """
    current: str
    anchor: CollisionProfile
    harbor: CollisionProfile
    coastal: CollisionProfile
    offshore: CollisionProfile

    def __post_init__(self):
        if self.current not in PROFILE_NAMES:
            raise ProfileError(
                f"current profile must be one of {PROFILE_NAMES}. Got {self.current!r}"
            )

    @property
    def active(self) -> CollisionProfile:
        return getattr(self, self.current)

    def with_current(self, name: str) -> "CollisionProfiles":
        """Copy with a different active profile"""
        return replace(self, current=name)

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "CollisionProfiles":
        """
        Build from the settings layout
        {"current": "harbor", "anchor": {...}, "harbor": {...}, ...}

        Raises:
            ProfileError: missing current selection or a named profile
        """
        if not isinstance(values, Mapping) or not values.get("current"):
            raise ProfileError("collision profiles require a 'current' selection")
        missing = [name for name in PROFILE_NAMES if not values.get(name)]
        if missing:
            raise ProfileError(f"collision profiles missing {missing}")
        return cls(
            current=values["current"],
            **{name: CollisionProfile.from_dict(values[name]) for name in PROFILE_NAMES},
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def default_profiles() -> CollisionProfiles:
    """Factory defaults, harbor profile active"""
    return CollisionProfiles(
        current="harbor",
        anchor=CollisionProfile(
            warning=CpaThreshold(cpa=0.0, tcpa=3600, speed=0.0),
            danger=CpaThreshold(cpa=0.0, tcpa=3600, speed=0.0),
            guard=GuardZone(range=0.1, speed=0.0),
        ),
        harbor=CollisionProfile(
            warning=CpaThreshold(cpa=0.5, tcpa=600, speed=0.5),
            danger=CpaThreshold(cpa=0.1, tcpa=300, speed=3.0),
            guard=GuardZone(range=0.0, speed=0.0),
        ),
        coastal=CollisionProfile(
            warning=CpaThreshold(cpa=1.0, tcpa=900, speed=0.5),
            danger=CpaThreshold(cpa=0.5, tcpa=600, speed=3.0),
            guard=GuardZone(range=0.0, speed=0.0),
        ),
        offshore=CollisionProfile(
            warning=CpaThreshold(cpa=2.0, tcpa=1800, speed=0.5),
            danger=CpaThreshold(cpa=1.0, tcpa=900, speed=0.5),
            guard=GuardZone(range=0.0, speed=0.0),
        ),
    )
