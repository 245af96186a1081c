"""
Shared fixtures for ais-risk-core tests
"""
from datetime import datetime, timezone

import pytest

from ais_risk_core import TargetStore, Target, CollisionProfiles

SELF_MMSI = "000000001"
OTHER_MMSI = "123456789"
NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

HARBOR = {
    "warning": {"cpa": 0.5, "tcpa": 600, "speed": 0.5},
    "danger": {"cpa": 0.1, "tcpa": 300, "speed": 3},
    "guard": {"range": 0, "speed": 0},
}


def profiles_dict(guard_range=0.0, guard_speed=0.0):
    harbor = dict(HARBOR, guard={"range": guard_range, "speed": guard_speed})
    return {
        "current": "harbor",
        "anchor": HARBOR,
        "harbor": harbor,
        "coastal": HARBOR,
        "offshore": HARBOR,
    }


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def profiles():
    """Harbor thresholds, no guard zone"""
    return CollisionProfiles.from_dict(profiles_dict())


@pytest.fixture
def guard_profiles():
    """Harbor thresholds with a 0.5 NM guard zone for any speed"""
    return CollisionProfiles.from_dict(profiles_dict(guard_range=0.5))


@pytest.fixture
def make_target():
    def factory(mmsi=OTHER_MMSI, **overrides):
        values = dict(
            latitude=39.0,
            longitude=-75.0,
            sog=0.0,
            cog=0.0,
            last_seen_date=NOW,
        )
        values.update(overrides)
        return Target(mmsi=mmsi, **values)
    return factory


@pytest.fixture
def store():
    return TargetStore(SELF_MMSI)


@pytest.fixture
def scenario(store, make_target):
    """
    Store with an own vessel at 39N 075W; add() puts another target in it
    """
    own = make_target(SELF_MMSI)
    store.put(own)

    def add(mmsi=OTHER_MMSI, **overrides):
        target = make_target(mmsi, **overrides)
        return store.put(target)

    add.store = store
    add.own = own
    return add
