"""
Tick orchestration - kinematics then classification for every target

recompute_tick() and age_out() work on a bare TargetStore. TargetTracker
bundles a store, the self MMSI, the active collision profiles and a lock so
that delta merges and the periodic recompute never touch a target at the
same time.
"""
import copy
import logging
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Mapping, NamedTuple, Optional, Union

from . import publishing
from .config import TrackerConfig
from .constants import (
    TARGET_MAX_AGE,
    LOST_TARGET_WARNING_AGE,
    GPS_STALE_WARNING_SECONDS,
    TCPA_MAX_SECONDS,
)
from .errors import NoFixError
from .risk.alarms import classify, sort_key
from .risk.profiles import CollisionProfiles, CollisionProfile, default_profiles
from .tracking.identity import get_mid
from .tracking.kinematics import require_fix, update_projection, update_target_kinematics
from .tracking.merger import process_update, load_snapshot
from .tracking.store import TargetStore
from .tracking.types import Target
from .utils import round_half_up, as_utc

logger = logging.getLogger(__name__)


class TickStatus(Enum):
    OK = "ok"
    GPS_STALE = "gps_stale"    # computed, but own position is old
    NO_FIX = "no_fix"          # nothing computed this tick


class TickResult(NamedTuple):
    """
    Outcome of one recompute pass
    """
    status: TickStatus
    classified: int = 0               # targets classified successfully
    failed: int = 0                   # targets whose classification raised
    removed: tuple = ()               # MMSIs aged out after the pass
    self_age: Optional[int] = None    # seconds since own position report
    message: Optional[str] = None

    @property
    def has_fix(self) -> bool:
        return self.status is not TickStatus.NO_FIX


def update_age(
    target: Target,
    now: datetime,
    max_age_seconds: float = TARGET_MAX_AGE,
    lost_age_seconds: float = LOST_TARGET_WARNING_AGE
):
    """
    Age, lost and validity flags of one target

    Age counts from the last position report, or from first sighting when no
    position has been received yet. Clock skew never produces a negative age.
    """
    reference = target.last_seen_date or target.first_seen_date
    if reference is None:
        age = 0
    else:
        seconds = (as_utc(now) - as_utc(reference)).total_seconds()
        age = max(0, round_half_up(seconds))

    target.age = age
    target.is_lost = age > lost_age_seconds
    target.is_valid = target.has_position and age <= max_age_seconds
    target.mid = get_mid(target.mmsi)


def _resolve_profile(profiles: Union[CollisionProfiles, CollisionProfile]) -> CollisionProfile:
    if isinstance(profiles, CollisionProfiles):
        return profiles.active
    return profiles


def recompute_tick(
    store: TargetStore,
    self_mmsi: Optional[str],
    profiles: Union[CollisionProfiles, CollisionProfile],
    max_age_seconds: float = TARGET_MAX_AGE,
    now: Optional[datetime] = None,
    lost_age_seconds: float = LOST_TARGET_WARNING_AGE,
    gps_stale_seconds: float = GPS_STALE_WARNING_SECONDS,
    max_tcpa: float = TCPA_MAX_SECONDS
) -> TickResult:
    """
    Recompute every derived field: kinematics first, then classification

    Args:
        store: TargetStore
        self_mmsi: own vessel MMSI (defaults to store.self_mmsi)
        profiles: profile set (active profile used) or a single profile
        max_age_seconds: targets older than this are marked invalid
        now: current time (defaults to UTC now)
        lost_age_seconds: targets older than this are marked lost
        gps_stale_seconds: own position older than this gives GPS_STALE
        max_tcpa: CPA horizon (seconds)

    Returns:
        TickResult with status OK or GPS_STALE

    Raises:
        NoFixError: self target missing or without position. No target is
            modified in that case.
    """
    self_mmsi = self_mmsi or store.self_mmsi
    profile = _resolve_profile(profiles)
    now = now or datetime.now(timezone.utc)

    own = require_fix(store, self_mmsi)
    update_age(own, now, max_age_seconds, lost_age_seconds)
    update_projection(own, own)

    classified = failed = 0
    for target in store.all():
        if target.mmsi == self_mmsi:
            continue
        update_target_kinematics(target, own, max_tcpa)
        update_age(target, now, max_age_seconds, lost_age_seconds)
        if classify(target, profile):
            classified += 1
        else:
            failed += 1

    return _tick_result(own, classified, failed, gps_stale_seconds)


def _tick_result(own: Target, classified: int, failed: int, gps_stale_seconds: float) -> TickResult:
    if own.age is not None and own.age > gps_stale_seconds:
        message = f"No GPS position received for more than {own.age} seconds"
        logger.warning(message)
        return TickResult(TickStatus.GPS_STALE, classified, failed, (), own.age, message)
    return TickResult(TickStatus.OK, classified, failed, (), own.age)


def age_out(
    store: TargetStore,
    max_age_seconds: float = TARGET_MAX_AGE,
    except_mmsi: Optional[str] = None
) -> List[str]:
    """
    Remove targets whose age exceeds max_age_seconds

    Ages come from the last recompute. The self target (store.self_mmsi) and
    except_mmsi are never removed.

    Returns:
        MMSIs removed
    """
    protected = {store.self_mmsi, except_mmsi}
    removed = []
    for target in store.all():
        if target.mmsi in protected or target.age is None:
            continue
        if target.age > max_age_seconds and store.remove(target.mmsi):
            logger.debug("ageing out target %s %s (%ss)", target.mmsi, target.name, target.age)
            removed.append(target.mmsi)
    return removed


def rank_targets(store: TargetStore, self_mmsi: Optional[str] = None) -> List[Target]:
    """Valid non-self targets, most urgent first"""
    self_mmsi = self_mmsi or store.self_mmsi
    return sorted(
        (t for t in store.all() if t.mmsi != self_mmsi and t.is_valid),
        key=sort_key,
    )


class TargetTracker:
    """
    Session context: store, own MMSI, active profiles and the store lock

    Delta merges hold the lock for one merge. A tick takes the target list
    under the lock, then holds it per target while that target is
    recomputed, so incoming updates are never blocked for a whole pass.
    """

    def __init__(
        self,
        self_mmsi: str,
        profiles: Optional[CollisionProfiles] = None,
        config: Optional[TrackerConfig] = None
    ):
        self.self_mmsi = self_mmsi
        self.store = TargetStore(self_mmsi)
        self.config = config or TrackerConfig()
        self._profiles = profiles or default_profiles()
        self._lock = threading.RLock()

    @property
    def profiles(self) -> CollisionProfiles:
        return self._profiles

    def set_profiles(self, profiles: Union[CollisionProfiles, Mapping[str, Any]]):
        """
        Swap in a new profile snapshot; takes effect on the next tick

        Raises:
            ProfileError: the mapping is not a complete profile set
        """
        if not isinstance(profiles, CollisionProfiles):
            profiles = CollisionProfiles.from_dict(profiles)
        self._profiles = profiles

    def apply_delta(self, delta: Mapping, now: Optional[datetime] = None) -> Optional[str]:
        """Merge one delta update; returns the MMSI or None if rejected"""
        with self._lock:
            mmsi = process_update(delta, self.store, now)
        if mmsi is None:
            logger.debug("received a delta with an invalid mmsi: %r", delta)
        return mmsi

    def load_snapshot(self, vessels: Mapping[str, Mapping], now: Optional[datetime] = None) -> List[str]:
        with self._lock:
            return load_snapshot(vessels, self.store, self.config.max_age_seconds, now)

    def tick(self, now: Optional[datetime] = None) -> TickResult:
        """
        One recompute pass followed by age-out

        Returns:
            TickResult; status NO_FIX when the own position is unavailable,
            in which case nothing was recomputed or removed
        """
        now = now or datetime.now(timezone.utc)
        profile = self._profiles.active
        cfg = self.config

        with self._lock:
            try:
                own = require_fix(self.store, self.self_mmsi)
            except NoFixError as e:
                logger.warning("tick skipped: %s", e)
                return TickResult(TickStatus.NO_FIX, message=str(e))
            update_age(own, now, cfg.max_age_seconds, cfg.lost_age_seconds)
            update_projection(own, own)
            # frozen copy so a self update mid-pass cannot mix two frames
            own = copy.copy(own)
            targets = [t for t in self.store.all() if t.mmsi != self.self_mmsi]

        classified = failed = 0
        for target in targets:
            with self._lock:
                update_target_kinematics(target, own, cfg.tcpa_max_seconds)
                update_age(target, now, cfg.max_age_seconds, cfg.lost_age_seconds)
                ok = classify(target, profile)
            if ok:
                classified += 1
            else:
                failed += 1

        with self._lock:
            removed = age_out(self.store, cfg.max_age_seconds, self.self_mmsi)

        result = _tick_result(own, classified, failed, cfg.gps_stale_seconds)
        return result._replace(removed=tuple(removed))

    def ranked(self) -> List[Target]:
        with self._lock:
            return rank_targets(self.store, self.self_mmsi)

    def get(self, mmsi: str) -> Optional[Target]:
        with self._lock:
            return self.store.get(mmsi)

    def mute_all_alarms(self) -> List[str]:
        with self._lock:
            return publishing.mute_all_alarms(self.store)

    def set_alarm_muted(self, mmsi: str, muted: bool) -> bool:
        with self._lock:
            return publishing.set_alarm_muted(self.store, mmsi, muted)

    def alarm_notices(self) -> List[publishing.AlarmNotice]:
        """Alarm notifications due after the last tick"""
        with self._lock:
            return publishing.collect_alarm_notices(self.store)

    def publishable(self) -> List[Mapping[str, Any]]:
        """
        Closest-approach records for targets that changed enough to publish

        Returns:
            list of {"context": ..., "value": closest_approach_value}
        """
        with self._lock:
            return [
                {"context": t.context, "value": publishing.closest_approach_value(t)}
                for t in publishing.collect_publishable(self.store)
            ]
