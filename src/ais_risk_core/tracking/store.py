"""
Target Store - keyed collection of tracked targets
"""
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Mapping, Any, Optional

from .types import Target, RAW_FIELDS


class TargetStore:
    """
    Current snapshot of every known target, keyed by MMSI

    Pure data container: no locking, no logging, never raises. The self
    target can be stored like any other but is protected from removal.
    """

    def __init__(self, self_mmsi: str):
        """
        Args:
            self_mmsi: MMSI of the own vessel, fixed for the session
        """
        self.self_mmsi = self_mmsi
        self._targets: Dict[str, Target] = {}

    def __len__(self) -> int:
        return len(self._targets)

    def __contains__(self, mmsi) -> bool:
        return mmsi in self._targets

    def __iter__(self) -> Iterator[Target]:
        return iter(list(self._targets.values()))

    def get(self, mmsi: str) -> Optional[Target]:
        return self._targets.get(mmsi)

    def all(self) -> List[Target]:
        """All targets, including self"""
        return list(self._targets.values())

    def ids(self) -> List[str]:
        return list(self._targets.keys())

    @property
    def self_target(self) -> Optional[Target]:
        return self._targets.get(self.self_mmsi)

    def get_or_create(self, mmsi: str, now: Optional[datetime] = None) -> Target:
        """
        Look up a target, seeding a new one with zero speed and course

        Args:
            mmsi: 9-digit MMSI
            now: creation time, recorded as first_seen_date

        Returns:
            The existing or newly created Target
        """
        target = self._targets.get(mmsi)
        if target is None:
            target = Target(
                mmsi=mmsi,
                sog=0.0,
                cog=0.0,
                first_seen_date=now or datetime.now(timezone.utc),
            )
            self._targets[mmsi] = target
        return target

    def put(self, target: Target) -> Target:
        """Insert or replace a fully built target"""
        self._targets[target.mmsi] = target
        return target

    def upsert_from_snapshot(
        self,
        mmsi: str,
        fields: Mapping[str, Any],
        now: Optional[datetime] = None
    ) -> Target:
        """
        Replace every raw field of a target from a full snapshot

        Raw fields missing from `fields` become None. Derived and session
        fields (alarm mute, publish bookkeeping) are kept.

        Args:
            mmsi: 9-digit MMSI
            fields: raw field name -> value
            now: creation time if the target is new

        Returns:
            The updated Target
        """
        target = self.get_or_create(mmsi, now)
        for name in RAW_FIELDS:
            setattr(target, name, fields.get(name))
        return target

    def upsert_from_delta(self, mmsi: str, patch, now: Optional[datetime] = None) -> Target:
        """
        Merge only the fields present in a TargetPatch

        Args:
            mmsi: 9-digit MMSI
            patch: TargetPatch (fields left UNSET are not touched)
            now: creation time if the target is new

        Returns:
            The updated Target
        """
        target = self.get_or_create(mmsi, now)
        patch.apply_to(target)
        return target

    def remove(self, mmsi: str) -> bool:
        """
        Drop a target (age-out)

        Returns:
            True if removed. Removing self or an unknown id is a no-op.
        """
        if mmsi == self.self_mmsi:
            return False
        return self._targets.pop(mmsi, None) is not None
