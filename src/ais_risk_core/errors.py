"""
Exceptions raised by ais-risk-core
"""


class AisRiskCoreError(Exception):
    """Base class for all package errors."""


class NoFixError(AisRiskCoreError):
    """
    The self target is missing or has no latitude/longitude.

    Every range, bearing and CPA depends on the self position, so the whole
    recompute for the tick is abandoned. Callers should report a "no GPS"
    condition and retry on the next tick.
    """

    def __init__(self, message: str, self_mmsi=None):
        super().__init__(message)
        self.self_mmsi = self_mmsi


class ProfileError(AisRiskCoreError, ValueError):
    """Collision profile configuration is incomplete or malformed."""
