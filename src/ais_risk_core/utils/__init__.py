from .utils import (
    WrapTo360,
    wrap_to_range,
    round_half_up,
    clamp,
    is_finite,
    as_utc,
)

__all__ = [
    'WrapTo360',
    'wrap_to_range',
    'round_half_up',
    'clamp',
    'is_finite',
    'as_utc',
]
