"""
Geometry utilities for maritime navigation
"""

from .bearings import (
    rhumb_line_bearing,
    course_speed_to_velocity,
)

from .coordinate_transform import (
    clamp_latitude,
    longitude_scale,
    latlon_to_planar,
    haversine_distance,
)

__all__ = [
    # bearings
    'rhumb_line_bearing',
    'course_speed_to_velocity',
    # coordinate_transform
    'clamp_latitude',
    'longitude_scale',
    'latlon_to_planar',
    'haversine_distance',
]
