"""
항해 기하학 계산 유틸리티 (course/bearing, 0=North, clockwise)
"""
import numpy as np
from typing import Tuple
from ..utils import WrapTo360


def rhumb_line_bearing(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float
) -> float:
    """
    Constant-compass-heading bearing from position 1 to position 2

    Args:
        lat1, lon1: origin (degrees)
        lat2, lon2: destination (degrees)

    Returns:
        True bearing (degrees, [0, 360), 0=North, clockwise)
    """
    d_lon = np.radians(lon2 - lon1)

    # Mercator latitude difference
    d_phi = np.log(
        np.tan(np.radians(lat2) / 2 + np.pi / 4)
        / np.tan(np.radians(lat1) / 2 + np.pi / 4)
    )

    # take the short way round the antimeridian
    if abs(d_lon) > np.pi:
        if d_lon > 0:
            d_lon = -(2 * np.pi - d_lon)
        else:
            d_lon = 2 * np.pi + d_lon

    # atan2(East, North) gives angle from North, clockwise
    return float(WrapTo360(np.degrees(np.arctan2(d_lon, d_phi))))


def course_speed_to_velocity(course: float, speed: float) -> Tuple[float, float]:
    """
    Course over ground와 speed를 속도 벡터로 변환

    Args:
        course: Course over ground (radians, 0=North, clockwise)
        speed: Speed over ground (m/s)

    Returns:
        속도 벡터 (vx_east, vy_north) in m/s
    """
    # course=0 (North) → vx=0, vy=speed
    # course=pi/2 (East) → vx=speed, vy=0
    vx = speed * np.sin(course)  # East component
    vy = speed * np.cos(course)  # North component
    return float(vx), float(vy)
