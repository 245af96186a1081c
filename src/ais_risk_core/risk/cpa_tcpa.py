"""
Closest Point of Approach (CPA) 및 Time to CPA (TCPA) 계산
"""
import numpy as np
from typing import Tuple, Optional

from ..constants import TCPA_MAX_SECONDS, MIN_RELATIVE_SPEED_SQ
from ..utils import round_half_up


def calculate_cpa_tcpa(
    os_position: Tuple[float, float],
    os_velocity: Tuple[float, float],
    ts_position: Tuple[float, float],
    ts_velocity: Tuple[float, float],
    max_tcpa: float = TCPA_MAX_SECONDS
) -> Tuple[Optional[int], Optional[int]]:
    """
    CPA와 TCPA 계산 (relative motion, constant velocity)

    Formulas:
    - dv = V_T - V_O,  w0 = P_T - P_O
    - TCPA = -(w0 · dv) / ||dv||²
    - CPA = || (P_O + V_O · TCPA) - (P_T + V_T · TCPA) ||

    Args:
        os_position: Own Ship 위치 (x, y) in meters
        os_velocity: Own Ship 속도 벡터 (vx, vy) in m/s
        ts_position: Target Ship 위치 (x, y) in meters
        ts_velocity: Target Ship 속도 벡터 (vx, vy) in m/s
        max_tcpa: solutions further in the future than this (seconds) are dropped

    Returns:
        (cpa, tcpa)
        cpa: Distance at CPA (meters, rounded) or None
        tcpa: Time to CPA (seconds, rounded) or None

    Notes:
        - ||dv||² < 1e-8: 평행 이동 또는 상대 운동 없음 → (None, None)
        - TCPA <= 0: 이미 CPA 통과 (멀어지는 중) → (None, None)
        - TCPA > max_tcpa: too far ahead to act on → (None, None)
    """
    p_o = np.asarray(os_position, dtype=float).flatten()[:2]
    v_o = np.asarray(os_velocity, dtype=float).flatten()[:2]
    p_t = np.asarray(ts_position, dtype=float).flatten()[:2]
    v_t = np.asarray(ts_velocity, dtype=float).flatten()[:2]

    # 상대 속도 벡터 (m/s)
    dv = v_t - v_o
    dv2 = float(np.dot(dv, dv))

    if not np.isfinite(dv2) or dv2 < MIN_RELATIVE_SPEED_SQ:
        return None, None

    # 상대 위치 벡터 (m)
    w0 = p_t - p_o

    # m * m/s / (m/s)^2 = s
    tcpa = -float(np.dot(w0, dv)) / dv2

    if not np.isfinite(tcpa) or tcpa <= 0 or tcpa > max_tcpa:
        return None, None

    p1 = p_o + tcpa * v_o
    p2 = p_t + tcpa * v_t
    cpa = float(np.hypot(*(p1 - p2)))

    if not np.isfinite(cpa):
        return None, None

    return round_half_up(cpa), round_half_up(tcpa)
