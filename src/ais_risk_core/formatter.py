"""
Display strings for target fields

Every formatter returns "---" for an unknown (None) value.
"""
import re
from typing import Dict, Optional

import numpy as np

from .constants import METERS_PER_NM, KNOTS_PER_M_PER_S, NULL_DISPLAY
from .tracking.types import Target
from .utils import round_half_up, is_finite

_IMO_PREFIX_RE = re.compile(r"imo", re.IGNORECASE)


def _degrees_minutes(value: float, degree_width: int) -> str:
    # work in 1/10000 minute units so 59.99999' carries into the degree
    total = round_half_up(abs(value) * 60 * 10000)
    degrees, rest = divmod(total, 60 * 10000)
    return f"{degrees:0{degree_width}d}° {rest / 10000:07.4f}"


def format_lat(latitude: Optional[float]) -> str:
    """N 39° 57.0689"""
    if not is_finite(latitude):
        return NULL_DISPLAY
    hemisphere = "N" if latitude >= 0 else "S"
    return f"{hemisphere} {_degrees_minutes(latitude, 2)}"


def format_lon(longitude: Optional[float]) -> str:
    """W 075° 08.3692"""
    if not is_finite(longitude):
        return NULL_DISPLAY
    hemisphere = "E" if longitude >= 0 else "W"
    return f"{hemisphere} {_degrees_minutes(longitude, 3)}"


def format_cpa(cpa: Optional[float]) -> str:
    """1.53 NM"""
    if cpa is None:
        return NULL_DISPLAY
    return f"{cpa / METERS_PER_NM:.2f} NM"


def format_range(range_m: Optional[float]) -> str:
    if range_m is None:
        return NULL_DISPLAY
    return f"{range_m / METERS_PER_NM:.2f} NM"


def format_tcpa(tcpa: Optional[float]) -> str:
    """
    hh:mm:ss from one hour up, mm:ss below (01:15:23 or 51:37)

    Fractional seconds are truncated. Negative (past) TCPA is shown as unknown.
    """
    if tcpa is None or tcpa < 0:
        return NULL_DISPLAY
    seconds = int(tcpa)
    hours, rest = divmod(seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def format_speed(sog: Optional[float]) -> str:
    """Speed over ground (m/s) as knots: 5.0 kn"""
    if not is_finite(sog):
        return NULL_DISPLAY
    return f"{sog * KNOTS_PER_M_PER_S:.1f} kn"


def format_angle(radians: Optional[float]) -> str:
    """Course or heading (radians) as whole degrees true: 45 T"""
    if not is_finite(radians):
        return NULL_DISPLAY
    return f"{round_half_up(np.degrees(radians))} T"


def format_bearing(bearing: Optional[int]) -> str:
    """Bearing (already whole degrees): 271 T"""
    if bearing is None:
        return NULL_DISPLAY
    return f"{bearing} T"


def format_rot(rot: Optional[float]) -> str:
    """Rate of turn, degrees"""
    if not is_finite(rot):
        return NULL_DISPLAY
    return str(round_half_up(np.degrees(rot)))


def format_size(length: Optional[float], beam: Optional[float]) -> str:
    """12.0 m x 4.0 m"""
    length_text = f"{length:.1f}" if is_finite(length) else NULL_DISPLAY
    beam_text = f"{beam:.1f}" if is_finite(beam) else NULL_DISPLAY
    return f"{length_text} m x {beam_text} m"


def format_imo(imo: Optional[str]) -> str:
    if not imo:
        return NULL_DISPLAY
    return _IMO_PREFIX_RE.sub("", str(imo)).strip() or NULL_DISPLAY


def format_ais_class(ais_class: Optional[str], is_virtual: Optional[bool] = False) -> str:
    text = ais_class or NULL_DISPLAY
    return f"{text} (virtual)" if is_virtual else text


def format_name(name: Optional[str], mmsi: str) -> str:
    return name or f"<{mmsi}>"


def format_text(value) -> str:
    return NULL_DISPLAY if value is None or value == "" else str(value)


def format_target(target: Target) -> Dict[str, str]:
    """
    All display strings for one target

    Returns:
        field name -> display string
    """
    return {
        "name": format_name(target.name, target.mmsi),
        "mmsi": target.mmsi,
        "callsign": format_text(target.callsign),
        "imo": format_imo(target.imo),
        "type": format_text(target.type_name),
        "status": format_text(target.status),
        "destination": format_text(target.destination),
        "ais_class": format_ais_class(target.ais_class, target.is_virtual),
        "size": format_size(target.length, target.beam),
        "latitude": format_lat(target.latitude),
        "longitude": format_lon(target.longitude),
        "sog": format_speed(target.sog),
        "cog": format_angle(target.cog),
        "hdg": format_angle(target.hdg),
        "rot": format_rot(target.rot),
        "range": format_range(target.range),
        "bearing": format_bearing(target.bearing),
        "cpa": format_cpa(target.cpa),
        "tcpa": format_tcpa(target.tcpa),
    }
