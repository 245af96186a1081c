"""
Unit conversions, timing limits and priority weights shared by the tracker
"""

# Unit conversions
METERS_PER_NM = 1852.0
KNOTS_PER_M_PER_S = 1.94384
METERS_PER_DEGREE_LAT = 111120.0     # 60 NM per degree of latitude
EARTH_RADIUS_M = 6371000.0

# Target age thresholds (seconds)
TARGET_MAX_AGE = 30 * 60             # older targets are removed
LOST_TARGET_WARNING_AGE = 10 * 60    # older targets are flagged as lost
GPS_STALE_WARNING_SECONDS = 30       # self position older than this is stale

# CPA/TCPA limits
TCPA_MAX_SECONDS = 3 * 3600          # solutions further out are discarded
MIN_RELATIVE_SPEED_SQ = 1e-8         # (m/s)^2, below this tracks are parallel
MAX_PROJECTION_LATITUDE = 89.9       # degrees, keeps cos(lat) away from zero

# Priority order base values (lower = more urgent)
ORDER_DANGER = 10000
ORDER_WARNING = 20000
ORDER_CLOSING = 30000
ORDER_DIVERGING = 40000
ORDER_NO_RANGE = 50000

# Priority order weights
HAS_TCPA_BONUS = 1000
TCPA_WEIGHT = 1000                   # full reduction at TCPA 0, none at TCPA_WEIGHT_HORIZON
TCPA_WEIGHT_HORIZON = 3600           # seconds
CPA_WEIGHT = 2000                    # full reduction at CPA 0, none at CPA_WEIGHT_HORIZON_NM
CPA_WEIGHT_HORIZON_NM = 5.0
RANGE_WEIGHT_PER_NM = 100
RANGE_WEIGHT_MAX = 5000
ORDER_MIN = -99999
ORDER_MAX = 99999

# Publish thresholds for closest-approach data
PUBLISH_CPA_METERS = 10
PUBLISH_TCPA_SECONDS = 5
PUBLISH_RANGE_METERS = 10
PUBLISH_BEARING_DEGREES = 1

NULL_DISPLAY = "---"
