"""
Risk Thresholds

Tunable thresholds for the ETA window gate and the risk rules.
"""

# ETA windows (days) by lane type
ETA_WINDOW_DOMESTIC_DAYS = 2
ETA_WINDOW_INTL_DAYS = 3
ETA_WINDOW_UNKNOWN_DAYS = ETA_WINDOW_INTL_DAYS  # Wider window, don't miss risks

# Scan gap (hours since last scan)
GAP_LAST_MILE_HOURS = 12
GAP_OTHERS_HOURS = 24

# Dwell at current checkpoint
DWELL_P90_BUFFER_H = 1.0    # Allowed excess over baseline P90
DWELL_FALLBACK_H = 18.0     # Absolute threshold when no baseline

# External conditions
EXTERNAL_LOOKBACK_DAYS = 3  # Fixed, independent of the lane window
WEATHER_INDEX_MIN = 3
PORT_CONGESTION_MIN = 7
