"""Static reference data: stages, country lookup and thresholds."""

from .countries import IATA_TO_COUNTRY, UNKNOWN_COUNTRY
from .stages import Stage, STAGE_ORDER, STAGE_RANKS, STAGE_VALUES, parse_stage
from .thresholds import (
    ETA_WINDOW_DOMESTIC_DAYS,
    ETA_WINDOW_INTL_DAYS,
    ETA_WINDOW_UNKNOWN_DAYS,
    GAP_LAST_MILE_HOURS,
    GAP_OTHERS_HOURS,
    DWELL_P90_BUFFER_H,
    DWELL_FALLBACK_H,
    EXTERNAL_LOOKBACK_DAYS,
    WEATHER_INDEX_MIN,
    PORT_CONGESTION_MIN,
)

__all__ = [
    "IATA_TO_COUNTRY",
    "UNKNOWN_COUNTRY",
    "Stage",
    "STAGE_ORDER",
    "STAGE_RANKS",
    "STAGE_VALUES",
    "parse_stage",
    "ETA_WINDOW_DOMESTIC_DAYS",
    "ETA_WINDOW_INTL_DAYS",
    "ETA_WINDOW_UNKNOWN_DAYS",
    "GAP_LAST_MILE_HOURS",
    "GAP_OTHERS_HOURS",
    "DWELL_P90_BUFFER_H",
    "DWELL_FALLBACK_H",
    "EXTERNAL_LOOKBACK_DAYS",
    "WEATHER_INDEX_MIN",
    "PORT_CONGESTION_MIN",
]
