"""
ETA Risk Data

Reference data and loaders.

Structure:
    - reference/: Static reference data (stages, countries, thresholds)
    - loaders/: Snapshot normalization and file loaders
"""

from .reference import (
    IATA_TO_COUNTRY,
    UNKNOWN_COUNTRY,
    Stage,
    STAGE_ORDER,
    STAGE_RANKS,
    STAGE_VALUES,
    parse_stage,
    ETA_WINDOW_DOMESTIC_DAYS,
    ETA_WINDOW_INTL_DAYS,
    ETA_WINDOW_UNKNOWN_DAYS,
)
from .loaders import (
    normalize_snapshot,
    shipments_to_frame,
    normalize_frame,
    load_snapshots,
)

__all__ = [
    # Reference data
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
    # Loaders
    "normalize_snapshot",
    "shipments_to_frame",
    "normalize_frame",
    "load_snapshots",
]
