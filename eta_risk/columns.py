"""
Column Schema Definitions

Documents all columns at each pipeline stage. All input columns are optional:
anything missing is added as a typed null column during normalization.
"""

import polars as pl


# =============================================================================
# INPUT COLUMNS
# =============================================================================

IDENTITY_COLS = {
    "shipment_id": pl.Utf8,           # Display only
    "lane": pl.Utf8,                  # Display only (e.g. "TLV→LHR")
}

LOCATION_COLS = {
    "origin_iata": pl.Utf8,           # 3-letter IATA airport code
    "destination_iata": pl.Utf8,
    "origin_country": pl.Utf8,        # ISO alpha-2, wins over IATA lookup
    "destination_country": pl.Utf8,
}

PROGRESS_COLS = {
    "stage": pl.Utf8,                 # Stage value, null if absent/unknown
    "days_to_eta": pl.Float64,        # Signed days to planned ETA
    "scan_gap_hours": pl.Float64,     # Hours since last tracking scan
    "dwell_hours_current": pl.Float64,  # Hours at current checkpoint
    "baseline_90pct_hours": pl.Float64, # Historical P90 dwell for checkpoint
}

EXTERNAL_COLS = {
    "weather_index": pl.Float64,      # Ordinal severity
    "port_congestion": pl.Float64,    # Ordinal severity
}

# Descriptive metadata, passed through and never read by the rules
METADATA_COLS = {
    "eta_planned": pl.Utf8,           # ISO-8601
    "last_update_ts": pl.Utf8,        # ISO-8601
    "current_carrier_name": pl.Utf8,
    "owner": pl.Utf8,
    "severity": pl.Utf8,
    "reason_code": pl.List(pl.Utf8),  # Labelled reasons, if any
}

NUMERIC_COLS = [c for c in [*PROGRESS_COLS, *EXTERNAL_COLS] if c != "stage"]

STRING_COLS = [*IDENTITY_COLS, *LOCATION_COLS, "stage"]

SNAPSHOT_SCHEMA = {
    **IDENTITY_COLS,
    **LOCATION_COLS,
    **PROGRESS_COLS,
    **EXTERNAL_COLS,
    **METADATA_COLS,
}


# =============================================================================
# SUPPLEMENT COLUMNS (added by supplement_shipments)
# =============================================================================

SUPPLEMENT_COLS = [
    "origin_country_resolved",        # Explicit country, IATA lookup, or "unknown"
    "destination_country_resolved",
    "lane_type",                      # "domestic", "international", "indeterminate"
    "eta_window_days",                # 2 domestic, 3 otherwise
    "stage_rank",                     # 1..7, null if stage absent
]


# =============================================================================
# RISK COLUMNS (added by calculate)
# =============================================================================

# Plus one risk_<reason> flag per rule (see RiskRule.flag_col)
RISK_COLS = [
    "risk_evaluated",                 # All gates passed
    "risk_reasons",                   # list[str] in rule order
    "at_risk",                        # True if any reason fired
]


# =============================================================================
# METADATA COLUMNS
# =============================================================================

VERSION_COLS = [
    "classifier_version",             # Version stamp from eta_risk/version.py
]
