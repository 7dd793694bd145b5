"""
Shipment ETA Risk Classifier

DataFrame in, DataFrame out. The input can come from any source (tracking
export, JSON/CSV snapshot file, manual creation). All input columns are
optional; missing ones are treated as absent data. The output is the same
DataFrame with lane and risk columns appended.

INPUT COLUMNS (all optional)
----------------------------
    origin_iata, destination_iata         - IATA airport codes
    origin_country, destination_country   - ISO alpha-2, win over IATA lookup
    stage                                 - Stage value (Origin Pickup ... Delivered)
    days_to_eta                           - Signed days to planned ETA
    scan_gap_hours                        - Hours since last scan
    dwell_hours_current                   - Hours at current checkpoint
    baseline_90pct_hours                  - Historical P90 dwell for checkpoint
    weather_index, port_congestion        - External severity indices

OUTPUT COLUMNS ADDED
--------------------
    supplement_shipments() adds:
        - origin_country_resolved, destination_country_resolved
        - lane_type, eta_window_days, stage_rank

    calculate() adds:
        - risk_evaluated (all gates passed)
        - risk_* flags (early_stage_near_eta, scan_gap, excess_dwell, external_risk)
        - risk_reasons (list in rule order), at_risk
        - classifier_version

USAGE
-----
    from eta_risk.classify_risk import classify_risk, classify, is_at_risk
    result = classify_risk(df)
    reasons = classify(snapshot_dict)
"""

import logging
from typing import Any

import polars as pl

from .version import VERSION
from .data import Stage, STAGE_RANKS, shipments_to_frame, normalize_frame
from .lanes import CountryTable, resolved_country_expr, lane_type_expr, eta_window_expr
from .rules import ALL, RiskReason

logger = logging.getLogger(__name__)


# =============================================================================
# MAIN ENTRY POINTS
# =============================================================================

def classify_risk(
    df: pl.DataFrame,
    countries: CountryTable | None = None
) -> pl.DataFrame:
    """
    Classify ETA risk for a shipment DataFrame.

    This is the main batch entry point. Takes snapshot rows and returns the
    same DataFrame with lane columns, risk flags and reasons appended.

    Args:
        df: Shipment DataFrame (see module docstring for columns)
        countries: IATA -> country table, mapping or two-column DataFrame
            (IATA_TO_COUNTRY if not provided)

    Returns:
        DataFrame with supplemented lane data, risk flags and reasons
    """
    df = normalize_frame(df)
    df = supplement_shipments(df, countries)
    df = calculate(df)

    logger.debug(
        "Classified %d shipment(s), %d at risk",
        len(df), df["at_risk"].sum(),
    )
    return df


def classify(shipment: Any) -> list[RiskReason]:
    """
    Risk reasons for a single shipment snapshot.

    Never raises on bad data: missing or malformed fields only skip the
    checks that need them, and a snapshot that is not a mapping at all
    yields no reasons.

    Returns:
        Reasons in rule evaluation order (empty if not at risk)
    """
    df = classify_risk(shipments_to_frame([shipment]))
    row = df.row(0, named=True)
    return [RiskReason(r) for r in row["risk_reasons"]]


def is_at_risk(shipment: Any) -> bool:
    """True if the shipment has at least one risk reason."""
    return len(classify(shipment)) > 0


# =============================================================================
# SUPPLEMENT SHIPMENTS
# =============================================================================

def supplement_shipments(
    df: pl.DataFrame,
    countries: CountryTable | None = None
) -> pl.DataFrame:
    """
    Supplement normalized shipments with lane and stage data.

    Args:
        df: Normalized shipment DataFrame (see normalize_frame)
        countries: IATA -> country table, mapping or two-column DataFrame
            (IATA_TO_COUNTRY if not provided)

    Returns:
        DataFrame with added columns:
            - origin_country_resolved, destination_country_resolved
            - lane_type, eta_window_days
            - stage_rank
    """
    df = _resolve_countries(df, countries)
    df = _classify_lanes(df)
    df = _add_stage_rank(df)

    return df


def _resolve_countries(df: pl.DataFrame, countries: CountryTable | None) -> pl.DataFrame:
    """Explicit country, else IATA lookup, else "unknown"."""
    return df.with_columns([
        resolved_country_expr("origin", countries),
        resolved_country_expr("destination", countries),
    ])


def _classify_lanes(df: pl.DataFrame) -> pl.DataFrame:
    """Lane type, then the ETA window it selects."""
    df = df.with_columns(lane_type_expr())
    df = df.with_columns(eta_window_expr())
    return df


def _add_stage_rank(df: pl.DataFrame) -> pl.DataFrame:
    """Pipeline rank 1..7, null where stage is absent."""
    return df.with_columns(
        pl.col("stage")
        .replace_strict(dict(STAGE_RANKS), default=None, return_dtype=pl.Int64)
        .alias("stage_rank")
    )


# =============================================================================
# CALCULATE RISK
# =============================================================================

def calculate(df: pl.DataFrame) -> pl.DataFrame:
    """
    Evaluate gates and risk rules for supplemented shipments.

    Args:
        df: Supplemented shipment DataFrame from supplement_shipments

    Returns:
        DataFrame with risk flags, reasons and at_risk

    Processing order:
        1. Gates  - delivered, missing days_to_eta, outside ETA window
        2. Rules  - every rule in ALL, only where gates passed
        3. Reasons collected in rule order
    """
    # Phase 1: Gates (any failing gate means no reasons at all)
    df = _apply_gates(df)

    # Phase 2: Independent rules
    df = _apply_rules(df, ALL)

    # Phase 3: Collect reasons
    df = _collect_reasons(df, ALL)

    # Phase 4: Stamp version
    df = _stamp_version(df)

    return df


def _apply_gates(df: pl.DataFrame) -> pl.DataFrame:
    """
    Add risk_evaluated: True only if every gate passes.

    GATES
    -----
    1. Terminal  - stage is Delivered (never at risk)
    2. Data      - days_to_eta absent (no signal, not flagged)
    3. Window    - days_to_eta above the lane's ETA window
    """
    not_delivered = (pl.col("stage") != Stage.DELIVERED.value).fill_null(True)
    has_eta = pl.col("days_to_eta").is_not_null()
    within_window = (pl.col("days_to_eta") <= pl.col("eta_window_days")).fill_null(False)

    return df.with_columns(
        (not_delivered & has_eta & within_window).alias("risk_evaluated")
    )


def _apply_rules(df: pl.DataFrame, rules: list) -> pl.DataFrame:
    """Apply each rule as a flag column (absent inputs never fire)."""
    return df.with_columns([
        (pl.col("risk_evaluated") & rule.conditions().fill_null(False)).alias(rule.flag_col())
        for rule in rules
    ])


def _collect_reasons(df: pl.DataFrame, rules: list) -> pl.DataFrame:
    """Build risk_reasons (list in rule order) and at_risk."""
    reasons = pl.concat_list([
        pl.when(pl.col(rule.flag_col()))
        .then(pl.lit(rule.reason.value))
        .otherwise(pl.lit(None, dtype=pl.Utf8))
        for rule in rules
    ]).list.drop_nulls()

    df = df.with_columns(reasons.alias("risk_reasons"))
    df = df.with_columns((pl.col("risk_reasons").list.len() > 0).alias("at_risk"))

    return df


def _stamp_version(df: pl.DataFrame) -> pl.DataFrame:
    """Stamp classifier version on output."""
    return df.with_columns(pl.lit(VERSION).alias("classifier_version"))


__all__ = [
    "classify_risk",
    "classify",
    "is_at_risk",
    "supplement_shipments",
    "calculate",
]
