"""
Compare Computed Reasons to Labelled Reason Codes
=================================================

Runs the classifier over labelled snapshots (records carrying a reason_code
list) and reports where computed reasons differ from the labels.

Reasons are compared as sets. Records without reason_code are skipped.

Usage:
    python -m eta_risk.scripts.compare_reason_codes shipments.json
    python -m eta_risk.scripts.compare_reason_codes shipments.csv --strict
"""

import argparse
import logging
import sys
from pathlib import Path

import polars as pl

from eta_risk.classify_risk import classify_risk
from eta_risk.data.loaders import load_snapshots
from eta_risk.rules import ALL


# =============================================================================
# COMPARISON
# =============================================================================

def compare_reason_codes(df: pl.DataFrame) -> pl.DataFrame:
    """
    Compare risk_reasons to reason_code for labelled rows.

    Args:
        df: Classified DataFrame from classify_risk (with reason_code column)

    Returns:
        One row per labelled shipment with columns:
            - shipment_id, reason_code, risk_reasons
            - missed: labelled but not computed
            - extra: computed but not labelled
            - matches: True if both sets are equal
    """
    labelled = df.filter(pl.col("reason_code").is_not_null())

    return (
        labelled
        .select(["shipment_id", "reason_code", "risk_reasons"])
        .with_columns([
            pl.col("reason_code").list.set_difference(pl.col("risk_reasons")).alias("missed"),
            pl.col("risk_reasons").list.set_difference(pl.col("reason_code")).alias("extra"),
        ])
        .with_columns(
            ((pl.col("missed").list.len() == 0) & (pl.col("extra").list.len() == 0)).alias("matches")
        )
    )


def reason_breakdown(df: pl.DataFrame) -> pl.DataFrame:
    """
    Per-reason agreement over labelled rows.

    Returns:
        DataFrame with columns: reason, labelled, computed, missed, extra
    """
    labelled = df.filter(pl.col("reason_code").is_not_null())
    rows = []

    for rule in ALL:
        expected = labelled["reason_code"].list.contains(rule.reason.value)
        computed = labelled[rule.flag_col()]
        rows.append({
            "reason": rule.reason.value,
            "labelled": int(expected.sum()),
            "computed": int(computed.sum()),
            "missed": int((expected & ~computed).sum()),
            "extra": int((computed & ~expected).sum()),
        })

    return pl.DataFrame(rows, schema={
        "reason": pl.Utf8,
        "labelled": pl.Int64,
        "computed": pl.Int64,
        "missed": pl.Int64,
        "extra": pl.Int64,
    })


# =============================================================================
# REPORTING
# =============================================================================

def print_report(comparison: pl.DataFrame, breakdown: pl.DataFrame) -> None:
    """Print mismatches and per-reason table."""
    total = len(comparison)
    matched = int(comparison["matches"].sum())

    print("=" * 60)
    print("REASON CODE COMPARISON")
    print("=" * 60)
    print(f"Labelled shipments: {total:,}")
    print(f"Matching:           {matched:,}")
    print(f"Mismatching:        {total - matched:,}")

    mismatches = comparison.filter(~pl.col("matches"))
    if len(mismatches) > 0:
        print("\n--- Mismatches ---")
        for row in mismatches.iter_rows(named=True):
            print(
                f"{row['shipment_id'] or '<no id>'}: "
                f"labelled={row['reason_code']} computed={row['risk_reasons']} "
                f"missed={row['missed']} extra={row['extra']}"
            )

    print("\n--- By Reason ---")
    print(f"{'reason':<24}{'labelled':>10}{'computed':>10}{'missed':>8}{'extra':>8}")
    for row in breakdown.iter_rows(named=True):
        print(
            f"{row['reason']:<24}{row['labelled']:>10}{row['computed']:>10}"
            f"{row['missed']:>8}{row['extra']:>8}"
        )
    print()


# =============================================================================
# MAIN
# =============================================================================

def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compare computed risk reasons to labelled reason codes"
    )
    parser.add_argument("input", type=Path, help="Labelled snapshot file (.json, .ndjson, .jsonl, .csv)")
    parser.add_argument("--strict", action="store_true", help="Exit 1 on any mismatch")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    df = classify_risk(load_snapshots(args.input))
    comparison = compare_reason_codes(df)

    if len(comparison) == 0:
        print(f"No labelled shipments (reason_code) in {args.input}")
        return 0

    print_report(comparison, reason_breakdown(df))

    if args.strict and not comparison["matches"].all():
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
