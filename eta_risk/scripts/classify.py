"""
Classify Shipment Snapshots
===========================

Runs the ETA risk classifier over a snapshot file and prints one line per
shipment, followed by a summary of reasons.

Usage:
    python -m eta_risk.scripts.classify shipments.json
    python -m eta_risk.scripts.classify shipments.csv --at-risk-only
    python -m eta_risk.scripts.classify shipments.json --output results.csv
    python -m eta_risk.scripts.classify shipments.ndjson --output results.ndjson --verbose
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import polars as pl

from eta_risk.classify_risk import classify_risk
from eta_risk.columns import SNAPSHOT_SCHEMA, SUPPLEMENT_COLS, RISK_COLS, VERSION_COLS
from eta_risk.data.loaders import load_snapshots, REASON_CODE_SEPARATOR
from eta_risk.rules import ALL, flag_cols
from eta_risk.version import VERSION


# =============================================================================
# CONFIGURATION
# =============================================================================

# Columns to write (inputs, lane data, flags, reasons, version)
OUTPUT_COLUMNS = [
    *[c for c in SNAPSHOT_SCHEMA if c != "reason_code"],
    *SUPPLEMENT_COLS,
    *flag_cols(),
    *RISK_COLS,
    *VERSION_COLS,
]


# =============================================================================
# FORMATTING
# =============================================================================

def format_result_line(shipment_id: str | None, at_risk: bool, reasons: list[str]) -> str:
    """Format one result as "<id> at_risk=<bool> reasons=<list>"."""
    return f"{shipment_id or '<no id>'}  at_risk={at_risk}  reasons={json.dumps(list(reasons))}"


def print_results(df: pl.DataFrame) -> None:
    """Print one line per shipment."""
    for row in df.select(["shipment_id", "at_risk", "risk_reasons"]).iter_rows(named=True):
        print(format_result_line(row["shipment_id"], row["at_risk"], row["risk_reasons"]))


def summarize(df: pl.DataFrame) -> dict[str, int]:
    """Count of shipments per reason, plus totals."""
    summary = {
        "shipments": len(df),
        "evaluated": int(df["risk_evaluated"].sum()),
        "at_risk": int(df["at_risk"].sum()),
    }
    for rule in ALL:
        summary[rule.reason.value] = int(df[rule.flag_col()].sum())
    return summary


def print_summary(summary: dict[str, int]) -> None:
    print("\n" + "=" * 50)
    print("SUMMARY")
    print("=" * 50)
    for key, value in summary.items():
        print(f"{key:<24}{value:>8,}")
    print()


# =============================================================================
# OUTPUT
# =============================================================================

def write_output(df: pl.DataFrame, path: Path) -> None:
    """
    Write results to .csv (reasons joined by ";") or .ndjson/.jsonl.

    Raises:
        ValueError: Unsupported output extension
    """
    df = df.select(OUTPUT_COLUMNS)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        df.with_columns(
            pl.col("risk_reasons").list.join(REASON_CODE_SEPARATOR)
        ).write_csv(path)
    elif suffix in (".ndjson", ".jsonl"):
        df.write_ndjson(path)
    else:
        raise ValueError(f"Unsupported output file '{path.name}'. Expected .csv, .ndjson or .jsonl")


# =============================================================================
# MAIN
# =============================================================================

def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Classify shipment snapshots for ETA risk"
    )
    parser.add_argument("input", type=Path, help="Snapshot file (.json, .ndjson, .jsonl, .csv)")
    parser.add_argument("--output", type=Path, default=None, help="Write results (.csv, .ndjson)")
    parser.add_argument("--at-risk-only", action="store_true", help="Only print/write at-risk shipments")
    parser.add_argument("--no-summary", action="store_true", help="Skip the summary table")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        df = classify_risk(load_snapshots(args.input))
        summary = summarize(df)

        if args.at_risk_only:
            df = df.filter(pl.col("at_risk"))

        print(f"ETA risk classifier v{VERSION}: {args.input}\n")
        print_results(df)

        if not args.no_summary:
            print_summary(summary)

        if args.output is not None:
            write_output(df, args.output)
            print(f"Results saved to: {args.output}")

    except KeyboardInterrupt:
        print("\n\nCancelled.")
        return 130
    except Exception as e:
        print(f"\nError: {e}", file=sys.stderr)
        raise

    return 0


if __name__ == "__main__":
    sys.exit(main())
