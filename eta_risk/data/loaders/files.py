"""
Snapshot File Loaders

Reads shipment snapshots from disk:
    .json            - array of snapshot objects (or a single object)
    .ndjson / .jsonl - one snapshot object per line
    .csv             - flat columns; reason_code as ";"-separated list
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path

import polars as pl

from ...columns import STRING_COLS, NUMERIC_COLS, METADATA_COLS
from .snapshots import shipments_to_frame, normalize_frame

logger = logging.getLogger(__name__)


JSON_SUFFIXES = {".json"}
NDJSON_SUFFIXES = {".ndjson", ".jsonl"}
CSV_SUFFIXES = {".csv"}

REASON_CODE_SEPARATOR = ";"


def load_snapshots(path: str | Path) -> pl.DataFrame:
    """
    Load shipment snapshots from a file into a normalized DataFrame.

    Raises:
        ValueError: Unsupported file extension, or JSON that is not an
            object or an array of objects
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix in JSON_SUFFIXES:
        df = _load_json(path)
    elif suffix in NDJSON_SUFFIXES:
        df = _load_ndjson(path)
    elif suffix in CSV_SUFFIXES:
        df = _load_csv(path)
    else:
        raise ValueError(
            f"Unsupported snapshot file '{path.name}'. "
            f"Expected one of: {sorted(JSON_SUFFIXES | NDJSON_SUFFIXES | CSV_SUFFIXES)}"
        )

    logger.debug("Loaded %d snapshot(s) from %s", len(df), path)
    return df


def _load_json(path: Path) -> pl.DataFrame:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, Mapping):
        data = [data]
    if not isinstance(data, list):
        raise ValueError(
            f"{path.name}: expected a JSON array of snapshots, got {type(data).__name__}"
        )

    return shipments_to_frame(data)


def _load_ndjson(path: Path) -> pl.DataFrame:
    with open(path, "r", encoding="utf-8") as f:
        records = [json.loads(line) for line in f if line.strip()]

    return shipments_to_frame(records)


def _load_csv(path: Path) -> pl.DataFrame:
    # Keep codes and ids as strings (e.g. shipment_id 1029, stage "Customs").
    # Numerics are read as text and parsed per cell, so one bad value
    # does not turn the whole column into strings.
    header = pl.read_csv(path, n_rows=0).columns
    text_cols = [*STRING_COLS, *[c for c, t in METADATA_COLS.items() if t == pl.Utf8], "reason_code"]
    overrides = {c: pl.Utf8 for c in [*text_cols, *NUMERIC_COLS] if c in header}

    df = pl.read_csv(path, schema_overrides=overrides, infer_schema_length=None)
    df = df.with_columns([
        pl.col(c).str.strip_chars().cast(pl.Float64, strict=False)
        for c in NUMERIC_COLS if c in df.columns
    ])

    if "reason_code" in df.columns:
        df = df.with_columns(
            pl.col("reason_code")
            .str.split(REASON_CODE_SEPARATOR)
            .list.eval(pl.element().str.strip_chars())
            .list.eval(pl.element().filter(pl.element() != ""))
            .alias("reason_code")
        )

    return normalize_frame(df)
