"""
Shipment Snapshot Normalization

Turns raw snapshots into a typed polars DataFrame. Snapshots can come from
any source (tracking feed export, JSON file, manual creation). Every field is
optional; anything unusable becomes null so the matching rule is skipped.

PRESENCE RULES
--------------
    numbers  - int/float (not bool, not NaN); zero is present
    text     - non-empty string
    stage    - exact Stage value; anything else is absent (logged)
    external - top-level weather_index/port_congestion, else the nested
               "external" object
"""

import logging
import math
import numbers
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

import polars as pl

from ...columns import (
    SNAPSHOT_SCHEMA,
    IDENTITY_COLS,
    LOCATION_COLS,
    PROGRESS_COLS,
    EXTERNAL_COLS,
    NUMERIC_COLS,
    STRING_COLS,
)
from ..reference import STAGE_VALUES, parse_stage

logger = logging.getLogger(__name__)


TIMESTAMP_COLS = ["eta_planned", "last_update_ts"]
TEXT_METADATA_COLS = ["current_carrier_name", "owner", "severity"]


# =============================================================================
# SCALAR HELPERS
# =============================================================================

def as_number(value: Any) -> float | None:
    """Return value as float if it is a usable number, else None."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    try:
        value = float(value)
    except OverflowError:
        return None
    if math.isnan(value):
        return None
    return value


def as_text(value: Any) -> str | None:
    """Return value if it is a non-empty string, else None."""
    if isinstance(value, str) and value.strip():
        return value
    return None


def _as_timestamp_text(value: Any) -> str | None:
    if isinstance(value, date):
        return value.isoformat()
    return as_text(value)


# =============================================================================
# RECORDS -> DATAFRAME
# =============================================================================

def normalize_snapshot(record: Any) -> dict[str, Any]:
    """
    Normalize one raw snapshot into a flat row with every schema column.

    Never raises. A record that is not a mapping yields a row of nulls.
    """
    row = dict.fromkeys(SNAPSHOT_SCHEMA)

    if not isinstance(record, Mapping):
        logger.debug(
            "Snapshot of type %s is not a mapping; all fields absent",
            type(record).__name__,
        )
        return row

    for col in [*IDENTITY_COLS, *LOCATION_COLS]:
        row[col] = as_text(record.get(col))

    raw_stage = record.get("stage")
    stage = parse_stage(raw_stage)
    if stage is None and raw_stage is not None:
        logger.warning(
            "Shipment %s: unrecognized stage %r, treated as absent",
            row["shipment_id"], raw_stage,
        )
    row["stage"] = stage.value if stage is not None else None

    for col in PROGRESS_COLS:
        if col != "stage":
            row[col] = as_number(record.get(col))

    # Top-level value wins over the nested "external" object
    external = record.get("external")
    if not isinstance(external, Mapping):
        external = {}
    for col in EXTERNAL_COLS:
        value = as_number(record.get(col))
        row[col] = value if value is not None else as_number(external.get(col))

    for col in TIMESTAMP_COLS:
        row[col] = _as_timestamp_text(record.get(col))
    for col in TEXT_METADATA_COLS:
        row[col] = as_text(record.get(col))

    reason_code = record.get("reason_code")
    if isinstance(reason_code, (list, tuple)):
        row["reason_code"] = [r for r in reason_code if isinstance(r, str)]

    return row


def shipments_to_frame(records: Iterable[Any]) -> pl.DataFrame:
    """Normalize raw snapshots into a DataFrame with SNAPSHOT_SCHEMA."""
    rows = [normalize_snapshot(r) for r in records]

    if not rows:
        return pl.DataFrame(schema=SNAPSHOT_SCHEMA)

    return pl.from_dicts(rows, schema=SNAPSHOT_SCHEMA)


# =============================================================================
# DATAFRAME -> DATAFRAME
# =============================================================================

def normalize_frame(df: pl.DataFrame) -> pl.DataFrame:
    """
    Normalize an existing shipment DataFrame to the snapshot schema.

    Missing columns are added as typed nulls, numeric columns are cast to
    Float64 (NaN becomes null), blank strings become null and unrecognized
    stages become null. Extra columns are kept as-is.
    """
    exprs = []
    for col, dtype in SNAPSHOT_SCHEMA.items():
        if col not in df.columns:
            exprs.append(pl.lit(None, dtype=dtype).alias(col))
        elif col in NUMERIC_COLS:
            exprs.append(_numeric_column(df, col))
        elif col in STRING_COLS:
            exprs.append(_text_column(df, col))

    df = df.with_columns(exprs)
    df = _merge_external(df)
    df = _null_unknown_stages(df)

    return df


def _numeric_column(df: pl.DataFrame, col: str) -> pl.Expr:
    """Cast to Float64 if numeric; otherwise the whole column is absent."""
    dtype = df.schema[col]

    if dtype.is_numeric():
        return pl.col(col).cast(pl.Float64).fill_nan(None).alias(col)

    if df[col].null_count() < len(df):
        logger.warning("Column %s has non-numeric dtype %s, treated as absent", col, dtype)
    return pl.lit(None, dtype=pl.Float64).alias(col)


def _text_column(df: pl.DataFrame, col: str) -> pl.Expr:
    """Keep string values, nulling blanks; other dtypes are absent."""
    dtype = df.schema[col]

    if dtype == pl.Utf8 or isinstance(dtype, (pl.Categorical, pl.Enum)):
        text = pl.col(col).cast(pl.Utf8)
        return pl.when(text.str.strip_chars() != "").then(text).otherwise(None).alias(col)

    if df[col].null_count() < len(df):
        logger.warning("Column %s has non-string dtype %s, treated as absent", col, dtype)
    return pl.lit(None, dtype=pl.Utf8).alias(col)


def _merge_external(df: pl.DataFrame) -> pl.DataFrame:
    """Fill external columns from a nested "external" struct column, if any."""
    if "external" not in df.columns or not isinstance(df.schema["external"], pl.Struct):
        return df

    fields = {f.name: f.dtype for f in df.schema["external"].fields}
    exprs = []
    for col in EXTERNAL_COLS:
        dtype = fields.get(col)
        if dtype is None or not dtype.is_numeric():
            continue
        nested = pl.col("external").struct.field(col).cast(pl.Float64).fill_nan(None)
        exprs.append(pl.coalesce(pl.col(col), nested).alias(col))

    return df.with_columns(exprs) if exprs else df


def _null_unknown_stages(df: pl.DataFrame) -> pl.DataFrame:
    """Replace stage values outside the Stage enumeration with null."""
    known = pl.col("stage").is_in(list(STAGE_VALUES))

    unknown = df.filter(pl.col("stage").is_not_null() & ~known)["stage"].unique().sort()
    if len(unknown) > 0:
        logger.warning(
            "Unrecognized stage value(s) %s, treated as absent",
            unknown.to_list(),
        )

    return df.with_columns(
        pl.when(known).then(pl.col("stage")).otherwise(None).alias("stage")
    )


__all__ = [
    "as_number",
    "as_text",
    "normalize_snapshot",
    "shipments_to_frame",
    "normalize_frame",
]
