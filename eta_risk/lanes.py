"""
Lane Resolution

Resolves origin/destination countries, classifies the lane and selects the
ETA window that gates risk evaluation.

Each step comes as a scalar helper for a single snapshot and as a polars
expression used by supplement_shipments().

COUNTRY RESOLUTION (per side)
-----------------------------
    1. Explicit origin_country / destination_country
    2. IATA code looked up in IATA_TO_COUNTRY (or a caller table: a mapping,
       or a frame whose first two columns are IATA code and country)
    3. "unknown" (incomplete data, not an error)

LANE TYPE
---------
    indeterminate  - either side unknown
    domestic       - both sides equal (exact, case-sensitive)
    international  - otherwise
"""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

import polars as pl

from .data.reference import (
    IATA_TO_COUNTRY,
    UNKNOWN_COUNTRY,
    ETA_WINDOW_DOMESTIC_DAYS,
    ETA_WINDOW_INTL_DAYS,
    ETA_WINDOW_UNKNOWN_DAYS,
)
from .data.loaders import normalize_snapshot


class LaneType(str, Enum):
    """Lane classification from resolved countries."""

    DOMESTIC = "domestic"
    INTERNATIONAL = "international"
    INDETERMINATE = "indeterminate"


ETA_WINDOWS = MappingProxyType({
    LaneType.DOMESTIC: ETA_WINDOW_DOMESTIC_DAYS,
    LaneType.INTERNATIONAL: ETA_WINDOW_INTL_DAYS,
    LaneType.INDETERMINATE: ETA_WINDOW_UNKNOWN_DAYS,
})

CountryTable = Mapping[str, str] | pl.DataFrame

# Built once per process
_DEFAULT_LOOKUP = dict(IATA_TO_COUNTRY)


def country_lookup(countries: CountryTable | None = None) -> dict[str, str]:
    """
    IATA -> country dict from a caller table.

    Args:
        countries: Mapping, or DataFrame with IATA codes in the first column
            and countries in the second (IATA_TO_COUNTRY if not provided)

    Raises:
        ValueError: Frame with fewer than two columns, or any other type
    """
    if countries is None:
        return _DEFAULT_LOOKUP

    if isinstance(countries, pl.DataFrame):
        if countries.width < 2:
            raise ValueError(
                f"Country table frame needs IATA and country columns, got {countries.columns}"
            )
        iata, country = countries.columns[:2]
        pairs = countries.select(
            pl.col(iata).cast(pl.Utf8),
            pl.col(country).cast(pl.Utf8),
        ).drop_nulls()
        return dict(pairs.rows())

    if isinstance(countries, Mapping):
        return dict(countries)

    raise ValueError(
        f"Country table must be a mapping or a DataFrame, got {type(countries).__name__}"
    )


# =============================================================================
# SCALAR HELPERS
# =============================================================================

def resolve_countries(
    shipment: Any,
    countries: CountryTable | None = None
) -> tuple[str, str]:
    """
    Resolve (origin_country, destination_country) for one snapshot.

    Args:
        shipment: Raw snapshot (any mapping; non-mappings resolve to unknown)
        countries: IATA -> country table (see country_lookup)

    Returns:
        Tuple of country codes, "unknown" where unresolved
    """
    lookup = country_lookup(countries)

    row = normalize_snapshot(shipment)
    return (
        _resolve_side(row["origin_country"], row["origin_iata"], lookup),
        _resolve_side(row["destination_country"], row["destination_iata"], lookup),
    )


def _resolve_side(country: str | None, iata: str | None, countries: Mapping[str, str]) -> str:
    # Blank explicit countries are absent here and fall back to the IATA code
    if country is not None:
        return country
    if iata is not None and iata in countries:
        return countries[iata]
    return UNKNOWN_COUNTRY


def classify_lane(origin_country: str | None, destination_country: str | None) -> LaneType:
    """Classify a lane from resolved countries (None counts as unknown)."""
    unresolved = (None, UNKNOWN_COUNTRY)
    if origin_country in unresolved or destination_country in unresolved:
        return LaneType.INDETERMINATE
    if origin_country == destination_country:
        return LaneType.DOMESTIC
    return LaneType.INTERNATIONAL


def eta_window_days(lane_type: LaneType | str) -> int:
    """Days-to-ETA window for a lane type."""
    return ETA_WINDOWS[LaneType(lane_type)]


# =============================================================================
# POLARS EXPRESSIONS
# =============================================================================

def resolved_country_expr(side: str, countries: CountryTable | None = None) -> pl.Expr:
    """
    Resolved country for one side ("origin" or "destination").

    Produces column <side>_country_resolved.
    """
    lookup = country_lookup(countries)

    if lookup:
        looked_up = pl.col(f"{side}_iata").replace_strict(
            lookup, default=None, return_dtype=pl.Utf8
        )
    else:
        looked_up = pl.lit(None, dtype=pl.Utf8)

    return pl.coalesce(
        pl.col(f"{side}_country"),
        looked_up,
        pl.lit(UNKNOWN_COUNTRY),
    ).alias(f"{side}_country_resolved")


def lane_type_expr() -> pl.Expr:
    """Lane type from resolved country columns. Produces column lane_type."""
    origin = pl.col("origin_country_resolved")
    destination = pl.col("destination_country_resolved")

    return (
        pl.when((origin == UNKNOWN_COUNTRY) | (destination == UNKNOWN_COUNTRY))
        .then(pl.lit(LaneType.INDETERMINATE.value))
        .when(origin == destination)
        .then(pl.lit(LaneType.DOMESTIC.value))
        .otherwise(pl.lit(LaneType.INTERNATIONAL.value))
        .alias("lane_type")
    )


def eta_window_expr() -> pl.Expr:
    """ETA window from lane_type. Produces column eta_window_days."""
    windows = {lane.value: days for lane, days in ETA_WINDOWS.items()}

    return pl.col("lane_type").replace_strict(
        windows, default=ETA_WINDOW_UNKNOWN_DAYS, return_dtype=pl.Int64
    ).alias("eta_window_days")


__all__ = [
    "LaneType",
    "ETA_WINDOWS",
    "CountryTable",
    "country_lookup",
    "resolve_countries",
    "classify_lane",
    "eta_window_days",
    "resolved_country_expr",
    "lane_type_expr",
    "eta_window_expr",
]
