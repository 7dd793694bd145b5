"""
Excess Dwell (excess_dwell)

Shipment has sat at its current checkpoint for too long.

Two tiers:
- Baseline known:   dwell > baseline P90 + buffer
- Baseline unknown: dwell >= fixed fallback threshold
"""

import polars as pl

from ..data.reference import DWELL_P90_BUFFER_H, DWELL_FALLBACK_H
from .base import RiskRule, RiskReason, present


class ExcessDwell(RiskRule):
    """Current dwell above checkpoint baseline (or absolute fallback)."""

    reason = RiskReason.EXCESS_DWELL
    reads = ("dwell_hours_current", "baseline_90pct_hours")

    # Thresholds
    P90_BUFFER_H = DWELL_P90_BUFFER_H
    FALLBACK_H = DWELL_FALLBACK_H

    @classmethod
    def conditions(cls) -> pl.Expr:
        dwell = pl.col("dwell_hours_current")
        baseline = pl.col("baseline_90pct_hours")

        return (
            pl.when(present("baseline_90pct_hours"))
            .then(dwell > baseline + cls.P90_BUFFER_H)
            .otherwise(dwell >= cls.FALLBACK_H)
        )
