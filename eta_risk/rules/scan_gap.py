"""
Scan Gap (scan_gap)

Too long since the last tracking scan. Last-Mile shipments are scanned more
often, so they get a tighter threshold.
"""

import polars as pl

from ..data.reference import Stage, GAP_LAST_MILE_HOURS, GAP_OTHERS_HOURS
from .base import RiskRule, RiskReason


class ScanGap(RiskRule):
    """Hours since last scan exceed the stage-dependent threshold."""

    reason = RiskReason.SCAN_GAP
    reads = ("stage", "scan_gap_hours")

    # Thresholds
    LAST_MILE_HOURS = GAP_LAST_MILE_HOURS
    OTHERS_HOURS = GAP_OTHERS_HOURS

    @classmethod
    def threshold(cls) -> pl.Expr:
        """Gap threshold in hours for each row."""
        return (
            pl.when(pl.col("stage") == Stage.LAST_MILE.value)
            .then(pl.lit(cls.LAST_MILE_HOURS))
            .otherwise(pl.lit(cls.OTHERS_HOURS))
        )

    @classmethod
    def conditions(cls) -> pl.Expr:
        return pl.col("scan_gap_hours") > cls.threshold()
