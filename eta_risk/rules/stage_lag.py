"""
Stage Lag (early_stage_near_eta)

Shipment is close to its ETA but has not reached the final leg.
"""

import polars as pl

from ..data.reference import Stage
from .base import RiskRule, RiskReason


class StageLag(RiskRule):
    """Stage rank is strictly before Last-Mile."""

    reason = RiskReason.EARLY_STAGE_NEAR_ETA
    reads = ("stage_rank",)

    # Thresholds
    FINAL_LEG = Stage.LAST_MILE

    @classmethod
    def conditions(cls) -> pl.Expr:
        # Absent stage has a null rank and does not fire
        return pl.col("stage_rank") < cls.FINAL_LEG.rank
