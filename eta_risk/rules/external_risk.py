"""
External Conditions (external_risk)

Severe weather or port congestion while the ETA is close.

The lookback is a fixed 3 days, independent of the lane-based ETA window
used by the gate. Domestic shipments only reach this rule within 2 days.
"""

import polars as pl

from ..data.reference import EXTERNAL_LOOKBACK_DAYS, WEATHER_INDEX_MIN, PORT_CONGESTION_MIN
from .base import RiskRule, RiskReason


class ExternalRisk(RiskRule):
    """Weather index or port congestion at or above threshold near ETA."""

    reason = RiskReason.EXTERNAL_RISK
    reads = ("days_to_eta", "weather_index", "port_congestion")

    # Thresholds
    LOOKBACK_DAYS = EXTERNAL_LOOKBACK_DAYS
    WEATHER_MIN = WEATHER_INDEX_MIN
    CONGESTION_MIN = PORT_CONGESTION_MIN

    @classmethod
    def conditions(cls) -> pl.Expr:
        near_eta = pl.col("days_to_eta") <= cls.LOOKBACK_DAYS

        # Either signal alone is enough; an absent signal never fires
        severe = (
            (pl.col("weather_index") >= cls.WEATHER_MIN).fill_null(False) |
            (pl.col("port_congestion") >= cls.CONGESTION_MIN).fill_null(False)
        )

        return near_eta & severe
