"""
Risk Rule Base Class

Shared base class for all risk rules.
"""

from abc import ABC
from enum import Enum

import polars as pl


class RiskReason(str, Enum):
    """Closed vocabulary of risk reason codes, in evaluation order."""

    EARLY_STAGE_NEAR_ETA = "early_stage_near_eta"
    SCAN_GAP = "scan_gap"
    EXCESS_DWELL = "excess_dwell"
    EXTERNAL_RISK = "external_risk"


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def present(col: str) -> pl.Expr:
    """True where the column holds a usable value (zero counts as present)."""
    return pl.col(col).is_not_null()


# =============================================================================
# BASE CLASS
# =============================================================================

class RiskRule(ABC):
    """
    Base class for all risk rules.

    Rules only run for shipments that passed the gates (not delivered, has
    days_to_eta, within the lane's ETA window). Each rule contributes at most
    one reason.

    Attributes:
        IDENTITY
            reason      - RiskReason emitted when conditions() holds

        INPUTS
            reads       - Input columns the conditions depend on
    """

    # -------------------------------------------------------------------------
    # IDENTITY
    # -------------------------------------------------------------------------
    reason: RiskReason

    # -------------------------------------------------------------------------
    # INPUTS
    # -------------------------------------------------------------------------
    reads: tuple[str, ...] = ()

    # -------------------------------------------------------------------------
    # METHODS
    # -------------------------------------------------------------------------

    @classmethod
    def flag_col(cls) -> str:
        """Boolean output column for this rule (e.g. "risk_scan_gap")."""
        return f"risk_{cls.reason.value}"

    @classmethod
    def conditions(cls) -> pl.Expr:
        """
        Polars expression for when this rule fires.

        Null results (absent inputs) are treated as not firing by the caller.
        Override in every rule.
        """
        return pl.lit(False)
