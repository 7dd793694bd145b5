"""
Risk Rules Package

Exports all rule classes in evaluation order.

Processing Order:
    Gates (classify_risk.py)  - delivered, missing days_to_eta, outside window
    Rules (ALL, in order)     - stage lag, scan gap, excess dwell, external

Rules are independent: every rule that matches contributes its reason, and
reasons appear in the order of ALL.

Usage:
    from eta_risk.rules import ALL, RiskReason
"""

from ..columns import SNAPSHOT_SCHEMA, SUPPLEMENT_COLS
from .base import RiskRule, RiskReason, present
from .stage_lag import StageLag
from .scan_gap import ScanGap
from .excess_dwell import ExcessDwell
from .external_risk import ExternalRisk


# All rules - order here is the order reasons appear in output
ALL: list[type[RiskRule]] = [StageLag, ScanGap, ExcessDwell, ExternalRisk]


# =============================================================================
# HELPERS
# =============================================================================

def get_rule(reason: RiskReason | str) -> type[RiskRule]:
    """Get the rule class that emits a reason."""
    reason = RiskReason(reason)
    for rule in ALL:
        if rule.reason is reason:
            return rule
    raise KeyError(reason)


def flag_cols() -> list[str]:
    """Flag columns for all rules, in evaluation order."""
    return [rule.flag_col() for rule in ALL]


# =============================================================================
# VALIDATION
# =============================================================================

def validate_rules() -> None:
    """
    Validate rule configuration integrity.

    Raises ValueError if any configuration issues are found.
    Called at import time to fail fast on configuration errors.
    """
    errors = []
    seen = set()
    known_cols = {*SNAPSHOT_SCHEMA, *SUPPLEMENT_COLS}

    for rule in ALL:
        reason = getattr(rule, "reason", None)

        if not isinstance(reason, RiskReason):
            errors.append(f"{rule.__name__}: reason must be a RiskReason")
            continue

        # At most one rule per reason, so no reason can appear twice
        if reason in seen:
            errors.append(f"{rule.__name__}: reason '{reason.value}' already emitted by another rule")
        seen.add(reason)

        if "conditions" not in vars(rule):
            errors.append(f"{rule.__name__}: must override conditions()")

        # Rules may only read input or supplement columns
        unknown = [c for c in rule.reads if c not in known_cols]
        if unknown:
            errors.append(f"{rule.__name__}: reads unknown column(s) {unknown}")

    missing = set(RiskReason) - seen
    for reason in sorted(missing, key=list(RiskReason).index):
        errors.append(f"RiskReason '{reason.value}' has no rule in ALL")

    if errors:
        raise ValueError("Risk rule configuration errors:\n  " + "\n  ".join(errors))


# Run validation at import time
validate_rules()

__all__ = [
    # Base
    "RiskRule",
    "RiskReason",
    "present",
    # Rule classes
    "StageLag",
    "ScanGap",
    "ExcessDwell",
    "ExternalRisk",
    # Lists
    "ALL",
    # Helpers
    "get_rule",
    "flag_cols",
    "validate_rules",
]
