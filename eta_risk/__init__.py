"""
ETA Risk Module

Flags shipments at risk of missing their delivery ETA, with machine-readable
reason codes.
"""

from .classify_risk import classify_risk, classify, is_at_risk
from .lanes import LaneType, resolve_countries, classify_lane, eta_window_days
from .rules import RiskReason
from .data import Stage, load_snapshots
from .version import VERSION

__all__ = [
    "classify_risk",
    "classify",
    "is_at_risk",
    "LaneType",
    "resolve_countries",
    "classify_lane",
    "eta_window_days",
    "RiskReason",
    "Stage",
    "load_snapshots",
    "VERSION",
]
