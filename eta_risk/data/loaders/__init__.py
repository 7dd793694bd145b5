"""
Snapshot Loaders

Normalization of raw snapshots and file readers.
"""

from .snapshots import (
    as_number,
    as_text,
    normalize_snapshot,
    shipments_to_frame,
    normalize_frame,
)
from .files import load_snapshots, REASON_CODE_SEPARATOR

__all__ = [
    "as_number",
    "as_text",
    "normalize_snapshot",
    "shipments_to_frame",
    "normalize_frame",
    "load_snapshots",
    "REASON_CODE_SEPARATOR",
]
