"""
Shipment Stages

Fixed delivery pipeline. Rank reflects position in the pipeline and is the
only way stages are compared.
"""

from enum import Enum
from types import MappingProxyType


class Stage(str, Enum):
    """Closed set of pipeline stages, in pipeline order."""

    ORIGIN_PICKUP = "Origin Pickup"
    ORIGIN_HUB = "Origin Hub"
    LINEHAUL = "Linehaul"
    CUSTOMS = "Customs"
    DESTINATION_HUB = "Destination Hub"
    LAST_MILE = "Last-Mile"
    DELIVERED = "Delivered"

    @property
    def rank(self) -> int:
        return STAGE_ORDER[self]


# Stage ordering for comparisons (Delivered is terminal)
STAGE_ORDER = MappingProxyType({
    Stage.ORIGIN_PICKUP: 1,
    Stage.ORIGIN_HUB: 2,
    Stage.LINEHAUL: 3,
    Stage.CUSTOMS: 4,
    Stage.DESTINATION_HUB: 5,
    Stage.LAST_MILE: 6,
    Stage.DELIVERED: 7,
})

# Same table keyed by the raw string, for polars lookups
STAGE_RANKS = MappingProxyType({stage.value: rank for stage, rank in STAGE_ORDER.items()})

STAGE_VALUES = tuple(stage.value for stage in Stage)


def parse_stage(value) -> Stage | None:
    """Map a raw stage value to a Stage, or None if it is not a known stage."""
    if not isinstance(value, str):
        return None
    try:
        return Stage(value)
    except ValueError:
        return None
