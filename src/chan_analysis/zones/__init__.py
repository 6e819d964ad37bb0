"""Consolidation zone detection strategies.

Two interchangeable strategies share the ZoneDetector interface:
- StaticZoneDetector: band fixed by the opening strokes, extended forward
- DynamicZoneDetector: band narrowed incrementally by every stroke

Example:
    >>> from src.chan_analysis.zones import get_zone_detector
    >>> zones = get_zone_detector("static").detect(strokes)
"""

from .base import ZoneDetector, height_pct, zone_strength
from .static_detector import StaticZoneDetector
from .dynamic_detector import DynamicZoneDetector, BoundaryStep
from .registry import (
    ZONE_DETECTORS,
    ZoneComparison,
    compare_zone_strategies,
    get_zone_detector,
)

__all__ = [
    "ZoneDetector",
    "StaticZoneDetector",
    "DynamicZoneDetector",
    "BoundaryStep",
    "ZONE_DETECTORS",
    "ZoneComparison",
    "compare_zone_strategies",
    "get_zone_detector",
    "height_pct",
    "zone_strength",
]
