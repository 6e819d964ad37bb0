"""Strategy selection and side-by-side comparison of zone detectors."""

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple, Type

from ..chan_config import ChanConfig, ZoneStrategy
from ..types import ConsolidationZone, Stroke
from .base import DEFAULT_MIN_ZONE_STROKES, ZoneDetector
from .dynamic_detector import DynamicZoneDetector
from .static_detector import StaticZoneDetector

ZONE_DETECTORS: Dict[ZoneStrategy, Type[ZoneDetector]] = {
    ZoneStrategy.STATIC: StaticZoneDetector,
    ZoneStrategy.DYNAMIC: DynamicZoneDetector,
}


def get_zone_detector(strategy, config: ChanConfig = None) -> ZoneDetector:
    """
    Build the detector for a strategy.

    Args:
        strategy: ZoneStrategy or its string value ('static' / 'dynamic').
        config: Supplies validity filters and the static extension cap.

    Raises:
        ValueError: For an unknown strategy name.
    """
    config = config or ChanConfig.default()
    strategy = ZoneStrategy(strategy)
    kwargs = dict(
        min_height_pct=config.min_zone_height_pct,
        max_duration_bars=config.max_zone_duration_bars,
    )
    if strategy == ZoneStrategy.STATIC:
        return StaticZoneDetector(max_strokes=config.max_zone_strokes, **kwargs)
    return ZONE_DETECTORS[strategy](**kwargs)


@dataclass(frozen=True)
class ZoneComparison:
    """Zones from both strategies over the same strokes."""
    static: Tuple[ConsolidationZone, ...]
    dynamic: Tuple[ConsolidationZone, ...]

    @staticmethod
    def _bounds(zones):
        return [(z.first_stroke_index, z.stroke_count, z.lower_bound, z.upper_bound)
                for z in zones]

    @property
    def agree(self) -> bool:
        """True if both strategies produced the same zone placement and bounds."""
        return self._bounds(self.static) == self._bounds(self.dynamic)

    def summary(self) -> Dict[str, int]:
        return {
            "static_zones": len(self.static),
            "dynamic_zones": len(self.dynamic),
        }


def compare_zone_strategies(
    strokes: Sequence[Stroke],
    min_strokes: int = DEFAULT_MIN_ZONE_STROKES,
    config: ChanConfig = None,
) -> ZoneComparison:
    """Run both zone strategies over the same strokes."""
    return ZoneComparison(
        static=get_zone_detector(ZoneStrategy.STATIC, config).detect(strokes, min_strokes),
        dynamic=get_zone_detector(ZoneStrategy.DYNAMIC, config).detect(strokes, min_strokes),
    )
