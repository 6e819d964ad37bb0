"""
Full pipeline: bars -> merged bars -> turning points -> strokes -> zones.

ChanAnalyzer wires the four stages together under one ChanConfig and
returns an immutable AnalysisResult holding every intermediate sequence, so
reporting consumers can inspect turning points and strokes while a scoring
engine reads the zones.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

import pandas as pd

from .adapters import dataframe_to_bars
from .bar_merger import BarMerger
from .chan_config import ChanConfig
from .errors import InsufficientDataError
from .stroke_builder import StrokeBuilder
from .trace import AnalysisTrace
from .turning_points import TurningPointDetector
from .types import Bar, ConsolidationZone, MergedBar, Stroke, TurningPoint
from .zones import get_zone_detector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """
    Output of one ChanAnalyzer run.

    Attributes:
        config: Configuration the run used.
        bar_count: Number of input bars.
        merged: Containment-free merged bars.
        turning_points: Alternating PEAK / TROUGH points.
        strokes: Strokes built from the turning points.
        zones: All zones from the configured strategy (valid or not).
        trace: Rejection diagnostics, when config.trace is set.
    """
    config: ChanConfig
    bar_count: int
    merged: Tuple[MergedBar, ...] = ()
    turning_points: Tuple[TurningPoint, ...] = ()
    strokes: Tuple[Stroke, ...] = ()
    zones: Tuple[ConsolidationZone, ...] = ()
    trace: Optional[AnalysisTrace] = None

    @property
    def valid_zones(self) -> Tuple[ConsolidationZone, ...]:
        return tuple(z for z in self.zones if z.is_valid)

    @property
    def current_zone(self) -> Optional[ConsolidationZone]:
        """The latest valid zone, if price has not yet left it."""
        valid = self.valid_zones
        if valid and not valid[-1].is_completed:
            return valid[-1]
        return None

    @property
    def last_stroke(self) -> Optional[Stroke]:
        return self.strokes[-1] if self.strokes else None

    @property
    def last_turning_point(self) -> Optional[TurningPoint]:
        return self.turning_points[-1] if self.turning_points else None

    @property
    def is_empty(self) -> bool:
        return not self.merged

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready summary for reporting."""
        return {
            "config": self.config.to_dict(),
            "bar_count": self.bar_count,
            "merged_bar_count": len(self.merged),
            "turning_point_count": len(self.turning_points),
            "confirmed_turning_point_count": sum(
                1 for p in self.turning_points if p.is_confirmed
            ),
            "stroke_count": len(self.strokes),
            "zone_count": len(self.zones),
            "valid_zone_count": len(self.valid_zones),
            "strokes": [
                {
                    "direction": s.direction.value,
                    "start_index": s.start_index,
                    "end_index": s.end_index,
                    "start_price": s.start.price,
                    "end_price": s.end.price,
                    "bar_span": s.bar_span,
                }
                for s in self.strokes
            ],
            "zones": [
                {
                    "strategy": z.strategy,
                    "upper_bound": z.upper_bound,
                    "lower_bound": z.lower_bound,
                    "first_stroke_index": z.first_stroke_index,
                    "stroke_count": z.stroke_count,
                    "height_pct": round(z.height_pct, 4),
                    "strength": round(z.strength, 2),
                    "is_valid": z.is_valid,
                    "is_completed": z.is_completed,
                }
                for z in self.zones
            ],
            "rejections": self.trace.counts() if self.trace is not None else None,
        }


class ChanAnalyzer:
    """Runs the merge / turning point / stroke / zone pipeline."""

    def __init__(self, config: ChanConfig = None):
        self.config = config or ChanConfig.default()
        self.merger = BarMerger(self.config.merge_rule, self.config.merge_direction)
        self.point_detector = TurningPointDetector()
        self.stroke_builder = StrokeBuilder(self.config.min_stroke_bars)
        self.zone_detector = get_zone_detector(self.config.zone_strategy, self.config)

    def analyze(self, bars: Sequence[Bar]) -> AnalysisResult:
        """
        Analyze an ordered bar sequence.

        Insufficient input never raises here: with no bars the result is
        empty, with too few bars the later sequences are simply empty.

        Raises:
            InvalidOrderingError: If bar times do not strictly increase.
        """
        config = self.config
        trace = AnalysisTrace() if config.trace else None

        try:
            merged = self.merger.merge(bars)
        except InsufficientDataError:
            logger.info("No bars to analyze; returning empty result")
            return AnalysisResult(config=config, bar_count=0, trace=trace)

        points = self.point_detector.detect(merged, trace)
        if config.confirm_turning_points:
            points = self.point_detector.confirm(points, merged)
        strokes = self.stroke_builder.build(points, trace=trace)
        zones = self.zone_detector.detect(strokes, config.min_zone_strokes, trace)

        result = AnalysisResult(
            config=config,
            bar_count=len(bars),
            merged=merged,
            turning_points=points,
            strokes=strokes,
            zones=zones,
            trace=trace,
        )
        logger.info(
            f"Analyzed {len(bars)} bars: {len(merged)} merged, {len(points)} turning points, "
            f"{len(strokes)} strokes, {len(zones)} zones "
            f"({len(result.valid_zones)} valid, strategy={config.zone_strategy.value})"
        )
        return result

    def analyze_dataframe(self, df: pd.DataFrame) -> AnalysisResult:
        """Convenience wrapper for DataFrame input."""
        return self.analyze(dataframe_to_bars(df))


def analyze(bars: Sequence[Bar], config: ChanConfig = None) -> AnalysisResult:
    """Run the full pipeline with the given (or default) config."""
    return ChanAnalyzer(config).analyze(bars)
