"""
Turning point (fractal) detection over merged bars.

A PEAK is a merged bar whose high AND low are both strictly above its two
neighbours'; a TROUGH has both strictly below. Checking one side only (high
alone for peaks) is not enough: the bar must dominate on both bounds.
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from .trace import AnalysisTrace, RejectionReason, Stage
from .types import MergedBar, TurningPoint, TurningPointType

logger = logging.getLogger(__name__)


def _strength(left: MergedBar, mid: MergedBar, right: MergedBar,
              point_type: TurningPointType) -> float:
    """Smaller of the two relative gaps, scaled by 10 and capped at 1."""
    if point_type == TurningPointType.PEAK:
        if left.high <= 0 or right.high <= 0:
            return 0.0
        gap_left = (mid.high - left.high) / left.high
        gap_right = (mid.high - right.high) / right.high
    else:
        if mid.low <= 0:
            return 0.0
        gap_left = (left.low - mid.low) / mid.low
        gap_right = (right.low - mid.low) / mid.low
    return min(min(gap_left, gap_right) * 10, 1.0)


def classify(left: MergedBar, mid: MergedBar,
             right: MergedBar) -> Optional[TurningPointType]:
    """Classify the middle of three consecutive merged bars, or None."""
    if (left.high < mid.high > right.high) and (left.low < mid.low > right.low):
        return TurningPointType.PEAK
    if (left.high > mid.high < right.high) and (left.low > mid.low < right.low):
        return TurningPointType.TROUGH
    return None


class TurningPointDetector:
    """Finds alternating PEAK / TROUGH points in a merged bar sequence."""

    def detect(
        self,
        merged: Sequence[MergedBar],
        trace: Optional[AnalysisTrace] = None,
    ) -> Tuple[TurningPoint, ...]:
        """
        Detect turning points.

        Consecutive candidates of the same type are collapsed by keeping the
        first one encountered.

        Args:
            merged: Containment-free merged bars.
            trace: Optional collector for discarded candidates.

        Returns:
            Tuple of TurningPoint with strictly alternating types.
        """
        if len(merged) < 3:
            return ()

        points = []
        for i in range(1, len(merged) - 1):
            left, mid, right = merged[i - 1], merged[i], merged[i + 1]
            point_type = classify(left, mid, right)
            if point_type is None:
                continue

            if points and points[-1].type == point_type:
                if trace is not None:
                    trace.reject(
                        Stage.TURNING_POINTS, i, RejectionReason.REPEATED_TYPE,
                        anchor=points[-1].index,
                        detail=f"{point_type.value} follows {point_type.value}",
                    )
                continue

            price = mid.high if point_type == TurningPointType.PEAK else mid.low
            points.append(TurningPoint(
                type=point_type,
                index=i,
                price=price,
                high=mid.high,
                low=mid.low,
                time=mid.time,
                strength=_strength(left, mid, right, point_type),
            ))

        logger.debug(f"Detected {len(points)} turning points in {len(merged)} merged bars")
        return tuple(points)

    @staticmethod
    def confirm(
        points: Sequence[TurningPoint],
        merged: Sequence[MergedBar],
    ) -> Tuple[TurningPoint, ...]:
        """
        Mark points whose price has not been broken by any later bar.

        A PEAK is broken by a later high above its price, a TROUGH by a later
        low below it. Returns new TurningPoint values; inputs are untouched.
        """
        confirmed = []
        for point in points:
            later = merged[point.index + 1:]
            if point.type == TurningPointType.PEAK:
                broken = any(bar.high > point.price for bar in later)
            else:
                broken = any(bar.low < point.price for bar in later)
            confirmed.append(replace(
                point,
                is_confirmed=not broken,
                confirmed_bars=len(merged) - 1 - point.index,
            ))
        return tuple(confirmed)


def detect_turning_points(merged: Sequence[MergedBar]) -> Tuple[TurningPoint, ...]:
    """Convenience wrapper around TurningPointDetector().detect(merged)."""
    return TurningPointDetector().detect(merged)
