"""
Stroke construction from alternating turning points.

A stroke joins an anchor turning point to a later point of the opposite type
when all of the following hold:
1. Break: an UP stroke ends above its start price, a DOWN stroke below it.
2. No containment: neither endpoint's bar range encloses the other's.
3. Length: the stroke spans at least min_bars merged bars, endpoints included.

The scan is greedy and forward-only. A rejected candidate is discarded for
good and the anchor never moves backwards, so the pass is O(n).
"""

import logging
from typing import Optional, Sequence, Tuple

from .trace import AnalysisTrace, RejectionReason, Stage
from .types import Direction, Stroke, TurningPoint, TurningPointType

logger = logging.getLogger(__name__)

DEFAULT_MIN_STROKE_BARS = 5


def stroke_direction(anchor: TurningPoint) -> Direction:
    """A stroke leaving a PEAK falls; one leaving a TROUGH rises."""
    if anchor.type == TurningPointType.PEAK:
        return Direction.DOWN
    return Direction.UP


def breaks(anchor: TurningPoint, candidate: TurningPoint, direction: Direction) -> bool:
    if direction == Direction.UP:
        return candidate.price > anchor.price
    return candidate.price < anchor.price


class StrokeBuilder:
    """Builds strokes with a greedy single forward pass."""

    def __init__(self, min_bars: int = DEFAULT_MIN_STROKE_BARS):
        if min_bars < 1:
            raise ValueError(f"min_bars must be >= 1, got {min_bars}")
        self.min_bars = min_bars

    def build(
        self,
        points: Sequence[TurningPoint],
        min_bars: Optional[int] = None,
        trace: Optional[AnalysisTrace] = None,
    ) -> Tuple[Stroke, ...]:
        """
        Connect turning points into strokes.

        Args:
            points: Turning points in index order.
            min_bars: Overrides the builder's minimum span for this call.
            trace: Optional collector for rejected candidates.

        Returns:
            Tuple of Stroke; consecutive strokes share an endpoint.
        """
        min_bars = self.min_bars if min_bars is None else min_bars
        if len(points) < 2:
            return ()

        strokes = []
        anchor_pos = 0
        anchor = points[0]

        for pos in range(1, len(points)):
            candidate = points[pos]
            reason = self._reject_reason(anchor, candidate, min_bars)
            if reason is not None:
                if trace is not None:
                    trace.reject(
                        Stage.STROKES, pos, reason, anchor=anchor_pos,
                        detail=f"{anchor.price} -> {candidate.price}",
                    )
                continue

            strokes.append(Stroke(
                start=anchor,
                end=candidate,
                direction=stroke_direction(anchor),
                bar_span=candidate.index - anchor.index + 1,
            ))
            anchor, anchor_pos = candidate, pos

        logger.debug(
            f"Built {len(strokes)} strokes from {len(points)} turning points "
            f"(min_bars={min_bars})"
        )
        return tuple(strokes)

    @staticmethod
    def _reject_reason(
        anchor: TurningPoint, candidate: TurningPoint, min_bars: int
    ) -> Optional[RejectionReason]:
        if candidate.type == anchor.type:
            return RejectionReason.SAME_TYPE
        if not breaks(anchor, candidate, stroke_direction(anchor)):
            return RejectionReason.NO_BREAK
        if anchor.contains(candidate) or candidate.contains(anchor):
            return RejectionReason.CONTAINED
        if candidate.index - anchor.index + 1 < min_bars:
            return RejectionReason.TOO_SHORT
        return None


def stroke_points(strokes: Sequence[Stroke]) -> Tuple[TurningPoint, ...]:
    """The chain of turning points a stroke sequence walks through."""
    if not strokes:
        return ()
    return tuple(s.start for s in strokes) + (strokes[-1].end,)


def build_strokes(
    points: Sequence[TurningPoint], min_bars: int = DEFAULT_MIN_STROKE_BARS
) -> Tuple[Stroke, ...]:
    """Convenience wrapper around StrokeBuilder(min_bars).build(points)."""
    return StrokeBuilder(min_bars).build(points)
