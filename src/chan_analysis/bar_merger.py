"""
Bar Merger Module

Resolves containment (inclusion) between consecutive bars so that the
resulting sequence has no two adjacent bars where one range encloses the
other. This is the first stage of the pipeline; turning point detection
requires a containment-free sequence.

Key Features:
- Single forward pass, O(n)
- Every merge step builds a new frozen MergedBar (no in-place updates)
- Selectable merge rule (EXTREMUM default, ENVELOPE variant)
- Selectable fold direction inference (TREND default, INCOMING variant)
- Fails fast on non-ascending timestamps
"""

import logging
from typing import Optional, Sequence, Tuple

from .chan_config import MergeDirection, MergeRule
from .errors import InsufficientDataError, InvalidOrderingError
from .types import Bar, Direction, MergedBar

logger = logging.getLogger(__name__)


def has_containment(a, b) -> bool:
    """True if either bar's [low, high] range encloses the other's."""
    a_contains_b = a.high >= b.high and a.low <= b.low
    b_contains_a = b.high >= a.high and b.low <= a.low
    return a_contains_b or b_contains_a


def check_ordering(bars: Sequence[Bar]) -> None:
    """
    Verify bars are in strictly ascending time order.

    Raises:
        InvalidOrderingError: On the first bar whose time does not advance.
    """
    for i in range(1, len(bars)):
        if bars[i].time <= bars[i - 1].time:
            raise InvalidOrderingError(i, bars[i - 1].time, bars[i].time)


class BarMerger:
    """Folds containment relationships out of an ordered bar sequence."""

    def __init__(
        self,
        rule: MergeRule = MergeRule.EXTREMUM,
        direction: MergeDirection = MergeDirection.TREND,
    ):
        """
        Args:
            rule: How bars in a containment relationship are combined.
            direction: How a fold picks its direction when none is set yet.
        """
        self.rule = MergeRule(rule)
        self.direction = MergeDirection(direction)

    def merge(self, bars: Sequence[Bar]) -> Tuple[MergedBar, ...]:
        """
        Merge bars into a containment-free sequence.

        Args:
            bars: Bars in strictly ascending time order.

        Returns:
            Tuple of MergedBar, one per run of mutually containing bars.

        Raises:
            InsufficientDataError: If bars is empty.
            InvalidOrderingError: If timestamps do not strictly increase.
        """
        if not bars:
            raise InsufficientDataError("Cannot merge an empty bar sequence")
        check_ordering(bars)

        merged = []
        current = self._seed(bars[0])

        for bar in bars[1:]:
            previous = merged[-1] if merged else None
            if has_containment(current, bar):
                current = self._fold(current, bar, previous)
            else:
                merged.append(self._finalize(current, previous))
                current = self._seed(bar)

        merged.append(self._finalize(current, merged[-1] if merged else None))

        logger.debug(
            f"Merged {len(bars)} bars into {len(merged)} "
            f"({len(bars) - len(merged)} folds, rule={self.rule.value}, "
            f"direction={self.direction.value})"
        )
        return tuple(merged)

    @staticmethod
    def _seed(bar: Bar) -> MergedBar:
        return MergedBar(
            time=bar.time,
            high=bar.high,
            low=bar.low,
            close=bar.close,
            merge_count=1,
            direction=Direction.UNKNOWN,
            open=bar.open,
            end_time=bar.time,
            volume=bar.volume,
        )

    @staticmethod
    def _finalize(current: MergedBar, previous: Optional[MergedBar]) -> MergedBar:
        """Stamp the direction relative to the previously finalized bar."""
        if previous is None:
            direction = Direction.UNKNOWN
        elif current.high > previous.high:
            direction = Direction.UP
        else:
            direction = Direction.DOWN

        return MergedBar(
            time=current.time,
            high=current.high,
            low=current.low,
            close=current.close,
            merge_count=current.merge_count,
            direction=direction,
            open=current.open,
            end_time=current.end_time,
            volume=current.volume,
        )

    def _merge_direction(
        self, current: MergedBar, bar: Bar, previous: Optional[MergedBar]
    ) -> Direction:
        """
        Direction used to fold bar into current.

        An earlier fold fixes the direction for the rest of the run. Otherwise
        TREND compares current with the previously finalized bar; with no
        finalized bar yet (or under INCOMING), the incoming bar's high is
        compared to current's.
        """
        if current.direction != Direction.UNKNOWN:
            return current.direction
        if self.direction == MergeDirection.TREND and previous is not None:
            return Direction.UP if current.high > previous.high else Direction.DOWN
        return Direction.UP if bar.high > current.high else Direction.DOWN

    def _fold(
        self, current: MergedBar, bar: Bar, previous: Optional[MergedBar]
    ) -> MergedBar:
        direction = self._merge_direction(current, bar, previous)

        if direction == Direction.UP:
            high = max(current.high, bar.high)
            if self.rule == MergeRule.EXTREMUM:
                low = max(current.low, bar.low)
            else:
                low = min(current.low, bar.low)
        else:
            high = min(current.high, bar.high)
            if self.rule == MergeRule.EXTREMUM:
                low = min(current.low, bar.low)
            else:
                low = max(current.low, bar.low)

        return MergedBar(
            time=current.time,
            high=high,
            low=low,
            close=bar.close,
            merge_count=current.merge_count + 1,
            direction=direction,
            open=current.open,
            end_time=bar.time,
            volume=current.volume + bar.volume,
        )


def merge_bars(
    bars: Sequence[Bar],
    rule: MergeRule = MergeRule.EXTREMUM,
    direction: MergeDirection = MergeDirection.TREND,
) -> Tuple[MergedBar, ...]:
    """Convenience wrapper around BarMerger(rule, direction).merge(bars)."""
    return BarMerger(rule, direction).merge(bars)
