"""
Common interface for consolidation zone detectors.

Every strategy takes the same stroke sequence and minimum stroke count and
returns a tuple of ConsolidationZone. Strategies are free to disagree on
how many zones exist and where their bounds sit.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

from ..trace import AnalysisTrace
from ..types import ConsolidationZone, Stroke

DEFAULT_MIN_ZONE_STROKES = 3
DEFAULT_MIN_HEIGHT_PCT = 0.3
DEFAULT_MAX_DURATION_BARS = 150


def height_pct(upper: float, lower: float) -> float:
    """Band height as a percentage of its midpoint."""
    middle = (upper + lower) / 2
    if middle == 0:
        return 0.0
    return (upper - lower) / middle * 100


def zone_strength(strokes: Sequence[Stroke]) -> float:
    """
    0-100 score for a zone.

    Up to 40 points for stroke count (saturating at 9 strokes), up to 30 for
    duration (saturating at 50 merged bars) and up to 30 for calm strokes
    (smaller average amplitude scores higher).
    """
    if not strokes:
        return 0.0
    duration = strokes[-1].end_index - strokes[0].start_index
    stroke_score = min(len(strokes) / 9 * 40, 40)
    duration_score = min(duration / 50 * 30, 30)
    avg_amplitude = sum(s.amplitude_pct for s in strokes) / len(strokes)
    amplitude_score = max(30 - avg_amplitude * 2, 0)
    return min(stroke_score + duration_score + amplitude_score, 100)


class ZoneDetector(ABC):
    """
    Base class for zone detection strategies.

    Attributes:
        name: Strategy identifier stamped on every zone it emits.
        min_height_pct: Zones narrower than this are marked invalid.
        max_duration_bars: Zones longer than this are marked invalid.
    """

    name: str = ""

    def __init__(
        self,
        min_height_pct: float = DEFAULT_MIN_HEIGHT_PCT,
        max_duration_bars: int = DEFAULT_MAX_DURATION_BARS,
    ):
        self.min_height_pct = min_height_pct
        self.max_duration_bars = max_duration_bars

    @abstractmethod
    def detect(
        self,
        strokes: Sequence[Stroke],
        min_strokes: int = DEFAULT_MIN_ZONE_STROKES,
        trace: Optional[AnalysisTrace] = None,
    ) -> Tuple[ConsolidationZone, ...]:
        """
        Detect consolidation zones.

        Args:
            strokes: Strokes in order.
            min_strokes: Minimum contributing strokes per zone.
            trace: Optional collector for rejected start positions.

        Returns:
            Non-overlapping zones in stroke order. Empty when there are fewer
            than min_strokes strokes.
        """

    def _make_zone(
        self,
        strokes: Sequence[Stroke],
        first: int,
        count: int,
        upper: float,
        lower: float,
        min_strokes: int = DEFAULT_MIN_ZONE_STROKES,
    ) -> ConsolidationZone:
        members = tuple(strokes[first:first + count])
        pct = height_pct(upper, lower)
        duration = members[-1].end_index - members[0].start_index
        # Completed once the stroke after the zone leaves the band
        following = first + count
        completed = (following < len(strokes)
                     and not strokes[following].intersects(lower, upper))
        return ConsolidationZone(
            upper_bound=upper,
            lower_bound=lower,
            first_stroke_index=first,
            stroke_count=count,
            height_pct=pct,
            strategy=self.name,
            strokes=members,
            min_strokes=min_strokes,
            is_completed=completed,
            is_valid=pct >= self.min_height_pct and duration <= self.max_duration_bars,
            strength=zone_strength(members),
        )

    @staticmethod
    def _check_min_strokes(min_strokes: int) -> None:
        if min_strokes < 1:
            raise ValueError(f"min_strokes must be >= 1, got {min_strokes}")
