"""Core data types for Chan structure analysis.

All entities are frozen dataclasses. Each pipeline stage returns a new tuple
of them; later stages hold references to earlier entities instead of copying
their fields (a Stroke points at its two TurningPoints, a ConsolidationZone
at its Strokes).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Sequence, Tuple


class Direction(Enum):
    """Direction of a merged bar or stroke."""
    UP = "up"
    DOWN = "down"
    UNKNOWN = "unknown"


class TurningPointType(Enum):
    """Classification of a fractal on merged bars."""
    PEAK = "peak"
    TROUGH = "trough"


@dataclass(frozen=True)
class Bar:
    """Single OHLC bar"""
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    def __post_init__(self) -> None:
        if self.high < self.low:
            raise ValueError(
                f"Bar at {self.time} has high {self.high} below low {self.low}"
            )

    @property
    def date(self) -> datetime:
        return datetime.fromtimestamp(self.time, tz=timezone.utc)


@dataclass(frozen=True)
class MergedBar:
    """
    One or more consecutive Bars with containment resolved.

    Attributes:
        time: Time of the first contributing bar
        high: Merged high
        low: Merged low
        close: Close of the last contributing bar
        merge_count: Number of source bars folded into this one
        direction: Which extremum rule produced it (UNKNOWN for the first bar)
        open: Open of the first contributing bar
        end_time: Time of the last contributing bar
        volume: Summed volume of all contributing bars
    """
    time: int
    high: float
    low: float
    close: float
    merge_count: int = 1
    direction: Direction = Direction.UNKNOWN
    open: float = 0.0
    end_time: int = 0
    volume: float = 0.0

    def contains(self, other) -> bool:
        """True if this bar's [low, high] encloses other's."""
        return self.high >= other.high and self.low <= other.low

    def to_bar(self) -> Bar:
        """Flatten back to a plain Bar (used to re-run the merger)."""
        return Bar(
            time=self.time,
            open=self.open,
            high=self.high,
            low=self.low,
            close=self.close,
            volume=self.volume,
        )


@dataclass(frozen=True)
class TurningPoint:
    """
    A local extremum spanning three consecutive merged bars.

    Attributes:
        type: PEAK or TROUGH
        index: Position of the middle bar in the merged sequence
        price: high for a PEAK, low for a TROUGH
        high: High of the middle bar
        low: Low of the middle bar
        time: Time of the middle bar
        strength: 0-1, relative gap to the neighbouring bars
        is_confirmed: No later bar has broken the price
        confirmed_bars: Bars observed after the point when confirmed
    """
    type: TurningPointType
    index: int
    price: float
    high: float
    low: float
    time: int
    strength: float = 0.0
    is_confirmed: bool = False
    confirmed_bars: int = 0

    @property
    def range_low(self) -> float:
        return min(self.high, self.low)

    @property
    def range_high(self) -> float:
        return max(self.high, self.low)

    def contains(self, other: "TurningPoint") -> bool:
        """True if this point's bar range encloses other's."""
        return self.range_high >= other.range_high and self.range_low <= other.range_low


@dataclass(frozen=True)
class Stroke:
    """
    A directional move between two alternating turning points.

    UP strokes run TROUGH -> PEAK, DOWN strokes run PEAK -> TROUGH.
    """
    start: TurningPoint
    end: TurningPoint
    direction: Direction
    bar_span: int

    @property
    def high(self) -> float:
        return max(self.start.price, self.end.price)

    @property
    def low(self) -> float:
        return min(self.start.price, self.end.price)

    @property
    def amplitude(self) -> float:
        return abs(self.end.price - self.start.price)

    @property
    def amplitude_pct(self) -> float:
        if self.start.price == 0:
            return 0.0
        return self.amplitude / self.start.price * 100

    @property
    def start_index(self) -> int:
        return self.start.index

    @property
    def end_index(self) -> int:
        return self.end.index

    @property
    def start_time(self) -> int:
        return self.start.time

    @property
    def end_time(self) -> int:
        return self.end.time

    def intersects(self, lower: float, upper: float) -> bool:
        """
        True if this stroke's price range touches the band [lower, upper].

        Covers the three overlap shapes: the stroke's high inside the band,
        its low inside the band, or the stroke straddling the whole band.
        """
        high_inside = upper >= self.high >= lower
        low_inside = upper >= self.low >= lower
        straddles = self.high >= upper and lower >= self.low
        return high_inside or low_inside or straddles

    def max_retracement(self, merged: Sequence[MergedBar]) -> float:
        """
        Largest counter-move inside the stroke as a fraction of its amplitude.

        Args:
            merged: The merged bar sequence the stroke's indices refer to.
        """
        total_move = self.amplitude
        if total_move == 0:
            return 0.0

        bars = merged[self.start.index:self.end.index + 1]
        worst = 0.0
        if self.direction == Direction.UP:
            running_high = self.start.price
            for bar in bars:
                running_high = max(running_high, bar.high)
                worst = max(worst, (running_high - bar.low) / total_move)
        else:
            running_low = self.start.price
            for bar in bars:
                running_low = min(running_low, bar.low)
                worst = max(worst, (bar.high - running_low) / total_move)
        return worst


@dataclass(frozen=True)
class ConsolidationZone:
    """
    A price band where consecutive strokes overlap.

    Attributes:
        upper_bound: Upper edge of the band (ZG for the static strategy)
        lower_bound: Lower edge of the band (ZD for the static strategy)
        first_stroke_index: Position of the first contributing stroke
        stroke_count: Number of contributing strokes
        height_pct: (upper - lower) / midpoint * 100
        strategy: Name of the detector that produced the zone
        strokes: The contributing strokes, in order
        min_strokes: Minimum stroke count the zone was detected with
        is_completed: The stroke after the zone no longer touches the band
        is_valid: Passed the height and duration filters
        strength: 0-100 score from stroke count, duration and amplitude
    """
    upper_bound: float
    lower_bound: float
    first_stroke_index: int
    stroke_count: int
    height_pct: float
    strategy: str = ""
    strokes: Tuple[Stroke, ...] = field(default=(), repr=False)
    min_strokes: int = 3
    is_completed: bool = False
    is_valid: bool = True
    strength: float = 0.0

    @property
    def middle(self) -> float:
        return (self.upper_bound + self.lower_bound) / 2

    @property
    def height(self) -> float:
        return self.upper_bound - self.lower_bound

    @property
    def last_stroke_index(self) -> int:
        return self.first_stroke_index + self.stroke_count - 1

    @property
    def extension_count(self) -> int:
        """Strokes beyond the minimum that opened the zone."""
        return max(self.stroke_count - self.min_strokes, 0)

    @property
    def highest(self) -> Optional[float]:
        """GG: highest price reached by any contributing stroke."""
        if not self.strokes:
            return None
        return max(s.high for s in self.strokes)

    @property
    def lowest(self) -> Optional[float]:
        """DD: lowest price reached by any contributing stroke."""
        if not self.strokes:
            return None
        return min(s.low for s in self.strokes)

    @property
    def start_index(self) -> Optional[int]:
        return self.strokes[0].start_index if self.strokes else None

    @property
    def end_index(self) -> Optional[int]:
        return self.strokes[-1].end_index if self.strokes else None

    @property
    def start_time(self) -> Optional[int]:
        return self.strokes[0].start_time if self.strokes else None

    @property
    def end_time(self) -> Optional[int]:
        return self.strokes[-1].end_time if self.strokes else None

    @property
    def duration_bars(self) -> int:
        if not self.strokes:
            return 0
        return self.end_index - self.start_index

    def contains_price(self, price: float) -> bool:
        return self.lower_bound <= price <= self.upper_bound
