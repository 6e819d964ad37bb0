"""
Shared test fixtures and helpers for Chan analysis tests.
"""

from typing import List, Sequence

import pytest

from src.chan_analysis.types import (
    Bar,
    Direction,
    Stroke,
    TurningPoint,
    TurningPointType,
)

BASE_TIME = 1700000000


def make_bar(
    index: int,
    high: float,
    low: float,
    open_: float = None,
    close: float = None,
    volume: float = 0.0,
    time: int = None,
) -> Bar:
    """Helper to create Bar objects for testing.

    Args:
        index: Position in the sequence (drives the default time)
        high: High price
        low: Low price
        open_: Opening price (defaults to low)
        close: Closing price (defaults to high)
        volume: Traded volume
        time: Unix timestamp (defaults to BASE_TIME + index * 60)
    """
    return Bar(
        time=time if time is not None else BASE_TIME + index * 60,
        open=open_ if open_ is not None else low,
        high=high,
        low=low,
        close=close if close is not None else high,
        volume=volume,
    )


def bars_from_ranges(ranges: Sequence[tuple]) -> List[Bar]:
    """Bars from (high, low) pairs, one minute apart."""
    return [make_bar(i, h, l) for i, (h, l) in enumerate(ranges)]


def zigzag_bars(pivots: Sequence[int], half_range: float = 0.5) -> List[Bar]:
    """
    Bars walking one price unit per bar between integer pivot prices.

    Every bar is [p - half_range, p + half_range], so consecutive bars never
    contain one another and every interior pivot is a clean turning point.
    """
    prices = [pivots[0]]
    for target in pivots[1:]:
        step = 1 if target > prices[-1] else -1
        while prices[-1] != target:
            prices.append(prices[-1] + step)

    return [
        Bar(
            time=BASE_TIME + i * 60,
            open=p,
            high=p + half_range,
            low=p - half_range,
            close=p,
            volume=10.0,
        )
        for i, p in enumerate(prices)
    ]


def make_point(
    point_type: TurningPointType,
    index: int,
    price: float,
    high: float = None,
    low: float = None,
) -> TurningPoint:
    """TurningPoint with a one-unit bar range on the non-extreme side."""
    if point_type == TurningPointType.PEAK:
        high = price if high is None else high
        low = price - 1 if low is None else low
    else:
        low = price if low is None else low
        high = price + 1 if high is None else high
    return TurningPoint(
        type=point_type,
        index=index,
        price=price,
        high=high,
        low=low,
        time=BASE_TIME + index * 60,
    )


def peak(index: int, price: float, **kwargs) -> TurningPoint:
    return make_point(TurningPointType.PEAK, index, price, **kwargs)


def trough(index: int, price: float, **kwargs) -> TurningPoint:
    return make_point(TurningPointType.TROUGH, index, price, **kwargs)


def make_stroke(start_price: float, end_price: float,
                start_index: int = 0, span: int = 5) -> Stroke:
    """A single stroke between two prices, direction taken from the move."""
    end_index = start_index + span - 1
    if end_price > start_price:
        start, end, direction = trough(start_index, start_price), peak(end_index, end_price), Direction.UP
    else:
        start, end, direction = peak(start_index, start_price), trough(end_index, end_price), Direction.DOWN
    return Stroke(start=start, end=end, direction=direction, bar_span=span)


def strokes_from_prices(prices: Sequence[float], spacing: int = 5) -> List[Stroke]:
    """
    Chain of strokes through consecutive prices.

    Consecutive strokes share their TurningPoint, as the builder produces.
    """
    points = []
    for k, price in enumerate(prices):
        neighbour = prices[k + 1] if k + 1 < len(prices) else prices[k - 1]
        point_type = TurningPointType.PEAK if price > neighbour else TurningPointType.TROUGH
        points.append(make_point(point_type, k * spacing, price))

    return [
        Stroke(
            start=a,
            end=b,
            direction=Direction.UP if b.price > a.price else Direction.DOWN,
            bar_span=b.index - a.index + 1,
        )
        for a, b in zip(points, points[1:])
    ]


@pytest.fixture
def range_bars() -> List[Bar]:
    """Three full swings between 100 and 106: four strokes inside one band."""
    return zigzag_bars([100, 106, 100, 106, 100, 106, 100])
