"""
Tests for ChanAnalyzer end to end.

Verifies:
- Bars flow through merge, turning points, strokes and zones
- Both zone strategies are reachable through configuration
- Insufficient input yields empty results; unordered input fails fast
- Trace collection and JSON-ready output
"""

import json

import pandas as pd
import pytest

from src.chan_analysis import (
    AnalysisResult,
    ChanAnalyzer,
    ChanConfig,
    InvalidOrderingError,
    TurningPointType,
    ZoneStrategy,
    analyze,
)

from conftest import make_bar, zigzag_bars


class TestPipeline:

    def test_range_produces_strokes_and_one_zone(self, range_bars):
        result = analyze(range_bars)

        assert result.bar_count == 37
        assert len(result.merged) == 37
        assert [(p.type, p.index) for p in result.turning_points] == [
            (TurningPointType.PEAK, 6),
            (TurningPointType.TROUGH, 12),
            (TurningPointType.PEAK, 18),
            (TurningPointType.TROUGH, 24),
            (TurningPointType.PEAK, 30),
        ]
        assert len(result.strokes) == 4

        assert len(result.zones) == 1
        zone = result.zones[0]
        assert (zone.lower_bound, zone.upper_bound) == (99.5, 106.5)
        assert zone.stroke_count == 4
        assert zone.is_valid

    @pytest.mark.parametrize("strategy", [ZoneStrategy.STATIC, ZoneStrategy.DYNAMIC])
    def test_both_strategies_find_the_range(self, range_bars, strategy):
        config = ChanConfig.default().with_zone_strategy(strategy)

        result = ChanAnalyzer(config).analyze(range_bars)

        assert len(result.zones) == 1
        assert result.zones[0].strategy == strategy.value
        assert (result.zones[0].lower_bound, result.zones[0].upper_bound) == (99.5, 106.5)

    def test_default_strategy_is_dynamic(self, range_bars):
        assert analyze(range_bars).zones[0].strategy == "dynamic"

    def test_open_zone_is_current(self, range_bars):
        result = analyze(range_bars)

        assert result.current_zone is result.zones[0]
        assert result.last_stroke is result.strokes[-1]
        assert result.last_turning_point.index == 30

    def test_capped_zone_stays_current_while_price_in_band(self, range_bars):
        config = ChanConfig(zone_strategy=ZoneStrategy.STATIC, max_zone_strokes=3)

        result = analyze(range_bars, config)

        assert result.zones[0].stroke_count == 3
        assert not result.zones[0].is_completed
        assert result.current_zone is result.zones[0]

    def test_turning_points_confirmed_by_default(self, range_bars):
        result = analyze(range_bars)

        assert all(p.is_confirmed for p in result.turning_points)

    def test_confirmation_can_be_disabled(self, range_bars):
        result = analyze(range_bars, ChanConfig(confirm_turning_points=False))

        assert not any(p.is_confirmed for p in result.turning_points)
        assert len(result.strokes) == 4

    def test_stroke_threshold_from_config(self, range_bars):
        result = analyze(range_bars, ChanConfig.default().with_thresholds(min_stroke_bars=8))

        # Each swing spans 7 merged bars, so only the 6 -> 24 move survives
        assert len(result.strokes) == 1
        assert (result.strokes[0].start_index, result.strokes[0].end_index) == (6, 24)
        assert result.zones == ()

    def test_strokes_share_turning_points(self, range_bars):
        result = analyze(range_bars)

        for stroke in result.strokes:
            assert stroke.start in result.turning_points
        for a, b in zip(result.strokes, result.strokes[1:]):
            assert a.end is b.start

    def test_deterministic(self, range_bars):
        assert analyze(range_bars) == analyze(range_bars)


class TestInsufficientInput:

    def test_no_bars_gives_empty_result(self):
        result = analyze([])

        assert isinstance(result, AnalysisResult)
        assert result.is_empty
        assert result.bar_count == 0
        assert result.strokes == ()
        assert result.zones == ()
        assert result.current_zone is None

    def test_two_bars_stop_after_merging(self):
        result = analyze([make_bar(0, 10, 8), make_bar(1, 12, 9)])

        assert len(result.merged) == 2
        assert result.turning_points == ()
        assert result.strokes == ()

    def test_unordered_bars_raise(self):
        bars = [make_bar(0, 10, 8, time=300), make_bar(1, 12, 9, time=200)]

        with pytest.raises(InvalidOrderingError):
            analyze(bars)


class TestTrace:

    def test_trace_off_by_default(self, range_bars):
        assert analyze(range_bars).trace is None

    def test_trace_collects_stroke_rejections(self):
        bars = zigzag_bars([100, 106, 104, 110, 100])

        result = analyze(bars, ChanConfig(trace=True))

        assert result.trace is not None
        assert result.trace.counts() == {"too_short": 1, "same_type": 1}

    def test_trace_does_not_change_structure(self, range_bars):
        plain = analyze(range_bars)
        traced = analyze(range_bars, ChanConfig(trace=True))

        assert traced.strokes == plain.strokes
        assert traced.zones == plain.zones


class TestOutput:

    def test_to_dict_is_json_serializable(self, range_bars):
        data = analyze(range_bars, ChanConfig(trace=True)).to_dict()

        text = json.dumps(data)

        assert json.loads(text)["stroke_count"] == 4
        assert data["zone_count"] == 1
        assert data["valid_zone_count"] == 1
        assert data["confirmed_turning_point_count"] == 5
        assert data["config"]["zone_strategy"] == "dynamic"
        assert data["zones"][0]["lower_bound"] == 99.5
        assert data["rejections"] == {}

    def test_analyze_dataframe(self, range_bars):
        df = pd.DataFrame({
            "timestamp": [b.time for b in range_bars],
            "Open": [b.open for b in range_bars],
            "High": [b.high for b in range_bars],
            "Low": [b.low for b in range_bars],
            "Close": [b.close for b in range_bars],
        })

        result = ChanAnalyzer().analyze_dataframe(df)

        assert result.strokes == analyze(range_bars).strokes
