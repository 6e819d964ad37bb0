"""
Tests for DataFrame / CSV adapters.

Verifies:
- Column matching is case-insensitive and volume is optional
- Time is read from a time-like column or a DatetimeIndex
- Missing columns and unreadable files raise clear errors
"""

import pandas as pd
import pytest

from src.chan_analysis.adapters import dataframe_to_bars, load_bars_csv


def ohlc_frame(**overrides):
    data = {
        "time": [1700000000, 1700000060, 1700000120],
        "open": [100.0, 101.0, 102.0],
        "high": [101.5, 102.5, 103.5],
        "low": [99.5, 100.5, 101.5],
        "close": [101.0, 102.0, 103.0],
        "volume": [10, 20, 30],
    }
    data.update(overrides)
    return pd.DataFrame(data)


class TestDataframeToBars:

    def test_basic_conversion(self):
        bars = dataframe_to_bars(ohlc_frame())

        assert len(bars) == 3
        assert bars[0].time == 1700000000
        assert (bars[1].open, bars[1].high, bars[1].low, bars[1].close) == (101.0, 102.5, 100.5, 102.0)
        assert bars[2].volume == 30.0

    def test_columns_matched_case_insensitively(self):
        df = ohlc_frame().rename(columns=str.capitalize)

        bars = dataframe_to_bars(df)

        assert bars[0].high == 101.5

    def test_volume_is_optional(self):
        df = ohlc_frame().drop(columns=["volume"])

        bars = dataframe_to_bars(df)

        assert all(b.volume == 0.0 for b in bars)

    def test_datetime_strings_become_utc_seconds(self):
        df = ohlc_frame(time=["2024-01-01 00:00:00", "2024-01-01 00:01:00", "2024-01-01 00:02:00"])
        df = df.rename(columns={"time": "datetime"})

        bars = dataframe_to_bars(df)

        assert [b.time for b in bars] == [1704067200, 1704067260, 1704067320]

    def test_datetime_index(self):
        df = ohlc_frame().drop(columns=["time"])
        df.index = pd.date_range("2024-01-01", periods=3, freq="1min")

        bars = dataframe_to_bars(df)

        assert bars[0].time == 1704067200
        assert bars[2].time - bars[0].time == 120

    def test_missing_price_column_raises(self):
        with pytest.raises(ValueError, match="Missing required columns"):
            dataframe_to_bars(ohlc_frame().drop(columns=["low"]))

    def test_missing_time_raises(self):
        with pytest.raises(ValueError, match="No time column"):
            dataframe_to_bars(ohlc_frame().drop(columns=["time"]))


class TestLoadBarsCsv:

    def test_loads_file(self, tmp_path):
        path = tmp_path / "bars.csv"
        ohlc_frame().to_csv(path, index=False)

        bars = load_bars_csv(str(path))

        assert len(bars) == 3
        assert bars[-1].close == 103.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_bars_csv(str(tmp_path / "nope.csv"))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")

        with pytest.raises(ValueError):
            load_bars_csv(str(path))
