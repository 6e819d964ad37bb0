"""
DataFrame and CSV adapters.

Converts tabular OHLC data into the Bar records the pipeline consumes.
Handles the common column naming conventions (any casing, time under
'time' / 'timestamp' / 'date' / 'datetime', or a DatetimeIndex) and treats
volume as optional.
"""

import os
from datetime import datetime
from typing import List

import numpy as np
import pandas as pd

from .types import Bar

TIME_COLUMNS = ["time", "timestamp", "datetime", "date"]
REQUIRED_COLUMNS = ["open", "high", "low", "close"]


def _to_epoch_seconds(value) -> int:
    """Convert a timestamp-like value to Unix seconds."""
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)):
        return int(value)
    if isinstance(value, str):
        if value.replace('.', '', 1).isdigit():
            return int(float(value))
        value = pd.Timestamp(value)
    if isinstance(value, (pd.Timestamp, datetime)):
        ts = pd.Timestamp(value)
        if ts.tzinfo is None:
            ts = ts.tz_localize("UTC")
        return int(ts.timestamp())
    raise ValueError(f"Unsupported timestamp value: {value!r}")


def dataframe_to_bars(df: pd.DataFrame) -> List[Bar]:
    """
    Convert DataFrame with OHLC columns to Bar list.

    Args:
        df: DataFrame with open/high/low/close columns (any casing), an
            optional volume column, and times either in a time-like column or
            in a DatetimeIndex.

    Returns:
        List of Bar in the DataFrame's row order.

    Raises:
        ValueError: If OHLC columns or a time source are missing.

    Example:
        >>> df = pd.read_csv("BTCUSDT-15m.csv")
        >>> bars = dataframe_to_bars(df)
    """
    col_map = {c.lower(): c for c in df.columns}

    missing = [c for c in REQUIRED_COLUMNS if c not in col_map]
    if missing:
        raise ValueError(f"Missing required columns: {missing}. Found: {df.columns.tolist()}")

    time_col = next((col_map[c] for c in TIME_COLUMNS if c in col_map), None)
    if time_col is not None:
        times = [_to_epoch_seconds(v) for v in df[time_col]]
    elif isinstance(df.index, pd.DatetimeIndex):
        times = [_to_epoch_seconds(v) for v in df.index]
    else:
        raise ValueError("No time column or DatetimeIndex found")

    if "volume" in col_map:
        volumes = df[col_map["volume"]].fillna(0).astype("float64").tolist()
    else:
        volumes = [0.0] * len(df)

    opens = df[col_map["open"]].astype("float64").tolist()
    highs = df[col_map["high"]].astype("float64").tolist()
    lows = df[col_map["low"]].astype("float64").tolist()
    closes = df[col_map["close"]].astype("float64").tolist()

    return [
        Bar(time=t, open=o, high=h, low=l, close=c, volume=v)
        for t, o, h, l, c, v in zip(times, opens, highs, lows, closes, volumes)
    ]


def load_bars_csv(filepath: str) -> List[Bar]:
    """
    Load bars from a comma-separated file with a header row.

    Raises:
        FileNotFoundError, ValueError.
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"File not found: {filepath}")
    if os.path.getsize(filepath) == 0:
        raise ValueError("File is empty")

    try:
        df = pd.read_csv(filepath, sep=',', engine='c')
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ValueError(f"Error parsing file: {e}")

    return dataframe_to_bars(df)
