"""Trailing simple moving average over a bucketed series."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from grip_trend.model import ChartScale

WEEKLY_MIN_WINDOW = 3


def simple_moving_average(values: Sequence[float], window: int) -> list[float | None]:
    """Trailing mean of the last ``window`` values.

    Args:
        values: Bucket values in ascending date order.
        window: Window size; values below 1 behave as 1.

    Returns:
        One entry per input value: the mean of ``values[i-window+1..i]``
        once ``window`` values have been seen, ``None`` before that.
    """
    if not values:
        return []
    window = max(1, int(window))
    series = pd.Series(values, dtype="float64")
    rolled = series.rolling(window, min_periods=window).mean()
    return [None if pd.isna(v) else float(v) for v in rolled]


def effective_sma_window(sma_window: int, scale: str) -> int:
    """Window actually used for a chart scale.

    Weekly buckets span seven days each, so the configured (daily) window is
    halved (half rounded up), with a floor of three buckets.
    """
    if scale == ChartScale.WEEKLY:
        return max(WEEKLY_MIN_WINDOW, (sma_window + 1) // 2)
    return max(1, sma_window)
