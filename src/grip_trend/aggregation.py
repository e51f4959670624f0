"""Calendar bucketing of readings and the chart-ready point pipeline."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, time, timedelta, tzinfo

import pandas as pd
from dateutil import tz

from grip_trend.model import ChartDataPoint, ChartScale, Reading
from grip_trend.moving_average import effective_sma_window, simple_moving_average

_LOG = logging.getLogger(__name__)


def bucket_start(ts: datetime, scale: str, zone: tzinfo | None = None) -> datetime:
    """Start of the calendar day (or Monday-based week) containing ``ts``.

    Aware timestamps are first moved into the calendar ``zone`` (the local
    zone when omitted), so readings stored with different UTC offsets share
    one bucket per day. The boundary is midnight wall-clock time in that
    zone. Naive timestamps are bucketed as they are.
    """
    if ts.tzinfo is not None:
        calendar_zone = zone if zone is not None else tz.tzlocal()
        ts = ts.astimezone(calendar_zone)
    day = ts.date()
    if scale == ChartScale.WEEKLY:
        day = day - timedelta(days=day.weekday())
    return datetime.combine(day, time.min, tzinfo=ts.tzinfo)


def readings_to_frame(
    readings: Iterable[Reading], cutoff: datetime | None = None
) -> pd.DataFrame:
    """Convert readings to a DataFrame ordered by date.

    Readings dated before ``cutoff`` are dropped.
    """
    rows = [
        {"datetime": r.date, "value": float(r.value)}
        for r in readings
        if cutoff is None or r.date >= cutoff
    ]
    df = pd.DataFrame(rows, columns=["datetime", "value"])
    if df.empty:
        return df
    return df.sort_values("datetime", kind="stable").reset_index(drop=True)


def bucket_readings(
    readings: Iterable[Reading],
    scale: str,
    cutoff: datetime | None = None,
    zone: tzinfo | None = None,
) -> list[tuple[datetime, float]]:
    """Average readings per calendar bucket.

    Args:
        readings: Readings in any order.
        scale: ``"D"`` for daily buckets, ``"W"`` for weekly buckets.
        cutoff: Inclusive lower date bound; ``None`` keeps everything.
        zone: Calendar zone of the buckets (see :func:`bucket_start`).

    Returns:
        ``(bucket_start, mean value)`` pairs in ascending date order, one per
        non-empty bucket.
    """
    df = readings_to_frame(readings, cutoff)
    if df.empty:
        return []

    df["bucket"] = [
        bucket_start(_to_datetime(ts), scale, zone) for ts in df["datetime"]
    ]
    g = df.groupby("bucket", sort=True)["value"].mean()
    return [(_to_datetime(key), float(mean)) for key, mean in g.items()]


def chart_points(
    readings: Iterable[Reading],
    scale: str,
    sma_window: int,
    cutoff: datetime | None = None,
    zone: tzinfo | None = None,
) -> list[ChartDataPoint]:
    """Full pipeline: bucket the readings, then attach the trailing SMA."""
    buckets = bucket_readings(readings, scale, cutoff, zone)
    window = effective_sma_window(sma_window, scale)
    sma = simple_moving_average([value for _, value in buckets], window)
    _LOG.debug(
        "chart points: %d buckets, scale=%s, sma window=%d",
        len(buckets),
        scale,
        window,
    )
    return [
        ChartDataPoint(date=day, value=value, sma_value=avg)
        for (day, value), avg in zip(buckets, sma)
    ]


def _to_datetime(value: object) -> datetime:
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, datetime):
        return value
    return pd.Timestamp(value).to_pydatetime()
