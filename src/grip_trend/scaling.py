"""Horizontal (date) axis scaling: period widths and scroll domains."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from dateutil import tz
from dateutil.relativedelta import relativedelta

from grip_trend.model import ChartPeriod

_LOG = logging.getLogger(__name__)

ALL_PADDING_PERCENT = 0.02
DEFAULT_SPAN = timedelta(days=90)
_MIN_SPAN = timedelta(seconds=1)

_CALENDAR_STEPS: dict[str, relativedelta] = {
    ChartPeriod.ONE_WEEK.value: relativedelta(weeks=1),
    ChartPeriod.ONE_MONTH.value: relativedelta(months=1),
    ChartPeriod.THREE_MONTHS.value: relativedelta(months=3),
    ChartPeriod.SIX_MONTHS.value: relativedelta(months=6),
    ChartPeriod.ONE_YEAR.value: relativedelta(years=1),
}


def visible_width(period: str, min_date: datetime, max_date: datetime) -> timedelta:
    """Time span shown on screen for a period selector.

    Fixed periods use calendar arithmetic from ``max_date`` so that "1M" is
    a real month. "All" is the data span plus 2% padding on each side.
    Unknown periods behave as "3M".
    """
    if period == ChartPeriod.ALL:
        return (max_date - min_date) * (1 + 2 * ALL_PADDING_PERCENT)
    step = _CALENDAR_STEPS.get(_period_token(period))
    if step is None:
        step = _CALENDAR_STEPS[ChartPeriod.THREE_MONTHS.value]
    width = _calendar_width(max_date, step)
    if width is not None:
        return width
    fallback = _calendar_width(
        max_date, _CALENDAR_STEPS[ChartPeriod.THREE_MONTHS.value]
    )
    _LOG.debug("calendar step %r overflows at %s, using 3M width", period, max_date)
    return fallback if fallback is not None else DEFAULT_SPAN


def padded_range(
    min_date: datetime, max_date: datetime, percent: float
) -> tuple[datetime, datetime]:
    """Range widened by ``percent`` of its span on both ends.

    The span has a floor of one second so equal bounds still produce a
    non-empty range.
    """
    span = max(max_date - min_date, _MIN_SPAN)
    pad = span * max(percent, 0.0)
    return min_date - pad, max_date + pad


def scroll_domain(
    min_date: datetime,
    max_date: datetime,
    period: str,
    has_initialized: bool,
) -> tuple[datetime, datetime]:
    """Date-axis domain handed to the chart.

    Args:
        min_date: First date of the series.
        max_date: Last date of the series (including any right padding).
        period: Period selector token.
        has_initialized: Whether the view already placed its initial scroll
            position for this period.

    Returns:
        ``(lower, upper)``. "All" is the padded data span. Once initialized
        the full span is returned and the visible width crops it; on the
        first render the domain is anchored on the right edge.
    """
    if period == ChartPeriod.ALL:
        return padded_range(min_date, max_date, ALL_PADDING_PERCENT)
    if has_initialized:
        return min_date, max_date
    width = visible_width(period, min_date, max_date)
    try:
        start = max_date - width
    except OverflowError:
        start = min_date
    return max(start, min_date), max_date


def _period_token(period: str) -> str:
    if isinstance(period, ChartPeriod):
        return period.value
    return str(period)


def _calendar_width(anchor: datetime, step: relativedelta) -> timedelta | None:
    try:
        end = anchor + step
    except (OverflowError, ValueError):
        return None
    return _elapsed(anchor, end)


def _elapsed(start: datetime, end: datetime) -> timedelta:
    """Absolute time between two datetimes (UTC based when tz-aware)."""
    if start.tzinfo is None or end.tzinfo is None:
        return end - start
    return end.astimezone(tz.UTC) - start.astimezone(tz.UTC)
