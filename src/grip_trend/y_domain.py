"""Vertical (value) axis domain, frozen while the visible data is unchanged."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from datetime import datetime, timedelta
from hashlib import sha256

from grip_trend.chart_state import ChartState
from grip_trend.model import AppSettings, ChartDataPoint, ChartPeriod

_LOG = logging.getLogger(__name__)

VALUE_PADDING = 1.0
BASELINE_FALLBACK_PADDING = 5.0
PLACEHOLDER_Y_DOMAIN: tuple[float, float] = (0.0, 1.0)

_LOOKUP_DAYS: dict[str, int] = {
    ChartPeriod.ONE_MONTH.value: 30,
    ChartPeriod.THREE_MONTHS.value: 90,
    ChartPeriod.SIX_MONTHS.value: 180,
    ChartPeriod.ONE_YEAR.value: 365,
    ChartPeriod.ALL.value: 90,
}
_DEFAULT_LOOKUP_DAYS = 90


def lookup_days(period: str) -> int:
    """Half-width (days) of the window used to pick on-screen points."""
    token = period.value if isinstance(period, ChartPeriod) else str(period)
    return _LOOKUP_DAYS.get(token, _DEFAULT_LOOKUP_DAYS)


def visible_chart_data(
    points: Sequence[ChartDataPoint],
    period: str,
    scroll_position: datetime,
) -> list[ChartDataPoint]:
    """Points around the scroll position.

    Selects points within ``lookup_days(period)`` days on either side of
    ``scroll_position``. When that window holds nothing (scrolled into a
    gap) the single nearest point is returned instead.
    """
    if not points:
        return []
    half_width = timedelta(days=lookup_days(period))
    start = scroll_position - half_width
    end = scroll_position + half_width
    _LOG.debug("visible date range %s .. %s (scroll %s)", start, end, scroll_position)

    visible = [p for p in points if start <= p.date <= end]
    if visible:
        return visible
    nearest = min(points, key=lambda p: abs(p.date - scroll_position))
    return [nearest]


def data_hash(points: Sequence[ChartDataPoint]) -> int:
    """Content hash of a point list, stable across runs and processes."""
    payload = json.dumps(
        [(p.date.isoformat(), p.value, p.sma_value) for p in points],
        ensure_ascii=True,
        sort_keys=False,
    )
    digest = sha256(payload.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def calculate_y_domain(
    points: Sequence[ChartDataPoint],
    settings: AppSettings | None,
    state: ChartState,
) -> tuple[float, float]:
    """Value-axis domain for the current scroll position.

    The stored domain in ``state`` is returned untouched as long as the
    visible points hash to ``state.last_visible_data_hash``. Otherwise the
    domain is rebuilt from the visible values, SMA values and the baseline
    corridor, and queued on ``state`` for the next flush.

    Args:
        points: Full chart series.
        settings: App settings; ``None`` means no baseline is configured.
        state: Chart session state (read here, written through its queue).

    Returns:
        ``(low, high)``.
    """
    period = ChartPeriod.THREE_MONTHS.value
    if settings is not None:
        period = settings.chart_period
    visible = visible_chart_data(points, period, state.scroll_position)
    visible_hash = data_hash(visible)

    stable = state.stable_y_domain
    if stable is not None and visible_hash == state.last_visible_data_hash:
        return stable

    values = [p.value for p in visible] + [
        p.sma_value for p in visible if p.sma_value is not None
    ]
    if not values:
        return _empty_domain(settings, state, visible_hash)

    low = min(values)
    high = max(values)
    if settings is not None:
        low = min(low, settings.baseline_min)
        high = max(high, settings.baseline_max)
    domain = (low - VALUE_PADDING, high + VALUE_PADDING)
    _LOG.debug("y domain recomputed from %d points: %s", len(visible), domain)
    state.update_stable_domain(domain, visible_hash)
    return domain


def _empty_domain(
    settings: AppSettings | None, state: ChartState, visible_hash: int
) -> tuple[float, float]:
    if state.stable_y_domain is not None:
        return state.stable_y_domain
    if settings is None:
        return PLACEHOLDER_Y_DOMAIN
    low = min(settings.baseline_min, settings.baseline_max) - BASELINE_FALLBACK_PADDING
    high = max(settings.baseline_min, settings.baseline_max) + BASELINE_FALLBACK_PADDING
    domain = (low, high)
    state.update_stable_domain(domain, visible_hash)
    return domain
