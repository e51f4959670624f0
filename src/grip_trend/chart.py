"""Trend chart orchestration: points, axis domains and view lifecycle."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo

from grip_trend.aggregation import chart_points
from grip_trend.chart_state import ChartState
from grip_trend.guidance import latest_trend_value
from grip_trend.model import AppSettings, ChartDataPoint, Reading
from grip_trend.scaling import (
    ALL_PADDING_PERCENT,
    padded_range,
    scroll_domain,
    visible_width,
)
from grip_trend.y_domain import calculate_y_domain

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartConfig:
    """Rendering constants of the trend chart."""

    # Room after the newest point so it does not sit on the plot edge.
    right_padding: timedelta = timedelta(days=3)
    # Calendar zone for day and week buckets; None is the local zone.
    zone: tzinfo | None = None


@dataclass(frozen=True)
class ChartFrame:
    """Everything the charting widget needs for one render pass."""

    points: tuple[ChartDataPoint, ...]
    x_domain: tuple[datetime, datetime]
    visible_width: timedelta
    y_domain: tuple[float, float]
    latest_sma: float | None = None

    @property
    def is_empty(self) -> bool:
        return not self.points


@dataclass
class _Observed:
    period: str | None = None
    scale: str | None = None
    count: int | None = None


class TrendChart:
    """Drive one chart view session.

    Mirrors the view lifecycle: the first render with data positions the
    scroll on the newest bucket, later renders react to period, scale and
    data-count changes by resetting :class:`ChartState`. Call
    :meth:`end_render` after each pass so deferred state writes land.
    """

    def __init__(
        self, state: ChartState | None = None, config: ChartConfig | None = None
    ) -> None:
        self.state = state if state is not None else ChartState()
        self.config = config if config is not None else ChartConfig()
        self._appeared = False
        self._observed = _Observed()

    def render(
        self,
        readings: Iterable[Reading],
        settings: AppSettings | None,
        now: datetime | None = None,
    ) -> ChartFrame:
        """Build the chart frame for the current readings and settings.

        Args:
            readings: All readings, any order.
            settings: App settings, or ``None`` when none are configured yet.
            now: Reference time for the placeholder domain of an empty chart.

        Returns:
            Chart frame; empty data yields an empty but displayable frame.
        """
        effective = settings if settings is not None else AppSettings()
        points = chart_points(
            readings,
            effective.chart_scale,
            effective.sma_window,
            zone=self.config.zone,
        )
        if not points:
            return self._empty_frame(settings, effective, now)

        self._observe(points, effective)

        min_date = points[0].date
        max_date = points[-1].date + self.config.right_padding
        period = effective.chart_period
        initialized = self.state.has_initialized
        return ChartFrame(
            points=tuple(points),
            x_domain=scroll_domain(min_date, max_date, period, initialized),
            visible_width=visible_width(period, min_date, max_date),
            y_domain=calculate_y_domain(points, settings, self.state),
            latest_sma=latest_trend_value(points),
        )

    def scroll_to(self, position: datetime) -> None:
        """Record a scroll gesture reported by the charting widget."""
        self.state.scroll_position = position

    def end_render(self) -> int:
        """Apply the state writes deferred during the render pass."""
        return self.state.flush()

    def _observe(self, points: list[ChartDataPoint], settings: AppSettings) -> None:
        newest = points[-1].date
        seen = self._observed
        if not self._appeared:
            self._appeared = True
            self.state.initialize_scroll_position(newest)
        else:
            if settings.chart_period != seen.period:
                _LOG.debug("period %s -> %s", seen.period, settings.chart_period)
                self.state.reset_for_period_change(newest)
            if len(points) != seen.count:
                self.state.reset_for_new_data(newest)
            if settings.chart_scale != seen.scale:
                self.state.reset_for_scale_change()
        self._observed = _Observed(
            period=settings.chart_period, scale=settings.chart_scale, count=len(points)
        )

    def _empty_frame(
        self,
        settings: AppSettings | None,
        effective: AppSettings,
        now: datetime | None,
    ) -> ChartFrame:
        moment = now if now is not None else datetime.now()
        return ChartFrame(
            points=(),
            x_domain=padded_range(moment, moment, ALL_PADDING_PERCENT),
            visible_width=visible_width(effective.chart_period, moment, moment),
            y_domain=calculate_y_domain([], settings, self.state),
        )
