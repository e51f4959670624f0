"""Typed models for grip-strength readings, settings and chart points."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ChartPeriod(str, Enum):
    """Period selector shown above the trend chart."""

    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"
    ALL = "All"


class ChartScale(str, Enum):
    """Bucket granularity of the chart series."""

    DAILY = "D"
    WEEKLY = "W"


SMA_WINDOW_MIN = 1
SMA_WINDOW_MAX = 30


@dataclass(frozen=True)
class Reading:
    """One grip-strength measurement (kg)."""

    date: datetime
    value: float


@dataclass
class AppSettings:
    """Per-install settings: baseline corridor and chart preferences.

    Construction normalizes the values the same way the settings screen
    does on write: ``baseline_max`` never ends below ``baseline_min`` and
    ``sma_window`` is clamped to the stepper range.
    """

    baseline_min: float = 35.0
    baseline_max: float = 45.0
    chart_period: str = ChartPeriod.THREE_MONTHS.value
    chart_scale: str = ChartScale.DAILY.value
    sma_window: int = 7

    def __post_init__(self) -> None:
        self.baseline_min = float(self.baseline_min)
        self.baseline_max = max(float(self.baseline_max), self.baseline_min)
        self.sma_window = clamp_sma_window(self.sma_window)
        if isinstance(self.chart_period, ChartPeriod):
            self.chart_period = self.chart_period.value
        if isinstance(self.chart_scale, ChartScale):
            self.chart_scale = self.chart_scale.value


@dataclass(frozen=True)
class ChartDataPoint:
    """One bucket of the chart series (bucket start, bucket mean, SMA)."""

    date: datetime
    value: float
    sma_value: float | None = None


def clamp_sma_window(window: int) -> int:
    """Clamp an SMA window to the supported 1..30 range."""
    return max(SMA_WINDOW_MIN, min(SMA_WINDOW_MAX, int(window)))
