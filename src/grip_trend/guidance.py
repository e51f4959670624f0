"""Baseline classification, trend direction and training feedback."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from grip_trend.model import AppSettings, ChartDataPoint, Reading

TREND_THRESHOLD = 0.05


class GuidanceCategory(Enum):
    """Position of a value relative to the baseline corridor."""

    BELOW = "below"
    WITHIN = "within"
    ABOVE = "above"

    @property
    def list_label(self) -> str:
        return _LIST_LABELS[self]

    @property
    def guidance_label(self) -> str:
        return _GUIDANCE_LABELS[self]

    @property
    def trend_guidance_label(self) -> str:
        return _TREND_LABELS[self]


class TrendDirection(Enum):
    IMPROVING = "Improving"
    DECLINING = "Declining"
    STABLE = "Stable"


_LIST_LABELS = {
    GuidanceCategory.BELOW: "Below",
    GuidanceCategory.WITHIN: "Baseline",
    GuidanceCategory.ABOVE: "Above",
}
_GUIDANCE_LABELS = {
    GuidanceCategory.BELOW: "Take Rest",
    GuidanceCategory.WITHIN: "Train Normally",
    GuidanceCategory.ABOVE: "Go Hard",
}
_TREND_LABELS = {
    GuidanceCategory.BELOW: "Take deload",
    GuidanceCategory.WITHIN: "Train Normally",
    GuidanceCategory.ABOVE: "Fully recovered",
}

_FEEDBACK: dict[tuple[GuidanceCategory, TrendDirection], str] = {
    (GuidanceCategory.ABOVE, TrendDirection.IMPROVING): (
        "Excellent! Your grip strength is above baseline and improving."
    ),
    (GuidanceCategory.ABOVE, TrendDirection.STABLE): (
        "Great work! You're maintaining strength above your baseline."
    ),
    (GuidanceCategory.ABOVE, TrendDirection.DECLINING): (
        "Good strength level, but consider more consistent training."
    ),
    (GuidanceCategory.WITHIN, TrendDirection.IMPROVING): (
        "Nice progress! You're moving toward stronger grip strength."
    ),
    (GuidanceCategory.WITHIN, TrendDirection.STABLE): (
        "You're maintaining your baseline strength well."
    ),
    (GuidanceCategory.WITHIN, TrendDirection.DECLINING): (
        "Consider increasing training frequency to build strength."
    ),
    (GuidanceCategory.BELOW, TrendDirection.IMPROVING): (
        "Good progress! Keep up the consistent training."
    ),
    (GuidanceCategory.BELOW, TrendDirection.STABLE): (
        "Focus on consistent grip training to build strength."
    ),
    (GuidanceCategory.BELOW, TrendDirection.DECLINING): (
        "Consider consulting a healthcare provider about your grip strength."
    ),
}

_ACTIONS = {
    GuidanceCategory.ABOVE: "Maintain your current routine",
    GuidanceCategory.WITHIN: "Consider progressive overload",
    GuidanceCategory.BELOW: "Focus on consistent training",
}


def classify(value: float, settings: AppSettings) -> GuidanceCategory:
    """Classify a value against the baseline corridor (bounds are inside)."""
    if value < settings.baseline_min:
        return GuidanceCategory.BELOW
    if value > settings.baseline_max:
        return GuidanceCategory.ABOVE
    return GuidanceCategory.WITHIN


def calculate_trend(readings: Sequence[Reading], window: int = 7) -> TrendDirection:
    """Compare the newest ``window`` readings against the ``window`` before.

    Args:
        readings: Readings ordered newest first.
        window: Readings per compared block.

    Returns:
        Improving/declining when the mean moved by more than 5% of the older
        block's mean, stable otherwise (also when there is too little data).
    """
    if window < 1 or len(readings) < window * 2:
        return TrendDirection.STABLE

    recent = readings[:window]
    previous = readings[window : window * 2]
    recent_avg = sum(r.value for r in recent) / len(recent)
    previous_avg = sum(r.value for r in previous) / len(previous)

    difference = recent_avg - previous_avg
    threshold = previous_avg * TREND_THRESHOLD
    if difference > threshold:
        return TrendDirection.IMPROVING
    if difference < -threshold:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def feedback_message(category: GuidanceCategory, trend: TrendDirection) -> str:
    return _FEEDBACK[(category, trend)]


def action_suggestion(category: GuidanceCategory) -> str:
    return _ACTIONS[category]


def latest_trend_value(points: Sequence[ChartDataPoint]) -> float | None:
    """Most recent SMA value of the chart series, if any."""
    for point in reversed(points):
        if point.sma_value is not None:
            return point.sma_value
    return None
