from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from grip_trend.guidance import (
    GuidanceCategory,
    TrendDirection,
    action_suggestion,
    calculate_trend,
    classify,
    feedback_message,
    latest_trend_value,
)
from grip_trend.model import AppSettings, ChartDataPoint, Reading


def _newest_first(values: list[float]) -> list[Reading]:
    start = datetime(2025, 3, 1)
    return [
        Reading(date=start - timedelta(days=i), value=v) for i, v in enumerate(values)
    ]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (34.9, GuidanceCategory.BELOW),
        (35.0, GuidanceCategory.WITHIN),
        (45.0, GuidanceCategory.WITHIN),
        (45.1, GuidanceCategory.ABOVE),
    ],
)
def test_classify_bounds_are_inclusive(
    value: float, expected: GuidanceCategory
) -> None:
    assert classify(value, AppSettings(baseline_min=35, baseline_max=45)) is expected


def test_category_labels() -> None:
    assert GuidanceCategory.BELOW.list_label == "Below"
    assert GuidanceCategory.WITHIN.guidance_label == "Train Normally"
    assert GuidanceCategory.ABOVE.trend_guidance_label == "Fully recovered"


def test_trend_needs_two_full_windows() -> None:
    readings = _newest_first([50.0] * 13)
    assert calculate_trend(readings, window=7) is TrendDirection.STABLE


def test_trend_improving_and_declining() -> None:
    improving = _newest_first([44.0] * 7 + [40.0] * 7)
    declining = _newest_first([36.0] * 7 + [40.0] * 7)
    assert calculate_trend(improving) is TrendDirection.IMPROVING
    assert calculate_trend(declining) is TrendDirection.DECLINING


def test_trend_within_five_percent_is_stable() -> None:
    # 41.9 vs 40.0 is +4.75%
    readings = _newest_first([41.9] * 7 + [40.0] * 7)
    assert calculate_trend(readings) is TrendDirection.STABLE


def test_feedback_covers_every_combination() -> None:
    messages = {
        feedback_message(category, trend)
        for category in GuidanceCategory
        for trend in TrendDirection
    }
    assert len(messages) == 9
    assert "healthcare provider" in feedback_message(
        GuidanceCategory.BELOW, TrendDirection.DECLINING
    )


def test_action_suggestion() -> None:
    assert action_suggestion(GuidanceCategory.WITHIN) == "Consider progressive overload"


def test_latest_trend_value() -> None:
    day = datetime(2025, 1, 1)
    points = [
        ChartDataPoint(date=day, value=1.0, sma_value=None),
        ChartDataPoint(date=day + timedelta(days=1), value=2.0, sma_value=1.5),
        ChartDataPoint(date=day + timedelta(days=2), value=3.0, sma_value=None),
    ]
    assert latest_trend_value(points) == 1.5
    assert latest_trend_value([]) is None
