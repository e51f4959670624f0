from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from grip_trend.chart import ChartConfig, ChartFrame, TrendChart
from grip_trend.chart_state import ChartState
from grip_trend.model import AppSettings, Reading
from grip_trend.y_domain import PLACEHOLDER_Y_DOMAIN

JAN_1 = datetime(2025, 1, 1)
MAR_1 = datetime(2025, 3, 1)


def _flat_readings(value: float = 40.0) -> list[Reading]:
    # 1 Jan .. 1 Mar 2025, one reading per day at 08:00
    days = (MAR_1 - JAN_1).days + 1
    return [
        Reading(date=JAN_1 + timedelta(days=i, hours=8), value=value)
        for i in range(days)
    ]


def _settings(period: str = "1M", scale: str = "D") -> AppSettings:
    return AppSettings(
        baseline_min=35, baseline_max=45, chart_period=period, chart_scale=scale
    )


def test_first_render_anchors_on_newest_bucket() -> None:
    chart = TrendChart()
    frame = chart.render(_flat_readings(), _settings("1M"))

    assert len(frame.points) == 60
    assert chart.state.scroll_position == MAR_1
    assert chart.state.has_initialized is False
    # right edge is the newest bucket plus three days, one calendar month wide
    assert frame.x_domain == (datetime(2025, 2, 1), datetime(2025, 3, 4))
    assert frame.visible_width == timedelta(days=31)
    assert frame.y_domain == (34.0, 46.0)
    assert frame.latest_sma == pytest.approx(40.0)

    chart.end_render()
    assert chart.state.has_initialized is True


def test_second_render_hands_over_full_span() -> None:
    chart = TrendChart()
    readings = _flat_readings()
    chart.render(readings, _settings("1M"))
    chart.end_render()

    frame = chart.render(readings, _settings("1M"))
    assert frame.x_domain == (JAN_1, datetime(2025, 3, 4))
    assert not chart.state.has_pending


def test_period_change_reanchors_right_edge() -> None:
    chart = TrendChart()
    readings = _flat_readings()
    chart.render(readings, _settings("1M"))
    chart.end_render()
    chart.scroll_to(datetime(2025, 1, 20))

    frame = chart.render(readings, _settings("1W"))
    assert chart.state.scroll_position == MAR_1
    assert chart.state.has_initialized is False
    assert frame.x_domain == (datetime(2025, 2, 25), datetime(2025, 3, 4))
    assert frame.visible_width == timedelta(days=7)

    chart.end_render()
    assert chart.state.has_initialized is True


def test_new_reading_scrolls_to_newest_and_refreshes_domain() -> None:
    chart = TrendChart()
    readings = _flat_readings()
    chart.render(readings, _settings("1M"))
    chart.end_render()

    readings.append(Reading(date=datetime(2025, 3, 2, 9), value=60.0))
    frame = chart.render(readings, _settings("1M"))
    assert chart.state.scroll_position == datetime(2025, 3, 2)
    assert chart.state.has_initialized is True
    assert frame.y_domain == (34.0, 61.0)


def test_y_domain_stable_across_renders_with_same_view() -> None:
    chart = TrendChart()
    readings = _flat_readings()
    first = chart.render(readings, _settings("1M"))
    chart.end_render()
    second = chart.render(readings, _settings("1M"))
    chart.end_render()
    assert second.y_domain == first.y_domain
    assert chart.state.stable_y_domain == first.y_domain


def test_scale_change_rebuilds_weekly_series() -> None:
    chart = TrendChart()
    readings = _flat_readings()
    chart.render(readings, _settings("1M", "D"))
    chart.end_render()

    frame = chart.render(readings, _settings("1M", "W"))
    # Mondays 30 Dec .. 24 Feb
    assert len(frame.points) == 9
    assert all(p.date.weekday() == 0 for p in frame.points)
    assert chart.state.stable_y_domain is None


def test_empty_readings_give_displayable_frame() -> None:
    chart = TrendChart()
    now = datetime(2025, 6, 1, 12)
    frame = chart.render([], _settings(), now=now)

    assert frame.is_empty
    lower, upper = frame.x_domain
    assert lower < now < upper
    assert frame.y_domain == (30.0, 50.0)
    assert frame.latest_sma is None


def test_empty_readings_without_settings_use_placeholder() -> None:
    frame = TrendChart().render([], None, now=datetime(2025, 6, 1))
    assert frame.y_domain == PLACEHOLDER_Y_DOMAIN


def test_render_without_settings_uses_defaults() -> None:
    chart = TrendChart()
    frame = chart.render(_flat_readings(), None)
    assert len(frame.points) == 60
    # no baseline folded in
    assert frame.y_domain == (39.0, 41.0)


def test_custom_right_padding() -> None:
    chart = TrendChart(config=ChartConfig(right_padding=timedelta(0)))
    frame = chart.render(_flat_readings(), _settings("All"))
    span = MAR_1 - JAN_1
    assert frame.x_domain == (JAN_1 - span * 0.02, MAR_1 + span * 0.02)


@pytest.mark.parametrize("period", ["1W", "1M", "All"])
def test_render_is_idempotent_for_identical_inputs(period: str) -> None:
    readings = _flat_readings()
    frames: list[tuple[ChartFrame, ChartState]] = []
    for _ in range(2):
        chart = TrendChart(state=ChartState(scroll_position=JAN_1))
        frame = chart.render(list(readings), _settings(period))
        chart.end_render()
        frames.append((frame, chart.state))

    (first, first_state), (second, second_state) = frames
    assert first == second
    assert first.points == second.points
    assert first.x_domain == second.x_domain
    assert first.visible_width == second.visible_width
    assert first.y_domain == second.y_domain
    assert first_state == second_state
