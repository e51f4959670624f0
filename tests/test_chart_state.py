from __future__ import annotations

from datetime import datetime

from grip_trend.chart_state import NO_HASH, ChartState


def test_initialize_scroll_position_defers_flag() -> None:
    state = ChartState()
    state.initialize_scroll_position(datetime(2025, 1, 10))

    assert state.scroll_position == datetime(2025, 1, 10)
    assert state.has_initialized is False
    assert state.has_pending

    assert state.flush() == 1
    assert state.has_initialized is True
    assert not state.has_pending


def test_initialize_scroll_position_is_noop_once_initialized() -> None:
    state = ChartState()
    state.initialize_scroll_position(datetime(2025, 1, 10))
    state.flush()

    state.initialize_scroll_position(datetime(2024, 6, 1))
    assert state.scroll_position == datetime(2025, 1, 10)
    assert not state.has_pending


def test_update_stable_domain_applies_on_flush() -> None:
    state = ChartState()
    state.update_stable_domain((30.0, 50.0), 1234)

    assert state.stable_y_domain is None
    assert state.last_visible_data_hash == NO_HASH

    state.flush()
    assert state.stable_y_domain == (30.0, 50.0)
    assert state.last_visible_data_hash == 1234


def test_period_change_resets_and_reanchors() -> None:
    state = ChartState(stable_y_domain=(1.0, 2.0), last_visible_data_hash=9)
    state.has_initialized = True

    state.reset_for_period_change(datetime(2025, 2, 1))
    assert state.has_initialized is False
    assert state.stable_y_domain is None
    assert state.last_visible_data_hash == NO_HASH
    assert state.scroll_position == datetime(2025, 2, 1)

    state.flush()
    assert state.has_initialized is True


def test_reset_drops_pending_domain_update_for_old_period() -> None:
    state = ChartState()
    state.update_stable_domain((30.0, 50.0), 42)
    state.reset_for_period_change(datetime(2025, 2, 1))

    applied = state.flush()
    assert applied == 1  # only the initialization flip
    assert state.stable_y_domain is None
    assert state.last_visible_data_hash == NO_HASH


def test_scale_change_drops_pending_domain_update() -> None:
    state = ChartState()
    state.update_stable_domain((30.0, 50.0), 42)
    state.reset_for_scale_change()

    assert state.flush() == 0
    assert state.stable_y_domain is None


def test_new_data_keeps_pending_initialization() -> None:
    state = ChartState()
    state.initialize_scroll_position(datetime(2025, 1, 10))
    state.update_stable_domain((30.0, 50.0), 42)
    state.reset_for_new_data(datetime(2025, 1, 11))

    state.flush()
    assert state.has_initialized is True
    assert state.stable_y_domain is None
    assert state.scroll_position == datetime(2025, 1, 11)


def test_update_after_reset_survives() -> None:
    state = ChartState()
    state.reset_for_scale_change()
    state.update_stable_domain((10.0, 20.0), 7)

    state.flush()
    assert state.stable_y_domain == (10.0, 20.0)
