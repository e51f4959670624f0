from __future__ import annotations

from datetime import datetime

from grip_trend.sample_data import (
    MAX_SAMPLE_VALUE,
    MIN_SAMPLE_VALUE,
    default_settings,
    generate_cyclic_readings,
    high_value_readings,
    normal_range_readings,
)

END = datetime(2025, 6, 30, 8)


def test_generate_cyclic_readings_daily_and_clamped() -> None:
    readings = generate_cyclic_readings(
        months=1, base_value=5.0, cycle_amplitude=200.0, end=END, seed=1
    )
    assert readings[0].date == datetime(2025, 5, 30, 8)
    assert readings[-1].date == END
    assert len(readings) == 32
    assert all(MIN_SAMPLE_VALUE <= r.value <= MAX_SAMPLE_VALUE for r in readings)


def test_generate_cyclic_readings_seed_is_reproducible() -> None:
    assert normal_range_readings(end=END, seed=3) == normal_range_readings(
        end=END, seed=3
    )
    assert high_value_readings(end=END, seed=3) != normal_range_readings(
        end=END, seed=3
    )


def test_default_settings() -> None:
    settings = default_settings()
    assert (settings.baseline_min, settings.baseline_max) == (35.0, 55.0)
    assert settings.sma_window == 7
