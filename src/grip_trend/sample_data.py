"""Synthetic readings for demos and manual chart checks."""

from __future__ import annotations

import math
import random
from datetime import datetime

from dateutil.relativedelta import relativedelta

from grip_trend.model import AppSettings, ChartPeriod, ChartScale, Reading

MIN_SAMPLE_VALUE = 10.0
MAX_SAMPLE_VALUE = 120.0


def generate_cyclic_readings(
    months: int = 4,
    base_value: float = 45.0,
    cycle_amplitude: float = 15.0,
    cycle_length: int = 21,
    noise: float = 3.0,
    trend: float = 0.1,
    end: datetime | None = None,
    seed: int | None = None,
) -> list[Reading]:
    """One reading per day: sine cycle + linear trend + uniform noise.

    Values are clamped to a plausible 10..120 kg range. Pass ``seed`` for a
    reproducible series.
    """
    rng = random.Random(seed)
    end_date = end if end is not None else datetime.now()
    current = end_date - relativedelta(months=months)

    readings: list[Reading] = []
    day_index = 0
    while current <= end_date:
        phase = (day_index % cycle_length) / cycle_length * 2 * math.pi
        value = (
            base_value
            + math.sin(phase) * cycle_amplitude
            + day_index * trend
            + rng.uniform(-noise, noise)
        )
        clamped = max(MIN_SAMPLE_VALUE, min(MAX_SAMPLE_VALUE, value))
        readings.append(Reading(date=current, value=clamped))
        current = current + relativedelta(days=1)
        day_index += 1
    return readings


def normal_range_readings(
    end: datetime | None = None, seed: int | None = None
) -> list[Reading]:
    return generate_cyclic_readings(
        months=6,
        base_value=42.0,
        cycle_amplitude=8.0,
        cycle_length=14,
        noise=2.5,
        trend=0.05,
        end=end,
        seed=seed,
    )


def high_value_readings(
    end: datetime | None = None, seed: int | None = None
) -> list[Reading]:
    return generate_cyclic_readings(
        months=5,
        base_value=78.0,
        cycle_amplitude=12.0,
        cycle_length=28,
        noise=4.0,
        trend=0.08,
        end=end,
        seed=seed,
    )


def default_settings() -> AppSettings:
    return AppSettings(
        baseline_min=35.0,
        baseline_max=55.0,
        chart_period=ChartPeriod.THREE_MONTHS.value,
        chart_scale=ChartScale.DAILY.value,
        sma_window=7,
    )
