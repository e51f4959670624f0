"""Baseline corridor editing, auto-calculation and input validation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import cast

import pandas as pd
from dateutil.relativedelta import relativedelta

from grip_trend.model import AppSettings, Reading

AUTO_BASELINE_DAYS = 14
AUTO_BASELINE_MARGIN = 0.05
MAX_GRIP_STRENGTH = 200.0


@dataclass(frozen=True)
class BaselineUpdate:
    """Outcome of a baseline edit."""

    updated_max: float | None
    should_update_max_text: bool


def parse_decimal(text: str | None) -> float | None:
    """Parse a decimal typed with either ``,`` or ``.`` as separator."""
    if text is None:
        return None
    cleaned = text.strip().replace(",", ".")
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def validate_baseline(
    settings: AppSettings, min_text: str, max_text: str
) -> BaselineUpdate:
    """Apply typed baseline bounds to ``settings`` keeping ``min <= max``.

    An unparseable field leaves the stored bound untouched. When the
    stored max had to be raised to the new min (or a typed max is below
    min), the caller must rewrite the max text field.
    """
    min_val = parse_decimal(min_text)
    max_val = parse_decimal(max_text)

    updated_max: float | None = None
    should_update = False

    if min_val is not None:
        settings.baseline_min = min_val
        if min_val > settings.baseline_max:
            settings.baseline_max = min_val
            updated_max = min_val
            should_update = True

    if max_val is not None:
        new_max = max(max_val, settings.baseline_min)
        settings.baseline_max = new_max
        if new_max != max_val:
            updated_max = new_max
            should_update = True

    return BaselineUpdate(updated_max=updated_max, should_update_max_text=should_update)


def auto_baseline(
    readings: Iterable[Reading],
    now: datetime | None = None,
    days: int = AUTO_BASELINE_DAYS,
) -> tuple[float, float] | None:
    """Corridor of median +/- 5% over the readings of the last ``days`` days.

    Returns:
        ``(min, max)`` or ``None`` when there are no recent readings.
    """
    moment = now if now is not None else datetime.now()
    since = moment - timedelta(days=days)
    values = [r.value for r in readings if since <= r.date <= moment]
    if not values:
        return None
    mid = float(pd.Series(values, dtype="float64").median())
    return max(0.0, mid * (1 - AUTO_BASELINE_MARGIN)), mid * (1 + AUTO_BASELINE_MARGIN)


def is_valid_grip_strength(value: float | None) -> bool:
    if value is None:
        return False
    return 0 < value <= MAX_GRIP_STRENGTH


def is_valid_date(ts: datetime, now: datetime | None = None) -> bool:
    """Readings may be back-dated up to one calendar year, never future."""
    moment = now if now is not None else datetime.now(tz=ts.tzinfo)
    one_year_ago = moment - relativedelta(years=1)
    return one_year_ago <= ts <= moment


def make_reading(
    ts: datetime, value: float | None, now: datetime | None = None
) -> Reading | None:
    """Build a reading from user input; ``None`` when it fails validation."""
    if not is_valid_grip_strength(value) or not is_valid_date(ts, now):
        return None
    return Reading(date=ts, value=float(cast(float, value)))
