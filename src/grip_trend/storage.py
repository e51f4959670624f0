"""SQLite persistence for settings and readings."""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterable
from datetime import datetime
from hashlib import sha256
from pathlib import Path

from grip_trend.model import AppSettings, Reading

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS app_settings (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS readings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    row_hash TEXT NOT NULL,
    date TEXT NOT NULL,
    value REAL NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_readings_row_hash_unique
ON readings(row_hash);
"""


class SQLiteStore:
    """SQLite repository for readings and the single settings record."""

    def __init__(self, db_path: Path) -> None:
        """Create store and ensure schema exists."""
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def load_settings(self) -> AppSettings:
        """Return stored settings, creating the defaults when absent."""
        with self._connect() as conn:
            rows = conn.execute("SELECT key, value FROM app_settings").fetchall()
        values = {row["key"]: row["value"] for row in rows}
        if not values:
            settings = AppSettings()
            self.save_settings(settings)
            return settings

        defaults = AppSettings()
        return AppSettings(
            baseline_min=_as_float(values.get("baseline_min"), defaults.baseline_min),
            baseline_max=_as_float(values.get("baseline_max"), defaults.baseline_max),
            chart_period=values.get("chart_period") or defaults.chart_period,
            chart_scale=values.get("chart_scale") or defaults.chart_scale,
            sma_window=int(_as_float(values.get("sma_window"), defaults.sma_window)),
        )

    def save_settings(self, settings: AppSettings) -> None:
        """Store the settings in the key/value table."""
        normalized = AppSettings(
            baseline_min=settings.baseline_min,
            baseline_max=settings.baseline_max,
            chart_period=settings.chart_period,
            chart_scale=settings.chart_scale,
            sma_window=settings.sma_window,
        )
        payload = {
            "baseline_min": json.dumps(normalized.baseline_min),
            "baseline_max": json.dumps(normalized.baseline_max),
            "chart_period": normalized.chart_period,
            "chart_scale": normalized.chart_scale,
            "sma_window": json.dumps(normalized.sma_window),
        }
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO app_settings(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                payload.items(),
            )
            conn.commit()

    def add_readings(self, readings: Iterable[Reading]) -> int:
        """Insert readings not stored yet. Returns the number inserted."""
        rows = [_reading_row(r) for r in readings]
        if not rows:
            return 0
        with self._connect() as conn:
            before = conn.total_changes
            conn.executemany(
                """
                INSERT OR IGNORE INTO readings(row_hash, date, value)
                VALUES (?, ?, ?)
                """,
                rows,
            )
            inserted = conn.total_changes - before
            conn.commit()
        return inserted

    def load_readings(self) -> list[Reading]:
        """Load all readings ordered by date."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT date, value FROM readings ORDER BY date, id"
            ).fetchall()
        return [
            Reading(date=datetime.fromisoformat(row["date"]), value=float(row["value"]))
            for row in rows
        ]

    def delete_reading(self, reading: Reading) -> bool:
        """Delete one reading. Returns False when it was not stored."""
        row_hash = _reading_row(reading)[0]
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM readings WHERE row_hash = ?", (row_hash,))
            conn.commit()
        return cur.rowcount > 0


def _as_float(raw: str | None, default: float) -> float:
    if raw is None:
        return default
    try:
        return float(json.loads(raw))
    except (json.JSONDecodeError, TypeError, ValueError):
        return default


def _reading_row(reading: Reading) -> tuple[str, str, float]:
    values = (reading.date.isoformat(), float(reading.value))
    return (_row_hash(values), *values)


def _row_hash(values: tuple[object, ...]) -> str:
    payload = json.dumps(values, ensure_ascii=True, sort_keys=False, default=str)
    return sha256(payload.encode("utf-8")).hexdigest()
