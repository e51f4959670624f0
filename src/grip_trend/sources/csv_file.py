"""Import and export of readings as ``date,value`` CSV text."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path

from dateutil import tz
from dateutil.parser import isoparse

from grip_trend.model import Reading
from grip_trend.sources.base import ReadingSource, SourcePaths

_SEPARATORS = re.compile(r"[;\t]")
_LOOKS_LIKE_DATE = re.compile(r"\d[-/.]\d|\d{8}")
_DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d.%m.%Y",
    "%m/%d/%Y",
    "%d/%m/%Y",
)
_EXPORT_HEADER = "date,value"


@dataclass(frozen=True)
class CsvPaths(SourcePaths):
    """Paths for CSV exports."""

    # root: folder containing *.csv


class CsvReadingsSource(ReadingSource):
    """CSV reading source (files written by the export or by hand)."""

    def __init__(self, paths: CsvPaths, zone: tzinfo | None = None) -> None:
        """Create a CSV source.

        Args:
            paths: Folder holding the CSV files.
            zone: Calendar zone given to dates written without one.
        """
        super().__init__(paths)
        self._zone = zone

    def csv_files(self) -> list[Path]:
        """Return CSV files in the root folder, oldest name first."""
        files = sorted(self._paths.root.glob("*.csv"))
        if not files:
            raise FileNotFoundError(f"No *.csv in {self._paths.root}")
        return files

    def load_readings(self, path: Path) -> list[Reading]:
        """Parse a CSV file into readings.

        Args:
            path: Path to the CSV file.

        Returns:
            Readings sorted by date; unparseable lines are skipped.
        """
        text = path.read_text(encoding="utf-8-sig")
        return parse_csv_text(text, self._zone)

    def load_folder(self) -> list[Reading]:
        """Readings of every CSV file in the root folder, sorted by date."""
        out: list[Reading] = []
        for path in self.csv_files():
            out.extend(self.load_readings(path))
        out.sort(key=lambda r: r.date)
        return out


def parse_csv_text(text: str, zone: tzinfo | None = None) -> list[Reading]:
    """Parse ``date,value`` (or ``value,date``) lines.

    Columns may be separated by comma, semicolon or tab. Lines that do not
    hold a date and a number (a header, comments) are skipped. Dates without
    a zone are taken in ``zone`` (the local zone when omitted), the same
    calendar the export writes days in.
    """
    calendar_zone = _calendar_zone(zone)
    out: list[Reading] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        # Semicolon or tab files may use a decimal comma.
        parts = _SEPARATORS.split(line) if _SEPARATORS.search(line) else line.split(",")
        cols = [c.strip() for c in parts if c.strip()]
        if len(cols) < 2:
            continue
        reading = _columns_to_reading(cols[0], cols[1], calendar_zone)
        if reading is not None:
            out.append(reading)
    out.sort(key=lambda r: r.date)
    return out


def readings_to_csv(readings: Iterable[Reading], zone: tzinfo | None = None) -> str:
    """Serialize readings as CSV with a header, one ISO day per line.

    The day is the calendar day in ``zone`` (the local zone when omitted).
    """
    calendar_zone = _calendar_zone(zone)
    lines = [_EXPORT_HEADER]
    for r in sorted(readings, key=lambda r: r.date):
        day = _in_zone(r.date, calendar_zone).strftime("%Y-%m-%d")
        lines.append(f"{day},{r.value:.3f}")
    return "\n".join(lines) + "\n"


def _columns_to_reading(a: str, b: str, zone: tzinfo) -> Reading | None:
    ts = _parse_date(a, zone)
    value = _parse_float(b)
    if ts is not None and value is not None:
        return Reading(date=ts, value=value)
    value = _parse_float(a)
    ts = _parse_date(b, zone)
    if ts is not None and value is not None:
        return Reading(date=ts, value=value)
    return None


def _parse_float(text: str) -> float | None:
    try:
        return float(text.replace(",", "."))
    except ValueError:
        return None


def _parse_date(text: str, zone: tzinfo) -> datetime | None:
    """Parses ISO 8601 first, then the day-first/month-first formats."""
    if not _LOOKS_LIKE_DATE.search(text):
        return None
    try:
        return _ensure_tz(isoparse(text), zone)
    except (ValueError, OverflowError):
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=zone)
        except ValueError:
            continue
    return None


def _calendar_zone(zone: tzinfo | None) -> tzinfo:
    return zone if zone is not None else tz.tzlocal()


def _ensure_tz(ts: datetime, zone: tzinfo) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=zone)
    return ts


def _in_zone(ts: datetime, zone: tzinfo) -> datetime:
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(zone)
