"""CLI for logging grip-strength readings and inspecting the trend chart."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from dateutil import tz
from dateutil.parser import isoparse

from grip_trend.aggregation import chart_points
from grip_trend.baseline import (
    auto_baseline,
    make_reading,
    parse_decimal,
    validate_baseline,
)
from grip_trend.chart import ChartConfig, TrendChart
from grip_trend.excel_writer import ExcelLayout, write_trend_xlsx
from grip_trend.guidance import (
    action_suggestion,
    calculate_trend,
    classify,
    feedback_message,
)
from grip_trend.model import ChartPeriod, ChartScale, clamp_sma_window
from grip_trend.sample_data import normal_range_readings
from grip_trend.sources.csv_file import CsvPaths, CsvReadingsSource, readings_to_csv
from grip_trend.storage import SQLiteStore

_LOCAL_TZ = tz.tzlocal()
_LOG = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Grip-strength log with baseline corridor and trend chart."
    )
    parser.add_argument(
        "--db",
        default=str(Path.cwd() / "grip_trend.sqlite3"),
        help="SQLite database (default: ./grip_trend.sqlite3).",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Log one reading.")
    add.add_argument("value", help="Grip strength in kg (comma or dot decimal).")
    add.add_argument("--date", default=None, help="ISO date/time (default: now).")

    imp = sub.add_parser("import", help="Import a CSV file or a folder of them.")
    imp.add_argument("csv_path")

    exp = sub.add_parser("export", help="Export readings (.csv) or trend (.xlsx).")
    exp.add_argument("out_path")

    chart = sub.add_parser("chart", help="Print the chart domains.")
    chart.add_argument("--scroll", default=None, help="ISO scroll position.")

    settings = sub.add_parser("settings", help="Show or change settings.")
    settings.add_argument("--baseline-min", default=None)
    settings.add_argument("--baseline-max", default=None)
    settings.add_argument("--auto", action="store_true", help="Baseline from 14 days.")
    settings.add_argument("--period", choices=[p.value for p in ChartPeriod])
    settings.add_argument("--scale", choices=[s.value for s in ChartScale])
    settings.add_argument("--sma-window", type=int, default=None)

    demo = sub.add_parser("demo", help="Load six months of synthetic readings.")
    demo.add_argument("--seed", type=int, default=None)
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )
    store = SQLiteStore(Path(ns.db).expanduser().resolve())
    handlers = {
        "add": _cmd_add,
        "import": _cmd_import,
        "export": _cmd_export,
        "chart": _cmd_chart,
        "settings": _cmd_settings,
        "demo": _cmd_demo,
    }
    return handlers[ns.command](store, ns)


def _cmd_add(store: SQLiteStore, ns: argparse.Namespace) -> int:
    now = datetime.now(tz=_LOCAL_TZ)
    ts = _parse_when(ns.date) if ns.date else now
    reading = make_reading(ts, parse_decimal(ns.value), now=now)
    if reading is None:
        print(f"ERROR: invalid reading {ns.value!r} at {ts.isoformat()}")
        return 2
    store.add_readings([reading])
    settings = store.load_settings()
    category = classify(reading.value, settings)
    label = f"{category.list_label} ({category.guidance_label})"
    print(f"OK: {reading.value:.1f} kg -> {label}")
    return 0


def _cmd_import(store: SQLiteStore, ns: argparse.Namespace) -> int:
    path = Path(ns.csv_path).expanduser().resolve()
    if path.is_dir():
        source = CsvReadingsSource(CsvPaths(root=path), zone=_LOCAL_TZ)
        files = source.csv_files()
        readings = source.load_folder()
    else:
        source = CsvReadingsSource(CsvPaths(root=path.parent), zone=_LOCAL_TZ)
        source.validate()
        if not path.exists():
            raise FileNotFoundError(str(path))
        files = [path]
        readings = source.load_readings(path)
    inserted = store.add_readings(readings)
    for f in files:
        print(f"OK: CSV file: {f}")
    print(f"OK: Parsed readings: {len(readings)}")
    print(f"OK: New readings: {inserted}")
    return 0


def _cmd_export(store: SQLiteStore, ns: argparse.Namespace) -> int:
    out_path = Path(ns.out_path).expanduser().resolve()
    readings = store.load_readings()
    if out_path.suffix.lower() == ".xlsx":
        settings = store.load_settings()
        points = chart_points(
            readings, settings.chart_scale, settings.sma_window, zone=_LOCAL_TZ
        )
        write_trend_xlsx(points, settings, out_path, ExcelLayout())
    else:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(readings_to_csv(readings, _LOCAL_TZ), encoding="utf-8")
    print(f"OK: Output: {out_path}")
    return 0


def _cmd_chart(store: SQLiteStore, ns: argparse.Namespace) -> int:
    readings = store.load_readings()
    settings = store.load_settings()
    chart = TrendChart(config=ChartConfig(zone=_LOCAL_TZ))
    frame = chart.render(readings, settings)
    chart.end_render()
    if ns.scroll and not frame.is_empty:
        chart.scroll_to(_parse_when(ns.scroll))
        frame = chart.render(readings, settings)
        chart.end_render()

    print(f"OK: Period: {settings.chart_period}  Scale: {settings.chart_scale}")
    print(f"OK: Points: {len(frame.points)}")
    print(f"OK: X domain: {frame.x_domain[0]:%Y-%m-%d} .. {frame.x_domain[1]:%Y-%m-%d}")
    print(f"OK: Visible width: {frame.visible_width.days} days")
    print(f"OK: Y domain: {frame.y_domain[0]:.1f} .. {frame.y_domain[1]:.1f}")
    if frame.latest_sma is not None:
        category = classify(frame.latest_sma, settings)
        newest_first = sorted(readings, key=lambda r: r.date, reverse=True)
        trend = calculate_trend(newest_first)
        print(f"OK: Trend: {frame.latest_sma:.1f} kg ({category.trend_guidance_label})")
        print(f"OK: {feedback_message(category, trend)}")
        print(f"OK: {action_suggestion(category)}")
    return 0


def _cmd_settings(store: SQLiteStore, ns: argparse.Namespace) -> int:
    settings = store.load_settings()
    if ns.auto:
        corridor = auto_baseline(store.load_readings(), now=datetime.now(tz=_LOCAL_TZ))
        if corridor is None:
            print("ERROR: no readings in the last 14 days")
            return 2
        settings.baseline_min, settings.baseline_max = corridor
    if ns.baseline_min is not None or ns.baseline_max is not None:
        update = validate_baseline(
            settings, ns.baseline_min or "", ns.baseline_max or ""
        )
        if update.should_update_max_text:
            _LOG.info("baseline max adjusted to %s", update.updated_max)
    if ns.period:
        settings.chart_period = ns.period
    if ns.scale:
        settings.chart_scale = ns.scale
    if ns.sma_window is not None:
        settings.sma_window = clamp_sma_window(ns.sma_window)
    store.save_settings(settings)

    saved = store.load_settings()
    print(f"OK: Baseline: {saved.baseline_min:.1f} .. {saved.baseline_max:.1f} kg")
    print(f"OK: Period: {saved.chart_period}  Scale: {saved.chart_scale}")
    print(f"OK: SMA window: {saved.sma_window}")
    return 0


def _cmd_demo(store: SQLiteStore, ns: argparse.Namespace) -> int:
    readings = normal_range_readings(end=datetime.now(tz=_LOCAL_TZ), seed=ns.seed)
    inserted = store.add_readings(readings)
    print(f"OK: Demo readings: {inserted}")
    return 0


def _parse_when(text: str) -> datetime:
    ts = isoparse(text)
    if ts.tzinfo is None:
        return ts.replace(tzinfo=_LOCAL_TZ)
    return ts
