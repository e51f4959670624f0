"""Formatted Excel export of the trend series."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from grip_trend.guidance import classify
from grip_trend.model import AppSettings, ChartDataPoint

_WEEKDAYS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_HEADER_MAP: dict[str, str] = {
    "weekday": "Day",
    "date": "Date",
    "value": "Grip (kg)",
    "sma_value": "Trend (kg)",
    "zone": "Zone",
}


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the trend sheet."""

    sheet_name: str = "Grip trend"


def points_to_frame(
    points: Sequence[ChartDataPoint], settings: AppSettings | None
) -> pd.DataFrame:
    """Tabulate chart points with weekday and baseline zone columns."""
    rows = [
        {
            "weekday": _weekday_label(p.date.weekday()),
            "date": p.date.replace(tzinfo=None),
            "value": round(p.value, 2),
            "sma_value": round(p.sma_value, 2) if p.sma_value is not None else None,
            "zone": "" if settings is None else classify(p.value, settings).list_label,
        }
        for p in points
    ]
    return pd.DataFrame(rows, columns=list(_HEADER_MAP))


def write_trend_xlsx(
    points: Sequence[ChartDataPoint],
    settings: AppSettings | None,
    out_path: Path,
    layout: ExcelLayout,
) -> None:
    """Write a printable Excel sheet of the chart series.

    Args:
        points: Chart-ready points (daily or weekly buckets).
        settings: Settings used to label each bucket's zone.
        out_path: Output path for the XLSX file.
        layout: Excel layout parameters.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    export_df = points_to_frame(points, settings).rename(columns=_HEADER_MAP)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        export_df.to_excel(writer, index=False, sheet_name=layout.sheet_name)
        ws = writer.book[layout.sheet_name]
        _format_sheet(ws)


def _weekday_label(i: int) -> str:
    return _WEEKDAYS[i] if 0 <= i < 7 else ""


def _style_header_row(ws: Any) -> None:
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = center
        cell.border = border


def _style_body_rows(ws: Any) -> None:
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center")
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = center
            cell.border = border


def _apply_column_formats(ws: Any) -> None:
    """Column widths and number formats keyed by header text."""
    formats: dict[str, tuple[int, str | None]] = {
        "Day": (6, None),
        "Date": (12, "yyyy-mm-dd"),
        "Grip (kg)": (11, "0.00"),
        "Trend (kg)": (11, "0.00"),
        "Zone": (10, None),
    }
    for cell in ws[1]:
        fmt = formats.get(str(cell.value))
        if fmt is None:
            continue
        width, number_format = fmt
        ws.column_dimensions[cell.column_letter].width = width
        if number_format is None:
            continue
        for row in ws.iter_rows(min_row=2, min_col=cell.column, max_col=cell.column):
            row[0].number_format = number_format


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet.

    Args:
        ws: openpyxl worksheet.
    """
    _style_header_row(ws)
    _style_body_rows(ws)
    _apply_column_formats(ws)
