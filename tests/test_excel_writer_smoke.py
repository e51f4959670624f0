from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import cast

from dateutil import tz
from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from grip_trend.excel_writer import (
    ExcelLayout,
    _format_sheet,
    points_to_frame,
    write_trend_xlsx,
)
from grip_trend.model import AppSettings, ChartDataPoint


def _points() -> list[ChartDataPoint]:
    return [
        ChartDataPoint(date=datetime(2025, 1, 6, tzinfo=tz.UTC), value=33.333),
        ChartDataPoint(
            date=datetime(2025, 1, 7, tzinfo=tz.UTC), value=47.0, sma_value=40.1667
        ),
    ]


def test_write_trend_xlsx_happy_path_and_formatting(tmp_path: Path) -> None:
    out = tmp_path / "nested" / "trend.xlsx"
    write_trend_xlsx(_points(), AppSettings(), out, ExcelLayout())

    wb = load_workbook(out)
    ws = cast(Worksheet, wb[ExcelLayout().sheet_name])

    headers = [cell.value for cell in ws[1]]
    assert headers == ["Day", "Date", "Grip (kg)", "Trend (kg)", "Zone"]

    assert ws.cell(row=2, column=1).value == "Mon"
    assert ws.cell(row=3, column=1).value == "Tue"
    assert ws.cell(row=2, column=3).value == 33.33
    assert ws.cell(row=2, column=4).value is None
    assert ws.cell(row=3, column=4).value == 40.17
    assert ws.cell(row=2, column=5).value == "Below"
    assert ws.cell(row=3, column=5).value == "Above"

    assert ws.column_dimensions["A"].width == 6
    date_letter = get_column_letter(headers.index("Date") + 1)
    assert ws.column_dimensions[date_letter].width == 12
    assert ws.cell(row=2, column=2).number_format == "yyyy-mm-dd"
    assert ws.cell(row=2, column=3).number_format == "0.00"


def test_points_to_frame_without_settings_leaves_zone_empty() -> None:
    df = points_to_frame(_points(), None)
    assert list(df["zone"]) == ["", ""]
    assert df.iloc[0]["date"].tzinfo is None


def test_write_trend_xlsx_empty_series(tmp_path: Path) -> None:
    out = tmp_path / "empty.xlsx"
    write_trend_xlsx([], None, out, ExcelLayout(sheet_name="Empty"))
    ws = load_workbook(out)["Empty"]
    assert ws.max_row == 1


def test_format_sheet_handles_missing_headers() -> None:
    wb = Workbook()
    ws = cast(Worksheet, wb.active)
    ws.append(["Only"])
    ws.append([1])

    _format_sheet(ws)

    assert ws.cell(row=1, column=1).font.bold is True
    assert ws.cell(row=2, column=1).alignment.horizontal == "center"
