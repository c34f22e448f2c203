from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import cast

from dateutil import tz
from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from peso_tool.chart import compute
from peso_tool.excel_writer import (
    ExcelLayout,
    _format_sheet,
    chart_to_frame,
    write_chart_xlsx,
)
from peso_tool.model import ChartResult, Period, Sample
from peso_tool.units import UnitSystem
from peso_tool.window import CalendarConfig

MONDAY = CalendarConfig(first_weekday=0, zone=tz.UTC)


def _result(unit: UnitSystem = UnitSystem.METRIC) -> ChartResult:
    samples = [
        Sample(timestamp=datetime(2026, 1, 5, 8), value=100.0),
        Sample(timestamp=datetime(2026, 1, 5, 20), value=102.0),
        Sample(timestamp=datetime(2026, 1, 6, 8), value=101.5),
    ]
    return compute(samples, Period.WEEK, unit=unit, calendar=MONDAY)


def test_chart_to_frame() -> None:
    df = chart_to_frame(_result())
    assert list(df["date"]) == [date(2026, 1, 5), date(2026, 1, 6)]
    assert list(df["value"]) == [101.0, 101.5]


def test_write_chart_xlsx_happy_path_and_formatting(tmp_path: Path) -> None:
    """Una fila por bucket: Día, Fecha, Peso."""
    out = tmp_path / "nested" / "out.xlsx"
    write_chart_xlsx(_result(), out, ExcelLayout())

    wb = load_workbook(out)
    ws = cast(Worksheet, wb[ExcelLayout().sheet_name])
    headers = [cell.value for cell in ws[1]]
    assert headers == ["Día", "Fecha", "Peso (kg)"]
    assert ws.cell(row=2, column=1).value == "lun"
    assert ws.cell(row=3, column=1).value == "mar"
    assert ws.cell(row=2, column=2).value == datetime(2026, 1, 5)
    assert ws.cell(row=2, column=3).value == 101.0
    assert ws.cell(row=2, column=3).number_format == "0.0"
    assert ws.cell(row=2, column=2).number_format == "dd/mm/yyyy"
    assert ws.column_dimensions["A"].width == 6
    assert ws.cell(row=1, column=1).font.bold is True

    summary = cast(Worksheet, wb[ExcelLayout().summary_sheet_name])
    values = {row[0]: row[1] for row in summary.iter_rows(min_row=2, values_only=True)}
    assert values["Periodo"] == "5 Jan – 11 Jan"
    assert values["Mínimo (kg)"] == 100.0
    assert values["Máximo (kg)"] == 102.0


def test_write_chart_xlsx_imperial_header(tmp_path: Path) -> None:
    out = tmp_path / "out.xlsx"
    write_chart_xlsx(_result(UnitSystem.IMPERIAL), out, ExcelLayout())
    ws = load_workbook(out)[ExcelLayout().sheet_name]
    assert ws.cell(row=1, column=3).value == "Peso (lb)"


def test_write_chart_xlsx_empty_series(tmp_path: Path) -> None:
    result = compute([], Period.MONTH, calendar=MONDAY, today=date(2026, 1, 7))
    out = tmp_path / "empty.xlsx"
    write_chart_xlsx(result, out, ExcelLayout())
    ws = load_workbook(out)[ExcelLayout().sheet_name]
    assert [cell.value for cell in ws[1]] == ["Fecha", "Peso (kg)"]
    assert ws.max_row == 1


def test_format_sheet_handles_unknown_headers() -> None:
    wb = Workbook()
    ws = cast(Worksheet, wb.active)
    ws.append(["Solo"])
    ws.append([1])

    _format_sheet(ws)

    assert ws.cell(row=1, column=1).font.bold is True
    assert ws.cell(row=2, column=1).alignment.horizontal == "center"


def test_summary_min_max_round_half_away(tmp_path: Path) -> None:
    samples = [
        Sample(timestamp=datetime(2026, 1, 5, 8), value=100.25),
        Sample(timestamp=datetime(2026, 1, 6, 8), value=101.4),
    ]
    out = tmp_path / "out.xlsx"
    result = compute(samples, Period.WEEK, calendar=MONDAY)
    write_chart_xlsx(result, out, ExcelLayout())

    summary = cast(Worksheet, load_workbook(out)[ExcelLayout().summary_sheet_name])
    values = {row[0]: row[1] for row in summary.iter_rows(min_row=2, values_only=True)}
    # round() daría 100.2 (mitad al par)
    assert values["Mínimo (kg)"] == 100.3
    assert values["Máximo (kg)"] == 101.4
