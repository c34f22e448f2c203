"""Exportación a Excel de la serie del gráfico."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from peso_tool.binning import round_half_away
from peso_tool.model import ChartResult

_DIA_SEMANA: tuple[str, ...] = ("lun", "mar", "mie", "jue", "vie", "sab", "dom")


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the exported workbook."""

    sheet_name: str = "Peso"
    summary_sheet_name: str = "Resumen"


def _header_map(unit_label: str) -> dict[str, str]:
    return {
        "weekday": "Día",
        "date": "Fecha",
        "value": f"Peso ({unit_label})",
    }


def chart_to_frame(result: ChartResult) -> pd.DataFrame:
    """Plotted series (display unit) as a ``date``/``value`` DataFrame."""
    rows = [{"date": b.key, "value": b.value} for b in result.plotted]
    if not rows:
        return pd.DataFrame(columns=["date", "value"])
    return pd.DataFrame(rows)


def _summary_frame(result: ChartResult) -> pd.DataFrame:
    label = result.unit.unit_label
    return pd.DataFrame(
        {
            "Campo": [
                "Periodo",
                "Desde",
                "Hasta",
                f"Mínimo ({label})",
                f"Máximo ({label})",
            ],
            "Valor": [
                result.title,
                result.window.start.isoformat(),
                result.window.end.isoformat(),
                float(round_half_away(result.min_display)),
                float(round_half_away(result.max_display)),
            ],
        }
    )


def _add_weekday_column(export_df: pd.DataFrame) -> pd.DataFrame:
    """Añade columna weekday (Día) a partir de date."""
    if export_df.empty or "date" not in export_df.columns:
        return export_df
    export_df = export_df.copy()
    weekdays = pd.to_datetime(export_df["date"]).dt.weekday
    export_df.insert(0, "weekday", weekdays.map(lambda i: _DIA_SEMANA[int(i)]))
    export_df["date"] = pd.to_datetime(export_df["date"])
    return export_df


def write_chart_xlsx(
    result: ChartResult, out_path: Path, layout: ExcelLayout
) -> None:
    """Write the chart series and a min/max summary to an Excel file.

    Args:
        result: Computed chart for one window.
        out_path: Output path for the XLSX file.
        layout: Excel layout parameters.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    export_df = _add_weekday_column(chart_to_frame(result))
    export_df = export_df.rename(columns=_header_map(result.unit.unit_label))

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        export_df.to_excel(writer, index=False, sheet_name=layout.sheet_name)
        _summary_frame(result).to_excel(
            writer, index=False, sheet_name=layout.summary_sheet_name
        )
        _format_sheet(writer.book[layout.sheet_name])
        _format_sheet(writer.book[layout.summary_sheet_name])


def _style_header_row(ws: Any) -> None:
    """Aplica fuente negrita, alineación y borde a la fila de cabecera."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    header_font = Font(bold=True)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = header_font
        cell.alignment = center
        cell.border = border


def _style_body_rows(ws: Any) -> None:
    """Aplica alineación y borde a las filas de datos."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center")
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = center
            cell.border = border


def _apply_formats(ws: Any) -> None:
    """Anchos y formatos numéricos según la cabecera."""
    for idx, cell in enumerate(ws[1], start=1):
        header = str(cell.value)
        letter = cell.column_letter
        if header == "Día":
            ws.column_dimensions[letter].width = 6
            continue
        if header == "Fecha":
            fmt = "dd/mm/yyyy"
        elif header.startswith("Peso"):
            fmt = "0.0"
        else:
            ws.column_dimensions[letter].width = 16
            continue
        ws.column_dimensions[letter].width = 14
        for row in ws.iter_rows(min_row=2, min_col=idx, max_col=idx):
            row[0].number_format = fmt


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet.

    Args:
        ws: openpyxl worksheet.
    """
    _style_header_row(ws)
    _style_body_rows(ws)
    _apply_formats(ws)
