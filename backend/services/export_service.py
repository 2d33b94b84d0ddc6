"""Export service - generates CSV and Excel files in memory"""

import io
from typing import Optional

import pandas as pd
import openpyxl
from openpyxl.styles import Font, Alignment, PatternFill

from config.layout_config import EXCEL_HEADER_COLOR
from core.exporter import LayoutExporter


def generate_csv_bytes(df: pd.DataFrame) -> bytes:
    """Serialize a table as UTF-8 CSV bytes"""
    output = io.StringIO()
    df.to_csv(output, index=False)
    return output.getvalue().encode("utf-8")


def _write_header(ws, headers, row: int = 1, start_col: int = 1) -> None:
    fill = PatternFill(start_color=EXCEL_HEADER_COLOR, end_color=EXCEL_HEADER_COLOR, fill_type="solid")
    for col_idx, header in enumerate(headers, start_col):
        cell = ws.cell(row=row, column=col_idx, value=header)
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")
        cell.fill = fill


def _write_table(ws, df: pd.DataFrame) -> None:
    _write_header(ws, list(df.columns))
    for row_idx, row in enumerate(df.itertuples(index=False), 2):
        for col_idx, value in enumerate(row, 1):
            ws.cell(row=row_idx, column=col_idx, value=value)

    for col in ws.columns:
        max_length = max((len(str(cell.value)) for cell in col if cell.value is not None), default=0)
        ws.column_dimensions[col[0].column_letter].width = min(max_length + 2, 50)


def generate_excel_bytes(exporter: LayoutExporter, project_name: Optional[str] = None) -> bytes:
    """Generate Excel workbook as bytes.

    Creates:
    - Sheet 1: 'Mapping' - treatment legend with factor levels
    - Sheet 2: 'Plate Map' - one grid block per plate, rows by columns
    - Sheet 3: 'Wells' - one row per well
    """
    result = exporter.result
    if result is None:
        raise ValueError("No layout generated yet")

    wb = openpyxl.Workbook()

    ws = wb.active
    ws.title = "Mapping"
    _write_table(ws, exporter.mapping_dataframe())

    # --- Plate Map: blocks separated by one blank row ---
    map_ws = wb.create_sheet(title="Plate Map")
    current_row = 1
    for plate in result.plates:
        title = f"Plate {plate.plate_id} ({plate.rows}x{plate.cols})"
        if project_name:
            title = f"{project_name} - {title}"
        map_ws.cell(row=current_row, column=1, value=title).font = Font(bold=True)
        current_row += 1

        grid = exporter.plate_grid(plate.plate_id)
        _write_header(map_ws, [str(c) for c in grid.columns], row=current_row, start_col=2)
        current_row += 1
        for row_letter, values in grid.iterrows():
            map_ws.cell(row=current_row, column=1, value=row_letter).font = Font(bold=True)
            for col_idx, value in enumerate(values, 2):
                map_ws.cell(row=current_row, column=col_idx, value=value)
            current_row += 1
        current_row += 1

    wells_ws = wb.create_sheet(title="Wells")
    _write_table(wells_ws, exporter.wells_dataframe())

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()
