"""
Layout Export Functions
Tabular views of a generated layout for CSV and Excel output
"""
import pandas as pd
from typing import List, Optional
from config.layout_config import (
    TREATMENT_COLUMN, LABEL_COLUMN, PLATE_COLUMN, WELL_COLUMN, ROW_COLUMN, COLUMN_COLUMN,
    RESERVED_FACTOR_NAMES, ERROR_MESSAGES,
)
from core.plate_assembler import LayoutResult


class LayoutExporter:
    """Exports a generated plate layout to tables and files"""

    def __init__(self) -> None:
        """Initialize exporter with no layout"""
        self.result: Optional[LayoutResult] = None
        self.factor_names: List[str] = []

    def set_result(self, result: LayoutResult, factor_names: List[str]) -> None:
        """
        Set layout to export

        Args:
            result: Output of an allocation run
            factor_names: Factor names in declaration order, one column each

        Raises:
            ValueError: If a factor name collides with a fixed export column
        """
        for name in factor_names:
            if name in RESERVED_FACTOR_NAMES:
                raise ValueError(ERROR_MESSAGES["reserved_factor_name"].format(name=name))
        self.result = result
        self.factor_names = list(factor_names)

    def _require_result(self) -> LayoutResult:
        if self.result is None:
            raise ValueError("No layout generated yet")
        return self.result

    def mapping_dataframe(self) -> pd.DataFrame:
        """
        Treatment legend: one row per treatment

        Columns: Treatment, Label, then one column per factor. Controls have
        blank factor cells.
        """
        result = self._require_result()
        rows = []
        for entry in result.mapping:
            row = {TREATMENT_COLUMN: entry.id, LABEL_COLUMN: entry.label}
            for name in self.factor_names:
                row[name] = entry.levels.get(name, "")
            rows.append(row)
        return pd.DataFrame(rows, columns=[TREATMENT_COLUMN, LABEL_COLUMN] + self.factor_names)

    def wells_dataframe(self) -> pd.DataFrame:
        """
        One row per well across all plates, empty wells included

        Columns: Plate, Well, Row, Column, Treatment, Label, then factor columns.
        """
        result = self._require_result()
        columns = [PLATE_COLUMN, WELL_COLUMN, ROW_COLUMN, COLUMN_COLUMN, TREATMENT_COLUMN, LABEL_COLUMN] + self.factor_names
        rows = []
        for plate in result.plates:
            for well in plate.wells:
                treatment = well.assigned
                row = {
                    PLATE_COLUMN: plate.plate_id,
                    WELL_COLUMN: well.coord,
                    ROW_COLUMN: well.coord[0],
                    COLUMN_COLUMN: well.col + 1,
                    TREATMENT_COLUMN: treatment.id if treatment else "",
                    LABEL_COLUMN: treatment.label if treatment else "",
                }
                for name in self.factor_names:
                    row[name] = treatment.levels.get(name, "") if treatment else ""
                rows.append(row)
        return pd.DataFrame(rows, columns=columns)

    def plate_grid(self, plate_id: int) -> pd.DataFrame:
        """Treatment ids of one plate as a row-letter by column-number grid"""
        result = self._require_result()
        plate = next((p for p in result.plates if p.plate_id == plate_id), None)
        if plate is None:
            raise ValueError(f"Plate {plate_id} does not exist (layout has {result.num_plates} plates)")
        grid = pd.DataFrame(
            [[plate.well_at(r, c).assigned.id if not plate.well_at(r, c).is_empty else ""
              for c in range(plate.cols)]
             for r in range(plate.rows)],
            index=[plate.well_at(r, 0).coord[0] for r in range(plate.rows)],
            columns=list(range(1, plate.cols + 1)),
        )
        return grid

    def export_mapping_csv(self, filepath: str) -> None:
        """Write the treatment legend to CSV"""
        self.mapping_dataframe().to_csv(filepath, index=False)

    def export_wells_csv(self, filepath: str) -> None:
        """Write the per-well table to CSV"""
        self.wells_dataframe().to_csv(filepath, index=False)

    def export_excel(self, filepath: str) -> None:
        """
        Export the layout to a multi-sheet Excel file

        Creates sheets for:
        - Mapping (treatment legend)
        - Wells (one row per well)
        - Plate N (grid view of each plate)

        Args:
            filepath: Path where Excel file should be saved
        """
        result = self._require_result()
        with pd.ExcelWriter(filepath, engine='openpyxl') as writer:
            self.mapping_dataframe().to_excel(writer, sheet_name='Mapping', index=False)
            self.wells_dataframe().to_excel(writer, sheet_name='Wells', index=False)
            for plate in result.plates:
                self.plate_grid(plate.plate_id).to_excel(writer, sheet_name=f'Plate {plate.plate_id}')
