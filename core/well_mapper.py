"""
Well Plate Mapping Service
Handles plate geometry, flat well addressing and well coordinate formatting
"""

import math
from dataclasses import dataclass
from typing import List, Tuple
from config.layout_config import (
    PLATE_FORMATS,
    DEFAULT_PLATE_SIZE,
    MAX_PLATE_ROWS,
)


@dataclass(frozen=True)
class PlateLayout:
    """Row/column geometry of one plate"""
    rows: int
    cols: int

    @property
    def wells_per_plate(self) -> int:
        return self.rows * self.cols


class WellMapper:
    """Service for plate geometry and well position addressing"""

    @staticmethod
    def resolve_layout(plate_size: int) -> PlateLayout:
        """
        Map a plate capacity to its (rows, cols) layout.

        Unrecognized capacities fall back to the 96-well layout.

        Examples:
            >>> WellMapper.resolve_layout(24)
            PlateLayout(rows=4, cols=6)
            >>> WellMapper.resolve_layout(100)
            PlateLayout(rows=8, cols=12)
        """
        rows, cols = PLATE_FORMATS.get(plate_size, PLATE_FORMATS[DEFAULT_PLATE_SIZE])
        return PlateLayout(rows=rows, cols=cols)

    @staticmethod
    def flat_index(plate: int, row: int, col: int, layout: PlateLayout) -> int:
        """Flat address of a well across all plates (plate-major, then row-major)"""
        return plate * layout.wells_per_plate + row * layout.cols + col

    @staticmethod
    def row_letter(row_index: int) -> str:
        """
        Row letter for a 0-based row index (A-Z).

        Raises:
            ValueError: If the row index has no single-letter label
        """
        if row_index < 0 or row_index >= MAX_PLATE_ROWS:
            raise ValueError(
                f"Row index {row_index} cannot be labelled: only {MAX_PLATE_ROWS} rows (A-Z) are supported"
            )
        return chr(ord('A') + row_index)

    @staticmethod
    def well_coordinate(row_index: int, col_index: int) -> str:
        """
        Human-readable coordinate from 0-based row and column indices.

        Examples:
            >>> WellMapper.well_coordinate(0, 0)
            'A1'
            >>> WellMapper.well_coordinate(15, 23)
            'P24'
        """
        return f"{WellMapper.row_letter(row_index)}{col_index + 1}"

    @staticmethod
    def parse_coordinate(well: str) -> Tuple[int, int]:
        """
        Split a coordinate such as "B3" into 0-based (row, col).

        Raises:
            ValueError: If the string is not a letter followed by a column number
        """
        if not well or len(well) < 2 or not well[0].isalpha():
            raise ValueError(f"Invalid well coordinate: {well!r}")
        try:
            col = int(well[1:])
        except ValueError:
            raise ValueError(f"Invalid well coordinate: {well!r}")
        return ord(well[0].upper()) - ord('A'), col - 1

    @staticmethod
    def validate_well_position(well: str, layout: PlateLayout) -> bool:
        """
        Validate that a string is a well coordinate on the given layout.

        Examples:
            >>> WellMapper.validate_well_position("H12", PlateLayout(8, 12))
            True
            >>> WellMapper.validate_well_position("E1", PlateLayout(4, 6))
            False
        """
        try:
            row, col = WellMapper.parse_coordinate(well)
        except ValueError:
            return False
        return 0 <= row < layout.rows and 0 <= col < layout.cols

    @staticmethod
    def neighbors(row: int, col: int, layout: PlateLayout) -> List[Tuple[int, int]]:
        """
        Edge-sharing neighbors of a well within the plate bounds.

        No wraparound and no diagonals; order is up, down, left, right.
        """
        result = []
        if row > 0:
            result.append((row - 1, col))
        if row < layout.rows - 1:
            result.append((row + 1, col))
        if col > 0:
            result.append((row, col - 1))
        if col < layout.cols - 1:
            result.append((row, col + 1))
        return result

    @staticmethod
    def calculate_required_plates(num_samples: int, layout: PlateLayout) -> int:
        """
        Number of plates needed to hold the given number of samples.

        Examples:
            >>> WellMapper.calculate_required_plates(24, PlateLayout(4, 6))
            1
            >>> WellMapper.calculate_required_plates(25, PlateLayout(4, 6))
            2
        """
        if num_samples <= 0:
            return 0
        return math.ceil(num_samples / layout.wells_per_plate)
