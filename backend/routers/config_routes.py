"""Configuration routes - serves static config data"""

from fastapi import APIRouter

from config.layout_config import (
    PLATE_FORMATS, DEFAULT_PLATE_SIZE, MAX_PLATE_ROWS,
    SAME_PLATE_PENALTY, ADJACENCY_PENALTY, TIE_BREAK_FRACTION,
    DEFAULT_REPLICATES, DEFAULT_PROJECT_PLATE_SIZE, DEFAULT_LEVELS_PER_FACTOR,
    SEED_UPPER_BOUND, LABEL_DELIMITER, MAX_TOTAL_INSTANCES,
)

router = APIRouter()


@router.get("/plate-formats")
async def get_plate_formats():
    """Supported plate capacities with their row/column layout"""
    return {
        "plate_formats": [
            {"capacity": capacity, "rows": rows, "cols": cols, "display_name": f"{capacity} ({rows}x{cols})"}
            for capacity, (rows, cols) in sorted(PLATE_FORMATS.items())
        ],
        "default_plate_size": DEFAULT_PLATE_SIZE,
        "max_rows": MAX_PLATE_ROWS,
    }


@router.get("/constants")
async def get_constants():
    """Allocation weights and project defaults"""
    return {
        "same_plate_penalty": SAME_PLATE_PENALTY,
        "adjacency_penalty": ADJACENCY_PENALTY,
        "tie_break_fraction": TIE_BREAK_FRACTION,
        "default_replicates": DEFAULT_REPLICATES,
        "default_plate_size": DEFAULT_PROJECT_PLATE_SIZE,
        "default_levels_per_factor": DEFAULT_LEVELS_PER_FACTOR,
        "seed_upper_bound": SEED_UPPER_BOUND,
        "label_delimiter": LABEL_DELIMITER,
        "max_total_instances": MAX_TOTAL_INSTANCES,
    }
