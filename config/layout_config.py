"""
Layout Configuration Constants
Centralized configuration for the plate layout randomizer
"""

from typing import Dict, Tuple

# ============================================================================
# PLATE FORMATS
# ============================================================================

PLATE_FORMATS: Dict[int, Tuple[int, int]] = {
    6: (2, 3),
    24: (4, 6),
    48: (6, 8),
    96: (8, 12),
    384: (16, 24),
}
"""Supported plate capacities → (rows, columns)"""

DEFAULT_PLATE_SIZE = 96
"""Capacity used when an unrecognized plate size is requested"""

MAX_PLATE_ROWS = 26
"""Row letters are generated as A..Z, so layouts beyond 26 rows are not addressable"""


# ============================================================================
# ALLOCATION PENALTIES
# ============================================================================

SAME_PLATE_PENALTY = 1000
"""Penalty when the candidate plate already holds a replicate of the treatment"""

ADJACENCY_PENALTY = 50
"""Penalty per 4-neighbor well on the same plate holding the same treatment"""

TIE_BREAK_FRACTION = 0.12
"""Share of best-scoring candidates the final well is drawn from"""

MIN_TIE_BREAK_POOL = 1
"""Smallest tie-break pool, whatever the number of candidates"""


# ============================================================================
# RANDOM SOURCE
# ============================================================================

LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2 ** 32
"""Linear congruential generator parameters (Numerical Recipes)"""

SEED_UPPER_BOUND = 1_000_000
"""Fresh project seeds are drawn from [0, SEED_UPPER_BOUND)"""


# ============================================================================
# TREATMENTS
# ============================================================================

TREATMENT_ID_WIDTH = 3
"""Minimum zero-padded width of treatment ids ("001")"""

LABEL_DELIMITER = "|"
"""Separator between level values in a treatment label"""

EMPTY_COMBINATION_LABEL = "CTRL"
"""Label of a factor combination that carries no level values"""

AUTO_LEVEL_TEMPLATE = "{name}_L{index}"
"""Placeholder level names for factors entered without explicit levels"""

DEFAULT_LEVELS_PER_FACTOR = 2
"""Number of placeholder levels for a new factor"""

DEFAULT_REPLICATES = 4
"""Default number of replicates per treatment"""

DEFAULT_PROJECT_PLATE_SIZE = 24
"""Default plate capacity of a new project"""

MAX_TOTAL_INSTANCES = 4 * 384
"""Largest number of replicates (treatments x reps) the web API allocates per request"""


# ============================================================================
# EXPORT CONFIGURATION
# ============================================================================

MAPPING_CSV_FILENAME = "treatment_mapping.csv"
WELLS_CSV_FILENAME = "plate_wells.csv"
EXCEL_FILENAME = "plate_layout.xlsx"
PDF_FILENAME = "plates.pdf"

# Fixed columns of the exported tables; factor names must not collide with them
TREATMENT_COLUMN = "Treatment"
LABEL_COLUMN = "Label"
PLATE_COLUMN = "Plate"
WELL_COLUMN = "Well"
ROW_COLUMN = "Row"
COLUMN_COLUMN = "Column"
RESERVED_FACTOR_NAMES = (
    TREATMENT_COLUMN, LABEL_COLUMN, PLATE_COLUMN, WELL_COLUMN, ROW_COLUMN, COLUMN_COLUMN,
)

EXCEL_HEADER_COLOR = "4CAF50"
"""Fill color for Excel header rows"""


# ============================================================================
# VALIDATION MESSAGES
# ============================================================================

ERROR_MESSAGES = {
    "empty_factor_name": "Factor name cannot be empty",
    "no_levels": "Factor '{name}' has no levels. Please provide at least one level.",
    "duplicate_factor": "Factor '{name}' is defined more than once",
    "invalid_reps": "Replicates must be a positive integer. Got: {value!r}",
    "invalid_capacity": "Plate capacity must be a positive integer. Got: {value!r}",
    "invalid_seed": "Seed must be an integer. Got: {value!r}",
    "no_treatments": "No treatments to allocate. Add at least one factor or control.",
    "duplicate_treatment": "Treatment id '{tid}' appears more than once",
    "too_many_rows": f"Plates with more than {MAX_PLATE_ROWS} rows cannot be labelled with row letters",
    "reserved_factor_name": "Factor name '{name}' is reserved for an export column",
    "too_many_instances": "Layout has {count} replicates, exceeding the {limit} replicate limit",
    "invalid_project_file": "Invalid project file: {reason}",
}
