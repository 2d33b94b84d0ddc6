"""
Shared project data model
Holds the factors, controls and run settings of one plate layout experiment
"""
import json
import random
from datetime import datetime
from typing import Dict, List, Optional

from config.layout_config import (
    DEFAULT_LEVELS_PER_FACTOR,
    DEFAULT_REPLICATES,
    DEFAULT_PROJECT_PLATE_SIZE,
    SEED_UPPER_BOUND,
    ERROR_MESSAGES,
)
from core.design_validator import DesignValidator
from core.layout_designer import LayoutDesigner
from core.plate_assembler import LayoutResult
from core.treatments import Factor, Treatment
from utils.parsing import parse_levels, parse_controls, default_levels


class LayoutProject:
    """
    Container for all layout project data
    Everything a generation run needs: factors, controls, replicates, plate size and seed
    """

    def __init__(self):
        self.name = "Untitled Project"
        self.created_date = datetime.now()
        self.modified_date = datetime.now()

        self._factors: Dict[str, List[str]] = {}  # factor_name → levels, in declaration order
        self._controls: List[str] = []
        self.replicates = DEFAULT_REPLICATES
        self.plate_size = DEFAULT_PROJECT_PLATE_SIZE
        self.seed = self.new_seed()

        self.treatments: List[Treatment] = []
        self.last_result: Optional[LayoutResult] = None

    # ========== Factor Management ==========

    def add_factor(self, name: str, levels: Optional[List[str]] = None,
                   n_levels: int = DEFAULT_LEVELS_PER_FACTOR):
        """
        Add a new factor.

        Without explicit levels, ``n_levels`` placeholder levels named
        "{name}_L1", "{name}_L2", ... are created.
        """
        name = name.strip()
        if name in self._factors:
            raise ValueError(ERROR_MESSAGES["duplicate_factor"].format(name=name))
        levels = list(levels) if levels else default_levels(name, n_levels)
        is_valid, msg = DesignValidator.validate_factor(name, levels)
        if not is_valid:
            raise ValueError(msg)
        self._factors[name] = levels
        self._invalidate_layout()

    def update_factor(self, name: str, levels: List[str]):
        """Replace the levels of an existing factor"""
        if name not in self._factors:
            raise ValueError(f"Factor '{name}' does not exist")
        is_valid, msg = DesignValidator.validate_factor(name, levels)
        if not is_valid:
            raise ValueError(msg)
        self._factors[name] = list(levels)
        self._invalidate_layout()

    def set_levels_from_text(self, name: str, text: str):
        """Set levels from comma or newline separated text; blank text keeps current levels"""
        levels = parse_levels(text)
        if levels:
            self.update_factor(name, levels)

    def remove_factor(self, name: str):
        """Remove a factor"""
        if name in self._factors:
            del self._factors[name]
            self._invalidate_layout()

    def clear_factors(self):
        """Clear all factors"""
        self._factors.clear()
        self._invalidate_layout()

    def _invalidate_layout(self):
        """Drop the generated layout; it no longer matches the inputs"""
        self.last_result = None
        self.modified_date = datetime.now()

    def get_factors(self) -> Dict[str, List[str]]:
        """Get all factors"""
        return {k: list(v) for k, v in self._factors.items()}

    def get_factor_definitions(self) -> List[Factor]:
        return [Factor(name=k, levels=list(v)) for k, v in self._factors.items()]

    def factor_names(self) -> List[str]:
        return list(self._factors.keys())

    # ========== Controls and Settings ==========

    def set_controls(self, names: List[str]):
        self._controls = [n for n in names if n]
        self._invalidate_layout()

    def set_controls_from_text(self, text: str):
        """Set control names from comma separated text"""
        self.set_controls(parse_controls(text))

    def get_controls(self) -> List[str]:
        return list(self._controls)

    def set_settings(self, replicates: Optional[int] = None, plate_size: Optional[int] = None,
                     seed: Optional[int] = None):
        """Update run settings; None leaves a setting unchanged"""
        if replicates is not None:
            is_valid, msg = DesignValidator.validate_replicates(replicates)
            if not is_valid:
                raise ValueError(msg)
            self.replicates = replicates
        if plate_size is not None:
            is_valid, msg = DesignValidator.validate_plate_capacity(plate_size)
            if not is_valid:
                raise ValueError(msg)
            self.plate_size = plate_size
        if seed is not None:
            is_valid, msg = DesignValidator.validate_seed(seed)
            if not is_valid:
                raise ValueError(msg)
            self.seed = seed
        self.modified_date = datetime.now()

    @staticmethod
    def new_seed() -> int:
        """Draw a fresh seed in [0, SEED_UPPER_BOUND)"""
        return random.randrange(SEED_UPPER_BOUND)

    def reseed(self) -> int:
        self.seed = self.new_seed()
        return self.seed

    def total_treatments(self) -> int:
        """Factor combinations plus controls"""
        combinations = 1 if self._factors else 0
        for levels in self._factors.values():
            combinations *= len(levels)
        return combinations + len(self._controls)

    # ========== Generation ==========

    def generate(self, designer: Optional[LayoutDesigner] = None) -> LayoutResult:
        """Enumerate treatments and allocate them with the current settings"""
        designer = designer or LayoutDesigner()
        self.treatments = designer.generate_treatments(self.get_factor_definitions(), self._controls)
        self.last_result = designer.allocate(self.treatments, self.replicates, self.plate_size, self.seed)
        return self.last_result

    # ========== Project Persistence ==========

    def to_dict(self) -> Dict:
        return {
            'name': self.name,
            'created_date': self.created_date.isoformat(),
            'modified_date': self.modified_date.isoformat(),
            'factors': self._factors,
            'controls': self._controls,
            'replicates': self.replicates,
            'plate_size': self.plate_size,
            'seed': self.seed,
        }

    def save(self, filepath: str):
        """Save project inputs to JSON file; the layout is reproduced from the seed"""
        self.modified_date = datetime.now()
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict) -> 'LayoutProject':
        """
        Rebuild a project from saved inputs.

        Factors, controls and settings go through the same checks as
        interactive edits; a factor saved without levels gets placeholders.

        Raises:
            ValueError: If the data is not a project object or an input is invalid
        """
        if not isinstance(data, dict):
            raise ValueError(ERROR_MESSAGES["invalid_project_file"].format(reason="expected a JSON object"))
        factors = data.get('factors') or {}
        if not isinstance(factors, dict):
            raise ValueError(ERROR_MESSAGES["invalid_project_file"].format(
                reason="'factors' must map factor names to level lists"))
        controls = data.get('controls') or []
        if not isinstance(controls, list):
            raise ValueError(ERROR_MESSAGES["invalid_project_file"].format(
                reason="'controls' must be a list of names"))

        project = cls()
        project.name = str(data.get('name') or 'Untitled Project')
        for name, levels in factors.items():
            if levels is not None and not isinstance(levels, list):
                raise ValueError(ERROR_MESSAGES["invalid_project_file"].format(
                    reason=f"levels of factor '{name}' must be a list"))
            project.add_factor(name, [str(level) for level in levels or []])
        project.set_controls([str(c) for c in controls])
        project.set_settings(
            replicates=data.get('replicates'),
            plate_size=data.get('plate_size'),
            seed=data.get('seed'),
        )

        project.created_date = datetime.fromisoformat(data['created_date']) if data.get('created_date') else datetime.now()
        project.modified_date = datetime.fromisoformat(data['modified_date']) if data.get('modified_date') else datetime.now()
        return project

    @classmethod
    def load(cls, filepath: str) -> 'LayoutProject':
        """Load project from JSON file"""
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_dict(data)

    def __repr__(self):
        return (f"LayoutProject(name='{self.name}', factors={len(self._factors)}, "
                f"controls={len(self._controls)}, has_layout={self.last_result is not None})")
