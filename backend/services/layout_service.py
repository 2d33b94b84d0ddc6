"""Layout service - wraps core enumeration and allocation for the API"""

import logging
from typing import Dict, List, Sequence

from core.design_validator import DesignValidator
from core.layout_designer import LayoutDesigner
from core.plate_assembler import LayoutResult
from core.project import LayoutProject
from core.treatments import Factor, Treatment

logger = logging.getLogger(__name__)


def _check_instance_count(n_treatments: int, reps: int) -> None:
    """Raise ValueError when a request would allocate more replicates than the API serves"""
    is_valid, error = DesignValidator.validate_instance_count(n_treatments * reps)
    if not is_valid:
        raise ValueError(error)


def build_treatments(designer: LayoutDesigner, factors: Sequence[Dict], controls: Sequence[str]) -> List[Dict]:
    """Enumerate treatments from plain factor dicts and return them serialized"""
    definitions = [Factor(name=f["name"], levels=list(f["levels"])) for f in factors]
    treatments = designer.generate_treatments(definitions, list(controls))
    return [t.to_dict() for t in treatments]


def allocate_treatments(designer: LayoutDesigner, treatments: Sequence[Dict], reps: int,
                        plate_capacity: int, seed: int) -> Dict:
    """Allocate serialized treatments and return the serialized layout"""
    parsed = [Treatment(id=t["id"], label=t["label"], levels=dict(t.get("levels") or {})) for t in treatments]
    _check_instance_count(len(parsed), reps)
    result = designer.allocate(parsed, reps, plate_capacity, seed)
    return result.to_dict()


def generate_project_layout(project: LayoutProject, designer: LayoutDesigner) -> LayoutResult:
    """Generate the project's layout with its current settings"""
    logger.info(
        f"[GENERATE] project='{project.name}', factors={project.factor_names()}, "
        f"controls={len(project.get_controls())}, reps={project.replicates}, "
        f"plate_size={project.plate_size}, seed={project.seed}"
    )
    _check_instance_count(project.total_treatments(), project.replicates)
    return project.generate(designer)


def factors_summary(project: LayoutProject) -> Dict:
    """Standard factors response for a project"""
    return {
        "factors": project.get_factors(),
        "controls": project.get_controls(),
        "total_treatments": project.total_treatments(),
    }
