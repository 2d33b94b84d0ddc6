"""
Plate Layout Generation
Entry points that tie treatment enumeration, allocation and plate assembly together
"""
import logging
from typing import List, Sequence

from core.allocator import WellGridAllocator
from core.design_validator import DesignValidator
from core.plate_assembler import PlateAssembler, LayoutResult
from core.treatments import Factor, Treatment, generate_treatments as _enumerate_treatments
from core.well_mapper import WellMapper
from config.layout_config import LCG_MODULUS

logger = logging.getLogger(__name__)


class LayoutDesigner:
    """Generates randomized plate layouts for factorial experiments"""

    def __init__(self):
        """Initialize designer with service dependencies"""
        self.well_mapper = WellMapper()
        self.assembler = PlateAssembler()

    def _validate_inputs(self, treatments: Sequence[Treatment], reps: int,
                         plate_capacity: int, seed: int) -> None:
        """
        Validate allocation inputs before any work is done.

        Raises:
            ValueError: If any input is invalid, listing every problem found
        """
        errors = DesignValidator.validate_allocation_inputs(treatments, reps, plate_capacity, seed)
        if errors:
            raise ValueError("\n".join(errors))

    def generate_treatments(self, factors: Sequence[Factor], control_names: Sequence[str] = ()) -> List[Treatment]:
        """Full factorial treatments followed by controls"""
        treatments = _enumerate_treatments(factors, control_names)
        logger.info(
            f"[TREATMENTS] factors={[f.name for f in factors]}, controls={len(control_names)}, "
            f"treatments={len(treatments)}"
        )
        return treatments

    def allocate(self, treatments: Sequence[Treatment], reps: int, plate_capacity: int,
                 seed: int) -> LayoutResult:
        """
        Randomize treatment replicates onto plates.

        Args:
            treatments: Treatments in id order
            reps: Replicates per treatment (>= 1)
            plate_capacity: Wells per plate (6, 24, 48, 96 or 384; others use 96)
            seed: Integer seed, reduced modulo 2^32

        Returns:
            LayoutResult with the number of plates, the plates and the mapping table

        Raises:
            ValueError: If inputs are malformed
        """
        self._validate_inputs(treatments, reps, plate_capacity, seed)

        layout = self.well_mapper.resolve_layout(plate_capacity)
        is_valid, msg = DesignValidator.validate_row_count(layout.rows)
        if not is_valid:
            raise ValueError(msg)

        seed32 = seed % LCG_MODULUS
        logger.info(
            f"[ALLOCATE] treatments={len(treatments)}, reps={reps}, "
            f"capacity={plate_capacity} ({layout.rows}x{layout.cols}), seed={seed32}"
        )

        allocator = WellGridAllocator(treatments, reps, layout, seed32)
        ctx = allocator.allocate()
        return self.assembler.assemble(ctx, treatments, layout, seed=seed32)


def generate_treatments(factors: Sequence[Factor], control_names: Sequence[str] = ()) -> List[Treatment]:
    """Enumerate treatments (see LayoutDesigner.generate_treatments)"""
    return LayoutDesigner().generate_treatments(factors, control_names)


def allocate(treatments: Sequence[Treatment], reps: int, plate_capacity: int, seed: int) -> LayoutResult:
    """Allocate treatments onto plates (see LayoutDesigner.allocate)"""
    return LayoutDesigner().allocate(treatments, reps, plate_capacity, seed)
