"""
Plate Assembly
Turns a flat well assignment into per-plate well grids and the treatment mapping table
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from core.allocator import AllocationContext
from core.treatments import Treatment
from core.well_mapper import PlateLayout, WellMapper


@dataclass(frozen=True)
class Well:
    coord: str
    row: int
    col: int
    assigned: Optional[Treatment] = None

    @property
    def is_empty(self) -> bool:
        return self.assigned is None

    def to_dict(self) -> Dict:
        return {
            "coord": self.coord,
            "row": self.row,
            "col": self.col,
            "assigned": self.assigned.to_dict() if self.assigned is not None else None,
        }


@dataclass(frozen=True)
class Plate:
    plate_id: int
    rows: int
    cols: int
    wells: List[Well] = field(default_factory=list)

    def filled_wells(self) -> List[Well]:
        return [w for w in self.wells if not w.is_empty]

    def well_at(self, row: int, col: int) -> Well:
        return self.wells[row * self.cols + col]

    def to_dict(self) -> Dict:
        return {
            "plateId": self.plate_id,
            "rows": self.rows,
            "cols": self.cols,
            "wells": [w.to_dict() for w in self.wells],
        }


@dataclass(frozen=True)
class MappingEntry:
    """Legend row: one per distinct treatment"""
    id: str
    label: str
    levels: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {"id": self.id, "label": self.label, "levels": dict(self.levels)}


@dataclass(frozen=True)
class LayoutResult:
    num_plates: int
    plates: List[Plate]
    mapping: List[MappingEntry]
    seed: int = 0

    def to_dict(self) -> Dict:
        return {
            "numPlates": self.num_plates,
            "plates": [p.to_dict() for p in self.plates],
            "mapping": [m.to_dict() for m in self.mapping],
        }


class PlateAssembler:
    """Builds Plate/Well views and the mapping table from an allocation"""

    @staticmethod
    def assemble_plates(ctx: AllocationContext, treatments: Sequence[Treatment], layout: PlateLayout) -> List[Plate]:
        by_id = {t.id: t for t in treatments}
        plates = []
        for p in range(ctx.num_plates):
            wells = []
            for r in range(layout.rows):
                for c in range(layout.cols):
                    instance = ctx.assignment.get(WellMapper.flat_index(p, r, c, layout))
                    wells.append(Well(
                        coord=WellMapper.well_coordinate(r, c),
                        row=r,
                        col=c,
                        assigned=by_id[instance.treatment_id] if instance is not None else None,
                    ))
            plates.append(Plate(plate_id=p + 1, rows=layout.rows, cols=layout.cols, wells=wells))
        return plates

    @staticmethod
    def build_mapping(treatments: Sequence[Treatment]) -> List[MappingEntry]:
        """Mapping table in treatment id order"""
        return [MappingEntry(id=t.id, label=t.label, levels=dict(t.levels)) for t in treatments]

    @staticmethod
    def assemble(ctx: AllocationContext, treatments: Sequence[Treatment], layout: PlateLayout,
                 seed: int = 0) -> LayoutResult:
        return LayoutResult(
            num_plates=ctx.num_plates,
            plates=PlateAssembler.assemble_plates(ctx, treatments, layout),
            mapping=PlateAssembler.build_mapping(treatments),
            seed=seed,
        )
