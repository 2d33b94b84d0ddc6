"""
Well Grid Allocator
Scored greedy placement of treatment replicates into plate wells
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Set, Tuple

import numpy as np

from config.layout_config import (
    SAME_PLATE_PENALTY,
    ADJACENCY_PENALTY,
    TIE_BREAK_FRACTION,
    MIN_TIE_BREAK_POOL,
)
from core.random_source import SeededRandom
from core.treatments import Instance, Treatment, expand_instances
from core.well_mapper import PlateLayout, WellMapper

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Position:
    """One well slot; ``idx`` is its flat address across all plates"""
    plate: int
    row: int
    col: int
    idx: int


def build_positions(num_plates: int, layout: PlateLayout) -> List[Position]:
    """All well positions, plate-major, then row-major, then column"""
    return [
        Position(plate=p, row=r, col=c, idx=WellMapper.flat_index(p, r, c, layout))
        for p in range(num_plates)
        for r in range(layout.rows)
        for c in range(layout.cols)
    ]


class AllocationContext:
    """
    Mutable working state of a single allocation run.

    Holds the sparse assignment, the set of treatment ids present on each
    plate and the per-plate count of every (factor, level) pair. Owned by one
    allocate() call only.
    """

    def __init__(self, num_plates: int, treatments: Sequence[Treatment]):
        self.num_plates = num_plates
        self.assignment: Dict[int, Instance] = {}
        self.plate_treatments: List[Set[str]] = [set() for _ in range(num_plates)]
        self.skipped: List[Instance] = []

        self.level_index: Dict[Tuple[str, str], int] = {}
        for t in treatments:
            for pair in t.levels.items():
                if pair not in self.level_index:
                    self.level_index[pair] = len(self.level_index)
        self.level_counts = np.zeros((num_plates, len(self.level_index)), dtype=np.int64)

    def is_filled(self, idx: int) -> bool:
        return idx in self.assignment

    def treatment_at(self, idx: int):
        instance = self.assignment.get(idx)
        return instance.treatment_id if instance is not None else None

    def balance_scores(self, treatment: Treatment) -> List[float]:
        """
        Balance score of placing one more replicate of ``treatment`` on each plate.

        For every (factor, level) pair of the treatment the per-plate counts are
        incremented on the candidate plate and the sum of squared deviations
        from their mean is added. Controls score 0 everywhere.
        """
        scores = np.zeros(self.num_plates, dtype=float)
        for pair in treatment.levels.items():
            column = self.level_counts[:, self.level_index[pair]]
            for plate in range(self.num_plates):
                counts = column.astype(float)
                counts[plate] += 1
                scores[plate] += float(((counts - counts.mean()) ** 2).sum())
        return scores.tolist()

    def commit(self, position: Position, instance: Instance, treatment: Treatment) -> None:
        self.assignment[position.idx] = instance
        self.plate_treatments[position.plate].add(instance.treatment_id)
        for pair in treatment.levels.items():
            self.level_counts[position.plate, self.level_index[pair]] += 1


class WellGridAllocator:
    """
    Places ``reps`` replicates of every treatment across as many plates as needed.

    Each replicate goes to the unfilled well with the lowest composite penalty:
    same-plate repeat, 4-neighbor adjacency to the same treatment, and the
    spread of each factor level across plates. The final pick is drawn at
    random from the best-scoring ``TIE_BREAK_FRACTION`` of candidates, so the
    result depends only on the inputs and the seed.
    """

    def __init__(self, treatments: Sequence[Treatment], reps: int, layout: PlateLayout, seed: int):
        self.treatments = list(treatments)
        self.reps = reps
        self.layout = layout
        self.seed = seed
        self.total_instances = len(self.treatments) * reps
        self.num_plates = WellMapper.calculate_required_plates(self.total_instances, layout)
        self.positions = build_positions(self.num_plates, layout)
        self._by_id = {t.id: t for t in self.treatments}
        self._neighbors = [
            [WellMapper.flat_index(p.plate, r, c, layout) for r, c in WellMapper.neighbors(p.row, p.col, layout)]
            for p in self.positions
        ]

    def _score(self, idx: int, treatment_id: str, balance: List[float], ctx: AllocationContext) -> float:
        position = self.positions[idx]
        same = SAME_PLATE_PENALTY if treatment_id in ctx.plate_treatments[position.plate] else 0
        adjacent = sum(1 for n in self._neighbors[idx] if ctx.treatment_at(n) == treatment_id)
        return same + ADJACENCY_PENALTY * adjacent + balance[position.plate]

    def _choose_position(self, instance: Instance, order: List[int], ctx: AllocationContext, rng: SeededRandom):
        candidates = [idx for idx in order if not ctx.is_filled(idx)]
        if not candidates:
            return None

        treatment = self._by_id[instance.treatment_id]
        balance = ctx.balance_scores(treatment)
        scored = sorted(
            ((self._score(idx, treatment.id, balance, ctx), idx) for idx in candidates),
            key=lambda item: item[0],
        )

        pool_size = max(MIN_TIE_BREAK_POOL, int(len(scored) * TIE_BREAK_FRACTION))
        _, chosen = scored[rng.randint_below(pool_size)]
        return self.positions[chosen]

    def allocate(self) -> AllocationContext:
        """
        Run the placement and return the filled allocation context.

        Instances that find no free well are recorded in ``ctx.skipped``
        instead of failing the run.
        """
        rng = SeededRandom(self.seed)
        ctx = AllocationContext(self.num_plates, self.treatments)

        instances = expand_instances(self.treatments, self.reps)
        rng.shuffle(instances)

        order = list(range(len(self.positions)))
        rng.shuffle(order)

        for instance in instances:
            position = self._choose_position(instance, order, ctx, rng)
            if position is None:
                logger.warning(
                    f"[ALLOCATE] No free well left for treatment {instance.treatment_id} "
                    f"replicate {instance.replicate + 1}; skipping"
                )
                ctx.skipped.append(instance)
                continue
            ctx.commit(position, instance, self._by_id[instance.treatment_id])

        logger.info(
            f"[ALLOCATE] plates={self.num_plates}, wells={len(self.positions)}, "
            f"instances={self.total_instances}, unfilled={len(self.positions) - len(ctx.assignment)}"
        )
        return ctx
