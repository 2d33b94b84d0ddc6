"""
Treatment Enumeration
Expands factor definitions into the full factorial list of treatments plus controls
"""
import itertools
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from config.layout_config import (
    TREATMENT_ID_WIDTH,
    LABEL_DELIMITER,
    EMPTY_COMBINATION_LABEL,
)


@dataclass(frozen=True)
class Factor:
    """Experimental variable with an ordered list of levels"""
    name: str
    levels: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Treatment:
    """
    One factor-level combination, or a named control.

    Controls carry an empty ``levels`` mapping and use their given name as label.
    """
    id: str
    label: str
    levels: Dict[str, str] = field(default_factory=dict)

    @property
    def is_control(self) -> bool:
        return not self.levels

    def to_dict(self) -> Dict:
        return {"id": self.id, "label": self.label, "levels": dict(self.levels)}


@dataclass(frozen=True)
class Instance:
    """One physical replicate of a treatment, referenced by treatment id"""
    treatment_id: str
    replicate: int


def format_treatment_id(ordinal: int) -> str:
    """
    Zero-pad a 1-based ordinal to the minimum id width.

    Examples:
        >>> format_treatment_id(7)
        '007'
        >>> format_treatment_id(1234)
        '1234'
    """
    return str(ordinal).zfill(TREATMENT_ID_WIDTH)


def combination_label(values: Sequence[str]) -> str:
    """Join level values into a treatment label"""
    return LABEL_DELIMITER.join(values) or EMPTY_COMBINATION_LABEL


def generate_treatments(factors: Sequence[Factor], control_names: Sequence[str] = ()) -> List[Treatment]:
    """
    Build the ordered treatment list for a full factorial design.

    Combinations are produced in nested order with the first factor varying
    slowest, numbered 1..N; controls follow as N+1..N+C. With no factors only
    controls are returned.

    Args:
        factors: Factor definitions in declaration order
        control_names: Control treatment names, used verbatim as labels

    Returns:
        List of Treatment objects in id order

    Examples:
        >>> ts = generate_treatments([Factor("A", ["a1", "a2"]), Factor("B", ["b1"])], ["CTRL"])
        >>> [(t.id, t.label) for t in ts]
        [('001', 'a1|b1'), ('002', 'a2|b1'), ('003', 'CTRL')]
    """
    treatments: List[Treatment] = []

    if factors:
        names = [f.name for f in factors]
        level_lists = [list(f.levels) for f in factors]
        for combo in itertools.product(*level_lists):
            levels = dict(zip(names, combo))
            treatments.append(Treatment(
                id=format_treatment_id(len(treatments) + 1),
                label=combination_label(list(levels.values())),
                levels=levels,
            ))

    for name in control_names:
        treatments.append(Treatment(
            id=format_treatment_id(len(treatments) + 1),
            label=name,
            levels={},
        ))

    return treatments


def expand_instances(treatments: Sequence[Treatment], reps: int) -> List[Instance]:
    """Repeat every treatment ``reps`` times, grouped contiguously in treatment order"""
    return [
        Instance(treatment_id=t.id, replicate=k)
        for t in treatments
        for k in range(reps)
    ]
