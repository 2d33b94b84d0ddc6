"""Layout generation Pydantic schemas"""

from pydantic import BaseModel
from typing import Dict, List, Optional


class FactorModel(BaseModel):
    name: str
    levels: List[str]


class TreatmentModel(BaseModel):
    id: str
    label: str
    levels: Dict[str, str] = {}


class TreatmentsRequest(BaseModel):
    factors: List[FactorModel] = []
    controls: List[str] = []


class TreatmentsResponse(BaseModel):
    treatments: List[TreatmentModel]


class AllocateRequest(BaseModel):
    treatments: List[TreatmentModel]
    reps: int = 1
    plate_capacity: int = 96
    seed: int = 0


class SettingsRequest(BaseModel):
    replicates: Optional[int] = None
    plate_size: Optional[int] = None
    seed: Optional[int] = None
