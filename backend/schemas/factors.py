"""Factor and control Pydantic schemas"""

from pydantic import BaseModel
from typing import Dict, List, Optional


class FactorAddRequest(BaseModel):
    name: str
    levels: Optional[List[str]] = None
    levels_text: Optional[str] = None
    n_levels: int = 2


class FactorUpdateRequest(BaseModel):
    levels: Optional[List[str]] = None
    levels_text: Optional[str] = None


class ControlsRequest(BaseModel):
    names: Optional[List[str]] = None
    text: Optional[str] = None


class FactorsResponse(BaseModel):
    factors: Dict[str, List[str]]
    controls: List[str]
    total_treatments: int
