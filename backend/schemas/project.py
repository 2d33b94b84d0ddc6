"""Project-related Pydantic schemas"""

from pydantic import BaseModel
from typing import Optional


class ProjectCreateRequest(BaseModel):
    name: str = "Untitled Project"


class ProjectRenameRequest(BaseModel):
    name: str = "Untitled Project"


class ProjectInfoResponse(BaseModel):
    name: str
    factors_count: int
    controls_count: int
    replicates: int
    plate_size: int
    seed: int
    has_layout: bool
    num_plates: Optional[int] = None
