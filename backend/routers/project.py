"""Project management routes"""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, UploadFile, File

from backend.config import SESSION_HEADER
from backend.sessions import create_session
from backend.dependencies import get_current_session
from backend.schemas.project import ProjectCreateRequest, ProjectRenameRequest, ProjectInfoResponse
from config.layout_config import ERROR_MESSAGES
from core.project import LayoutProject

logger = logging.getLogger(__name__)

router = APIRouter()


def _project_info(project: LayoutProject) -> ProjectInfoResponse:
    return ProjectInfoResponse(
        name=project.name,
        factors_count=len(project.get_factors()),
        controls_count=len(project.get_controls()),
        replicates=project.replicates,
        plate_size=project.plate_size,
        seed=project.seed,
        has_layout=project.last_result is not None,
        num_plates=project.last_result.num_plates if project.last_result is not None else None,
    )


@router.post("/new")
async def new_project(request_body: ProjectCreateRequest, request: Request, response: Response):
    """Create a new project and session"""
    session_id = create_session(request_body.name)
    request.state.new_session_id = session_id
    response.headers[SESSION_HEADER] = session_id
    return {"session_id": session_id, "name": request_body.name}


@router.get("/info")
async def get_project_info(session: dict = Depends(get_current_session)):
    """Get current project information"""
    return _project_info(session["project"])


@router.put("/name")
async def update_project_name(
    body: ProjectRenameRequest,
    session: dict = Depends(get_current_session),
):
    """Update project name"""
    session["project"].name = body.name
    return {"success": True}


@router.get("/save")
async def save_project(session: dict = Depends(get_current_session)):
    """Download project inputs (factors, controls, settings, seed) as JSON"""
    project = session["project"]
    content = json.dumps(project.to_dict(), indent=2, ensure_ascii=False).encode("utf-8")
    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{project.name}.json"'},
    )


@router.post("/load")
async def load_project(
    file: UploadFile = File(...),
    session: dict = Depends(get_current_session),
):
    """Upload and load a project JSON file"""
    content = await file.read()
    try:
        data = json.loads(content)
    except ValueError as e:
        raise HTTPException(400, ERROR_MESSAGES["invalid_project_file"].format(reason=e))
    try:
        project = LayoutProject.from_dict(data)
    except (ValueError, TypeError) as e:
        logger.error(f"[PROJECT] Load ERROR: {e}")
        raise HTTPException(400, str(e))
    session["project"] = project
    return _project_info(project)
