"""Layout routes - factor/control management, generation, plots and export"""

import logging
import traceback
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response

logger = logging.getLogger(__name__)

from backend.dependencies import get_current_session
from backend.schemas.factors import (
    FactorAddRequest, FactorUpdateRequest, ControlsRequest, FactorsResponse,
)
from backend.schemas.layout import (
    TreatmentsRequest, TreatmentsResponse, AllocateRequest, SettingsRequest,
)
from backend.services import layout_service, export_service, plot_service
from config.layout_config import (
    MAPPING_CSV_FILENAME, WELLS_CSV_FILENAME, EXCEL_FILENAME, PDF_FILENAME,
)
from utils.parsing import parse_levels

router = APIRouter()


def _require_layout(session: dict):
    """Latest generated layout of the session, or 400"""
    result = session["project"].last_result
    if result is None:
        raise HTTPException(400, "No layout generated yet. Generate a layout first.")
    return result


def _attachment(filename: str) -> dict:
    date_str = datetime.now().strftime('%Y%m%d')
    return {"Content-Disposition": f'attachment; filename="{date_str}_{filename}"'}


# ========== Stateless engine endpoints ==========

@router.post("/treatments", response_model=TreatmentsResponse)
async def generate_treatments(
    body: TreatmentsRequest,
    session: dict = Depends(get_current_session),
):
    """Enumerate full factorial treatments plus controls"""
    treatments = layout_service.build_treatments(
        session["designer"], [f.model_dump() for f in body.factors], body.controls,
    )
    return {"treatments": treatments}


@router.post("/allocate")
async def allocate(
    body: AllocateRequest,
    session: dict = Depends(get_current_session),
):
    """Allocate the given treatments onto plates"""
    try:
        return layout_service.allocate_treatments(
            session["designer"], [t.model_dump() for t in body.treatments],
            body.reps, body.plate_capacity, body.seed,
        )
    except ValueError as e:
        logger.error(f"[ALLOCATE] ERROR: {e}")
        raise HTTPException(400, str(e))


# ========== Project factors, controls and settings ==========

@router.get("/factors", response_model=FactorsResponse)
async def get_factors(session: dict = Depends(get_current_session)):
    """Get current project factors and controls"""
    return layout_service.factors_summary(session["project"])


@router.post("/factors", response_model=FactorsResponse)
async def add_factor(
    body: FactorAddRequest,
    session: dict = Depends(get_current_session),
):
    """Add a factor; without levels, placeholder levels are created"""
    project = session["project"]
    levels = body.levels or parse_levels(body.levels_text or "")
    try:
        project.add_factor(body.name, levels or None, n_levels=body.n_levels)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return layout_service.factors_summary(project)


@router.put("/factors/{name}", response_model=FactorsResponse)
async def update_factor(
    name: str,
    body: FactorUpdateRequest,
    session: dict = Depends(get_current_session),
):
    """Replace the levels of an existing factor"""
    project = session["project"]
    try:
        if body.levels:
            project.update_factor(name, body.levels)
        else:
            project.set_levels_from_text(name, body.levels_text or "")
    except ValueError as e:
        raise HTTPException(400, str(e))
    return layout_service.factors_summary(project)


@router.delete("/factors/{name}", response_model=FactorsResponse)
async def remove_factor(
    name: str,
    session: dict = Depends(get_current_session),
):
    """Remove a factor"""
    project = session["project"]
    project.remove_factor(name)
    return layout_service.factors_summary(project)


@router.post("/factors/clear", response_model=FactorsResponse)
async def clear_factors(session: dict = Depends(get_current_session)):
    """Clear all factors"""
    session["project"].clear_factors()
    return layout_service.factors_summary(session["project"])


@router.put("/controls", response_model=FactorsResponse)
async def set_controls(
    body: ControlsRequest,
    session: dict = Depends(get_current_session),
):
    """Set control names from a list or comma separated text"""
    project = session["project"]
    if body.names is not None:
        project.set_controls(body.names)
    else:
        project.set_controls_from_text(body.text or "")
    return layout_service.factors_summary(project)


@router.put("/settings")
async def update_settings(
    body: SettingsRequest,
    session: dict = Depends(get_current_session),
):
    """Update replicates, plate size and seed"""
    project = session["project"]
    try:
        project.set_settings(body.replicates, body.plate_size, body.seed)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {"replicates": project.replicates, "plate_size": project.plate_size, "seed": project.seed}


@router.post("/seed")
async def new_seed(session: dict = Depends(get_current_session)):
    """Draw a fresh random seed for the project"""
    return {"seed": session["project"].reseed()}


# ========== Generation ==========

@router.post("/generate")
async def generate_layout(session: dict = Depends(get_current_session)):
    """Generate the project layout with its current settings"""
    project = session["project"]
    try:
        result = layout_service.generate_project_layout(project, session["designer"])
    except ValueError as e:
        logger.error(f"[GENERATE] ERROR: {e}")
        raise HTTPException(400, str(e))
    except Exception as e:
        logger.error(f"[GENERATE] ERROR: {e}\n{traceback.format_exc()}")
        raise HTTPException(400, str(e))

    session["exporter"].set_result(result, project.factor_names())
    session["plotter"].set_result(result)
    logger.info(f"[GENERATE] Success: {result.num_plates} plate(s)")
    return {
        **result.to_dict(),
        "seed": result.seed,
        "factor_names": project.factor_names(),
    }


@router.get("/result")
async def get_result(session: dict = Depends(get_current_session)):
    """Latest generated layout"""
    return _require_layout(session).to_dict()


@router.get("/plot/{plate_id}")
async def get_plate_plot(
    plate_id: int,
    session: dict = Depends(get_current_session),
):
    """Plate rendering as base64 PNG"""
    _require_layout(session)
    try:
        image = plot_service.generate_plate_plot(session["plotter"], plate_id)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {"image": image, "plate_id": plate_id}


# ========== Export ==========

@router.get("/export/csv")
async def export_mapping_csv(session: dict = Depends(get_current_session)):
    """Export treatment mapping (legend) as CSV"""
    _require_layout(session)
    csv_bytes = export_service.generate_csv_bytes(session["exporter"].mapping_dataframe())
    return Response(content=csv_bytes, media_type="text/csv", headers=_attachment(MAPPING_CSV_FILENAME))


@router.get("/export/wells-csv")
async def export_wells_csv(session: dict = Depends(get_current_session)):
    """Export the per-well table as CSV"""
    _require_layout(session)
    csv_bytes = export_service.generate_csv_bytes(session["exporter"].wells_dataframe())
    return Response(content=csv_bytes, media_type="text/csv", headers=_attachment(WELLS_CSV_FILENAME))


@router.get("/export/excel")
async def export_excel(session: dict = Depends(get_current_session)):
    """Export mapping, plate maps and wells as an Excel workbook"""
    _require_layout(session)
    try:
        excel_bytes = export_service.generate_excel_bytes(session["exporter"], session["project"].name)
    except Exception as e:
        logger.error(f"[EXPORT] Excel ERROR: {e}\n{traceback.format_exc()}")
        raise HTTPException(400, str(e))
    return Response(
        content=excel_bytes,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers=_attachment(EXCEL_FILENAME),
    )


@router.get("/export/pdf")
async def export_pdf(session: dict = Depends(get_current_session)):
    """Export all plates as a multi-page PDF"""
    _require_layout(session)
    try:
        pdf_bytes = plot_service.generate_pdf_bytes(session["plotter"])
    except Exception as e:
        logger.error(f"[EXPORT] PDF ERROR: {e}\n{traceback.format_exc()}")
        raise HTTPException(400, str(e))
    return Response(content=pdf_bytes, media_type="application/pdf", headers=_attachment(PDF_FILENAME))
