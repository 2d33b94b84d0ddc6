"""Plot service - converts matplotlib Figures to base64 images"""

import io
import base64
import logging
import traceback

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for server
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from core.plotter import PlatePlotter

logger = logging.getLogger(__name__)


def figure_to_base64(fig: Figure, fmt: str = "png", dpi: int = 150) -> str:
    """Convert a matplotlib Figure to a base64-encoded data URI"""
    buf = io.BytesIO()
    fig.savefig(buf, format=fmt, dpi=dpi, bbox_inches="tight")
    buf.seek(0)
    encoded = base64.b64encode(buf.read()).decode("utf-8")
    plt.close(fig)
    return f"data:image/{fmt};base64,{encoded}"


def generate_plate_plot(plotter: PlatePlotter, plate_id: int) -> str:
    """Render one plate and return it as base64 PNG"""
    if plotter.result is None:
        raise ValueError("No layout generated yet")
    plate = next((p for p in plotter.result.plates if p.plate_id == plate_id), None)
    if plate is None:
        raise ValueError(f"Plate {plate_id} does not exist (layout has {plotter.result.num_plates} plates)")
    logger.info(f"[PLOT.SVC] plate={plate_id}, treatments={len(plotter.color_map)}")
    try:
        fig = plotter.plot_plate(plate)
        return figure_to_base64(fig)
    except Exception as e:
        logger.error(f"[PLOT.SVC] plate {plate_id} ERROR: {e}\n{traceback.format_exc()}")
        raise


def generate_pdf_bytes(plotter: PlatePlotter) -> bytes:
    """All plates as a multi-page PDF"""
    logger.info("[PLOT.SVC] pdf export")
    return plotter.export_pdf_bytes()
