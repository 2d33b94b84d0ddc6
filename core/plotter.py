"""
Plate Plotting Functions
Colored well-grid figures and multi-page PDF export of a generated layout
"""
import io
import colorsys
from typing import Dict, List, Optional

import matplotlib.pyplot as plt
from matplotlib.colors import to_hex
from matplotlib.figure import Figure
from matplotlib.patches import Circle, Patch
from matplotlib.backends.backend_pdf import PdfPages

from config.layout_config import LABEL_DELIMITER
from core.constants import (
    PALETTE_SATURATION, PALETTE_LIGHTNESS,
    PLOT_DPI, PLOT_PAD, WELL_SIZE_INCHES, WELL_RADIUS,
    LEGEND_WIDTH_INCHES, EDGE_LINE_WIDTH,
    FONT_SIZE_TITLE, FONT_SIZE_AXIS, FONT_SIZE_WELL, FONT_SIZE_LEGEND,
)
from core.plate_assembler import LayoutResult, Plate
from core.treatments import Treatment


class PlatePlotter:
    """Renders plates as colored well grids with a treatment legend"""

    COLORS = {
        'empty': '#FFFFFF',
        'edge': '#555555',
        'text': '#000000',
    }

    def __init__(self) -> None:
        """Initialize plotter with no layout"""
        self.result: Optional[LayoutResult] = None
        self.color_map: Dict[str, str] = {}

    @staticmethod
    def palette(n: int) -> List[str]:
        """n hex colors with evenly spaced hues, starting at red"""
        colors = []
        for i in range(n):
            hue = round(360 * i / n) / 360
            r, g, b = colorsys.hls_to_rgb(hue, PALETTE_LIGHTNESS, PALETTE_SATURATION)
            colors.append(to_hex((r, g, b)))
        return colors

    @staticmethod
    def treatments_in_order(result: LayoutResult) -> List[Treatment]:
        """Placed treatments in order of first appearance across all plates"""
        treatments: List[Treatment] = []
        seen = set()
        for plate in result.plates:
            for well in plate.wells:
                if well.assigned is not None and well.assigned.id not in seen:
                    seen.add(well.assigned.id)
                    treatments.append(well.assigned)
        return treatments

    def set_result(self, result: LayoutResult) -> None:
        """
        Set layout to plot and assign one color per treatment id

        Colors are stable within one generation run only. Keying by id keeps a
        control distinct from a combination that happens to share its label.
        """
        self.result = result
        ids = [t.id for t in self.treatments_in_order(result)]
        self.color_map = dict(zip(ids, self.palette(max(1, len(ids)))))

    @staticmethod
    def _save_plot(fig: Figure, save_path: Optional[str]) -> None:
        if save_path:
            fig.savefig(save_path, dpi=PLOT_DPI, bbox_inches='tight')

    def plot_plate(self, plate: Plate, save_path: Optional[str] = None) -> Figure:
        """
        Draw one plate

        Filled wells show their treatment label, with the level delimiter
        rendered as line breaks. Empty wells are drawn white.

        Args:
            plate: Plate to draw
            save_path: Optional path to save the figure

        Returns:
            Matplotlib Figure object
        """
        fig_width = plate.cols * WELL_SIZE_INCHES + LEGEND_WIDTH_INCHES
        fig_height = plate.rows * WELL_SIZE_INCHES + 1
        fig, ax = plt.subplots(figsize=(fig_width, fig_height))

        for well in plate.wells:
            color = self.color_map.get(well.assigned.id, self.COLORS['empty']) if well.assigned else self.COLORS['empty']
            ax.add_patch(Circle((well.col, well.row), WELL_RADIUS, facecolor=color,
                                edgecolor=self.COLORS['edge'], linewidth=EDGE_LINE_WIDTH))
            if well.assigned is not None:
                ax.text(well.col, well.row, well.assigned.label.replace(LABEL_DELIMITER, "\n"),
                        ha='center', va='center', fontsize=FONT_SIZE_WELL, color=self.COLORS['text'])

        ax.set_xlim(-0.6, plate.cols - 0.4)
        ax.set_ylim(plate.rows - 0.4, -0.6)
        ax.set_aspect('equal')
        ax.set_xticks(range(plate.cols))
        ax.set_xticklabels([str(c + 1) for c in range(plate.cols)], fontsize=FONT_SIZE_AXIS)
        ax.set_yticks(range(plate.rows))
        ax.set_yticklabels([plate.well_at(r, 0).coord[0] for r in range(plate.rows)], fontsize=FONT_SIZE_AXIS)
        ax.xaxis.tick_top()
        for spine in ax.spines.values():
            spine.set_visible(False)
        ax.set_title(f'Plate {plate.plate_id} - {plate.rows}x{plate.cols}',
                     fontsize=FONT_SIZE_TITLE, fontweight='bold')

        plate_treatments: List[Treatment] = []
        for well in plate.filled_wells():
            if well.assigned not in plate_treatments:
                plate_treatments.append(well.assigned)
        if plate_treatments:
            handles = [Patch(facecolor=self.color_map.get(t.id, self.COLORS['empty']),
                             edgecolor=self.COLORS['edge'], label=t.label)
                       for t in plate_treatments]
            ax.legend(handles=handles, loc='upper left', bbox_to_anchor=(1.02, 1),
                      fontsize=FONT_SIZE_LEGEND, frameon=False)

        fig.tight_layout(pad=PLOT_PAD)
        self._save_plot(fig, save_path)
        return fig

    def plot_all(self) -> List[Figure]:
        """One figure per plate; the caller closes them (plt.close)"""
        if self.result is None:
            raise ValueError("No layout generated yet")
        return [self.plot_plate(plate) for plate in self.result.plates]

    def export_pdf_bytes(self) -> bytes:
        """One PDF page per plate"""
        if self.result is None:
            raise ValueError("No layout generated yet")
        buf = io.BytesIO()
        with PdfPages(buf) as pdf:
            for plate in self.result.plates:
                fig = self.plot_plate(plate)
                pdf.savefig(fig, bbox_inches='tight')
                plt.close(fig)
        return buf.getvalue()
