"""
Core module constants for plate rendering
Extracted magic numbers for better maintainability
"""

# Palette Constants (evenly spaced hues, HSL)
PALETTE_SATURATION = 0.70
PALETTE_LIGHTNESS = 0.55

# Plotting Constants
PLOT_DPI = 300  # Resolution for saved plots
PLOT_PAD = 0.5  # Padding for tight_layout
WELL_SIZE_INCHES = 0.6  # Figure inches per well
WELL_RADIUS = 0.42  # Well circle radius in grid units
LEGEND_WIDTH_INCHES = 3.0  # Extra figure width reserved for the legend
EDGE_LINE_WIDTH = 0.8  # Well outline width

# Font Sizes
FONT_SIZE_TITLE = 12
FONT_SIZE_AXIS = 9
FONT_SIZE_WELL = 6
FONT_SIZE_LEGEND = 7
