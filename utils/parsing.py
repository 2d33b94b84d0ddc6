"""
Free-text parsing utilities
Turns user-entered level and control text into clean name lists
"""
import re
from typing import List

from config.layout_config import AUTO_LEVEL_TEMPLATE


def parse_levels(text: str) -> List[str]:
    """
    Split level text on newlines or commas

    Examples:
        "10mg, 20mg" → ["10mg", "20mg"]
        "low\\nhigh\\n" → ["low", "high"]

    Args:
        text: Raw text as typed by the user

    Returns:
        Trimmed, non-empty level names in entry order
    """
    if not text:
        return []
    return [item.strip() for item in re.split(r'\r?\n|,', text) if item.strip()]


def parse_controls(text: str) -> List[str]:
    """
    Split control text on commas

    Examples:
        "CTRL, Blank, Solvent" → ["CTRL", "Blank", "Solvent"]
        "CTRL,," → ["CTRL"]
    """
    if not text:
        return []
    return [item.strip() for item in text.split(',') if item.strip()]


def default_levels(factor_name: str, n_levels: int) -> List[str]:
    """Placeholder levels for a factor entered without explicit values"""
    return [AUTO_LEVEL_TEMPLATE.format(name=factor_name, index=k + 1) for k in range(max(1, n_levels))]
