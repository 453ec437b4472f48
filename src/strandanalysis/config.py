"""
Configuration & Path Management
===============================
Resource paths and the plant-wide constants shared by the geometry and
statistics code: concrete cover, gauge range, display precision, tolerances.

Paths resolve against the repository root in a checkout and against
sys._MEIPASS in a PyInstaller build.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    DEFAULT_PATTERNS_PATH (str): Absolute path to the bundled strand patterns file.
"""
import sys
import os
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Absolute path of a bundled resource, from a source checkout or from a
    PyInstaller build (which unpacks data files under sys._MEIPASS).
    """
    base_path: Optional[str] = getattr(sys, '_MEIPASS', None)
    if base_path is None:
        # src/strandanalysis/config.py -> repository root
        base_path = str(Path(__file__).resolve().parents[2])
    return os.path.join(base_path, relative_path)


# Global Constants
ASSETS_PATH: str = get_resource_path("assets")
DEFAULT_PATTERNS_PATH: str = os.path.join(ASSETS_PATH, "strand_patterns_default.json")

# Distance from the outermost strand centre to the plank edge (inches).
CONCRETE_COVER_IN: float = 2.0

# Measuring range of the slippage gauge; readings beyond it are flagged, not measured.
SLIPPAGE_THRESHOLD_IN: float = 1.0

# Fractions are displayed to the nearest 1/FRACTION_DENOMINATOR inch.
FRACTION_DENOMINATOR: int = 16

DISPLAY_DECIMALS: int = 3

# Strand positions closer than this are considered the same location.
LOCATION_TOLERANCE_IN: float = 0.5

# Derived vs catalog plank width differences below this are not reported.
WIDTH_TOLERANCE_IN: float = 1e-6

if not os.path.exists(ASSETS_PATH):
    logger.debug(f"Assets path not found at {ASSETS_PATH}")
