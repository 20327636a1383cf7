"""Pure page layout math: fit modes, margins and placement rectangles."""

from ._constants import (
    FIT_MODES,
    MARGIN_MM,
    ORIENTATIONS,
    PAGE_SIZES,
    PIXEL_TO_MM,
)
from ._models import FitMode, LayoutOptions, Orientation, PageGeometry, PageSize
from .calculator import compute_layout


__all__ = [
    "FIT_MODES",
    "MARGIN_MM",
    "ORIENTATIONS",
    "PAGE_SIZES",
    "PIXEL_TO_MM",
    "FitMode",
    "LayoutOptions",
    "Orientation",
    "PageGeometry",
    "PageSize",
    "compute_layout",
]
