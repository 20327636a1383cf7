"""Shared constants for page layout."""

from __future__ import annotations


MARGIN_MM = 10.0
# 72 DPI: one pixel is 1/72 inch.
PIXEL_TO_MM = 0.352778

PAGE_SIZES: tuple[str, ...] = ("a4", "letter", "a3", "a5")
ORIENTATIONS: tuple[str, ...] = ("portrait", "landscape")
FIT_MODES: tuple[str, ...] = ("fit", "original", "fill")

DEFAULT_PAGE_SIZE = "a4"
DEFAULT_ORIENTATION = "portrait"
DEFAULT_FIT_MODE = "fit"

__all__ = [
    "MARGIN_MM",
    "PIXEL_TO_MM",
    "PAGE_SIZES",
    "ORIENTATIONS",
    "FIT_MODES",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_ORIENTATION",
    "DEFAULT_FIT_MODE",
]
