"""Dataclasses describing layout options and computed page placements."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Literal

from ._constants import (
    DEFAULT_FIT_MODE,
    DEFAULT_ORIENTATION,
    DEFAULT_PAGE_SIZE,
    FIT_MODES,
    ORIENTATIONS,
    PAGE_SIZES,
)


PageSize = Literal["a4", "letter", "a3", "a5"]
Orientation = Literal["portrait", "landscape"]
FitMode = Literal["fit", "original", "fill"]


@dataclass(frozen=True, slots=True)
class LayoutOptions:
    """Per-conversion configuration chosen by the user."""

    page_size: PageSize = DEFAULT_PAGE_SIZE  # type: ignore[assignment]
    orientation: Orientation = DEFAULT_ORIENTATION  # type: ignore[assignment]
    image_fit: FitMode = DEFAULT_FIT_MODE  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.page_size not in PAGE_SIZES:
            raise ValueError(
                f"Unknown page size {self.page_size!r}; expected one of {', '.join(PAGE_SIZES)}."
            )
        if self.orientation not in ORIENTATIONS:
            raise ValueError(
                f"Unknown orientation {self.orientation!r}; expected one of {', '.join(ORIENTATIONS)}."
            )
        if self.image_fit not in FIT_MODES:
            raise ValueError(
                f"Unknown image fit {self.image_fit!r}; expected one of {', '.join(FIT_MODES)}."
            )

    def replace(self, **changes: Any) -> LayoutOptions:
        """Return a copy with only the given fields changed."""
        return replace(self, **changes)


@dataclass(frozen=True, slots=True)
class PageGeometry:
    """Placement rectangle of one image on one page, in millimetres."""

    x: float
    y: float
    width: float
    height: float

    def as_rect(self) -> tuple[float, float, float, float]:
        """Return ``(x0, y0, x1, y1)`` with a top-left origin."""
        return self.x, self.y, self.x + self.width, self.y + self.height


__all__ = [
    "PageSize",
    "Orientation",
    "FitMode",
    "LayoutOptions",
    "PageGeometry",
]
