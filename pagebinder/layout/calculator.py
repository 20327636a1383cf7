"""Map an image's pixel rectangle onto a page's physical rectangle."""

from __future__ import annotations

from ._constants import MARGIN_MM, PIXEL_TO_MM
from ._models import FitMode, PageGeometry


def compute_layout(
    image_width: float,
    image_height: float,
    page_width: float,
    page_height: float,
    fit_mode: FitMode,
) -> PageGeometry:
    """Compute where an image goes on a page for the given fit mode.

    A fixed ``MARGIN_MM`` inset is removed from every side of the page to form
    the available area.

    - ``fit`` scales uniformly to fit the available area and centers the
      result on the full page.
    - ``fill`` stretches the image over the whole available area; aspect ratio
      is not preserved.
    - ``original`` converts pixels at 72 DPI and clamps each axis
      independently to the available area, then centers on the full page.

    Args:
        image_width: Decoded image width in pixels.
        image_height: Decoded image height in pixels.
        page_width: Page width in millimetres.
        page_height: Page height in millimetres.
        fit_mode: One of ``fit``, ``original`` or ``fill``.

    Returns:
        The placement rectangle in millimetres.

    Raises:
        ValueError: If a pixel dimension is not positive or the mode is unknown.
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(
            f"Image dimensions must be positive, got {image_width}x{image_height}."
        )

    available_width = page_width - MARGIN_MM * 2
    available_height = page_height - MARGIN_MM * 2

    if fit_mode == "fit":
        scale = min(available_width / image_width, available_height / image_height)
        width = image_width * scale
        height = image_height * scale
        return PageGeometry(
            x=(page_width - width) / 2,
            y=(page_height - height) / 2,
            width=width,
            height=height,
        )

    if fit_mode == "fill":
        return PageGeometry(
            x=MARGIN_MM,
            y=MARGIN_MM,
            width=available_width,
            height=available_height,
        )

    if fit_mode == "original":
        width = min(image_width * PIXEL_TO_MM, available_width)
        height = min(image_height * PIXEL_TO_MM, available_height)
        return PageGeometry(
            x=(page_width - width) / 2,
            y=(page_height - height) / 2,
            width=width,
            height=height,
        )

    raise ValueError(f"Unknown fit mode: {fit_mode!r}")


__all__ = ["compute_layout"]
