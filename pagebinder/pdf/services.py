"""Capabilities the conversion pipeline depends on, plus their default backends.

The pipeline only talks to the protocols below. The defaults read files with
``aiofiles``, decode and draw with Pillow and assemble the PDF with PyMuPDF;
tests substitute lightweight fakes.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Protocol

import fitz  # PyMuPDF
from PIL import Image

from pagebinder.assets import ImageAsset, ImageKind
from pagebinder.layout import Orientation, PageGeometry, PageSize
from pagebinder.utils.image import (
    decode_data_url,
    encode_data_url,
    image_to_data_url,
    open_data_url,
    read_bytes_async,
)
from pagebinder.utils.log_utils import logger


POINTS_PER_MM = 72 / 25.4

# Portrait width and height in millimetres. PyMuPDF's paper_size table rounds to
# whole points, which would shift the page edges by a fraction of a millimetre.
PAPER_SIZES_MM: dict[str, tuple[float, float]] = {
    "a4": (210.0, 297.0),
    "letter": (215.9, 279.4),
    "a3": (297.0, 420.0),
    "a5": (148.0, 210.0),
}


@dataclass(slots=True)
class DecodedImage:
    width: int
    height: int
    image: Any = None


class FileReader(Protocol):
    async def read_as_data_url(self, asset: ImageAsset) -> str: ...


class ImageDecoder(Protocol):
    async def decode(self, data_url: str) -> DecodedImage: ...


class Surface(Protocol):
    def draw(self, decoded: DecodedImage) -> None: ...

    def to_png_data_url(self) -> str: ...


class SurfaceFactory(Protocol):
    def create_surface(self, width: int, height: int) -> Surface | None: ...


class PdfDocument(Protocol):
    @property
    def page_count(self) -> int: ...

    def add_page(self) -> None: ...

    def current_page_size(self) -> tuple[float, float]: ...

    def add_image(
        self,
        data_url: str,
        kind: ImageKind,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None: ...

    def to_bytes(self) -> bytes: ...

    def close(self) -> None: ...


class DocumentFactory(Protocol):
    def create(self, *, page_size: PageSize, orientation: Orientation) -> PdfDocument: ...


class AiofilesReader(FileReader):
    """Reads a file from disk and wraps it as a data URL of its declared type."""

    async def read_as_data_url(self, asset: ImageAsset) -> str:
        raw = await read_bytes_async(asset.source)
        return encode_data_url(raw, asset.mime_type)


class PillowDecoder(ImageDecoder):
    async def decode(self, data_url: str) -> DecodedImage:
        image = await asyncio.to_thread(open_data_url, data_url)
        width, height = image.size
        return DecodedImage(width=width, height=height, image=image)


class PillowSurface(Surface):
    """Off-screen RGBA canvas."""

    def __init__(self, canvas: Image.Image) -> None:
        self._canvas = canvas

    def draw(self, decoded: DecodedImage) -> None:
        image = decoded.image
        if not isinstance(image, Image.Image):
            raise TypeError("PillowSurface can only draw Pillow images.")
        source = image if image.mode == "RGBA" else image.convert("RGBA")
        self._canvas.alpha_composite(source, dest=(0, 0))

    def to_png_data_url(self) -> str:
        return image_to_data_url(self._canvas, format="PNG")


class PillowSurfaceFactory(SurfaceFactory):
    """Creates canvases, refusing sizes a renderer would not allocate."""

    def __init__(self, max_pixels: int) -> None:
        self._max_pixels = max_pixels

    def create_surface(self, width: int, height: int) -> Surface | None:
        if width <= 0 or height <= 0:
            logger.debug(f"Refusing surface with non-positive size {width}x{height}.")
            return None
        if width * height > self._max_pixels:
            logger.debug(
                f"Refusing surface {width}x{height}; exceeds {self._max_pixels} pixels."
            )
            return None
        try:
            canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        except (MemoryError, ValueError) as exc:
            logger.debug(f"Could not allocate surface {width}x{height}: {exc}")
            return None
        return PillowSurface(canvas)


class FitzDocument(PdfDocument):
    """PyMuPDF document whose public geometry is expressed in millimetres.

    The document starts with one page, so a single image never triggers
    ``add_page``.
    """

    def __init__(self, *, page_size: PageSize, orientation: Orientation) -> None:
        if page_size not in PAPER_SIZES_MM:
            raise ValueError(f"Unknown page size {page_size!r}.")
        short_side, long_side = (side * POINTS_PER_MM for side in PAPER_SIZES_MM[page_size])
        if orientation == "landscape":
            self._page_width_pt, self._page_height_pt = long_side, short_side
        else:
            self._page_width_pt, self._page_height_pt = short_side, long_side
        self._doc = fitz.open()
        self._page = self._doc.new_page(width=self._page_width_pt, height=self._page_height_pt)

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def add_page(self) -> None:
        self._page = self._doc.new_page(width=self._page_width_pt, height=self._page_height_pt)

    def current_page_size(self) -> tuple[float, float]:
        rect = self._page.rect
        return rect.width / POINTS_PER_MM, rect.height / POINTS_PER_MM

    def add_image(
        self,
        data_url: str,
        kind: ImageKind,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        _, raw = decode_data_url(data_url)
        placement = PageGeometry(x=x, y=y, width=width, height=height)
        rect = fitz.Rect(*placement.as_rect()) * POINTS_PER_MM
        logger.debug(f"Placing {kind} image at {rect} on page {self._page.number}")
        self._page.insert_image(rect, stream=raw, keep_proportion=False)

    def to_bytes(self) -> bytes:
        return self._doc.tobytes(garbage=3, deflate=True)

    def close(self) -> None:
        self._doc.close()


class FitzDocumentFactory(DocumentFactory):
    def create(self, *, page_size: PageSize, orientation: Orientation) -> PdfDocument:
        return FitzDocument(page_size=page_size, orientation=orientation)


__all__ = [
    "POINTS_PER_MM",
    "PAPER_SIZES_MM",
    "DecodedImage",
    "FileReader",
    "ImageDecoder",
    "Surface",
    "SurfaceFactory",
    "PdfDocument",
    "DocumentFactory",
    "AiofilesReader",
    "PillowDecoder",
    "PillowSurface",
    "PillowSurfaceFactory",
    "FitzDocument",
    "FitzDocumentFactory",
]
