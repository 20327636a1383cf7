"""Sequential image-to-PDF conversion pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from pagebinder.assets import ImageAsset, ImageKind
from pagebinder.errors import (
    EmptyDocumentError,
    ImageDecodeError,
    ImageReadError,
    SelectionError,
    ServiceUnavailableError,
)
from pagebinder.layout import LayoutOptions, PageGeometry, compute_layout
from pagebinder.utils.concurrency import ProgressReporter
from pagebinder.utils.log_utils import logger

from .services import (
    AiofilesReader,
    DecodedImage,
    DocumentFactory,
    FileReader,
    FitzDocumentFactory,
    ImageDecoder,
    PdfDocument,
    PillowDecoder,
    PillowSurfaceFactory,
    SurfaceFactory,
)


@dataclass(slots=True)
class PlacedPage:
    """What ended up on one output page."""

    source_name: str
    kind: ImageKind
    page_width: float
    page_height: float
    geometry: PageGeometry


@dataclass(slots=True)
class ConversionReport:
    pdf_bytes: bytes
    pages: list[PlacedPage] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)


@dataclass(slots=True)
class PipelineConfig:
    # When False, a run that places no page raises EmptyDocumentError.
    allow_empty_document: bool = False
    max_surface_pixels: int = 268_435_456


class ConversionPipeline:
    """Turns an ordered selection of images into one PDF.

    Images are processed one at a time, in input order, with a single await
    chain per image. Read and decode failures abort the run; a WebP image
    whose drawing surface cannot be created is skipped.
    """

    def __init__(
        self,
        *,
        reader: FileReader,
        decoder: ImageDecoder,
        surfaces: SurfaceFactory,
        documents: DocumentFactory | None,
        config: PipelineConfig | None = None,
    ) -> None:
        self._reader = reader
        self._decoder = decoder
        self._surfaces = surfaces
        self._documents = documents
        self._config = config or PipelineConfig()

    @property
    def is_ready(self) -> bool:
        return self._documents is not None

    async def convert(
        self,
        images: Sequence[ImageAsset],
        options: LayoutOptions,
        *,
        progress_reporter: ProgressReporter | None = None,
    ) -> bytes:
        report = await self.convert_with_report(
            images, options, progress_reporter=progress_reporter
        )
        return report.pdf_bytes

    async def convert_with_report(
        self,
        images: Sequence[ImageAsset],
        options: LayoutOptions,
        *,
        progress_reporter: ProgressReporter | None = None,
    ) -> ConversionReport:
        if self._documents is None:
            raise ServiceUnavailableError("PDF assembly backend is not available.")
        if not images:
            raise SelectionError("Please select at least one image file.")
        unsupported = [asset.name for asset in images if not asset.is_supported]
        if unsupported:
            raise ValueError(
                f"Unsupported images must be filtered out before conversion: {unsupported}"
            )

        document: PdfDocument | None = None
        pages: list[PlacedPage] = []
        skipped: list[str] = []

        if progress_reporter:
            progress_reporter.start(len(images))
        try:
            for asset in images:
                prepared = await self._prepare_image(asset)
                if prepared is None:
                    skipped.append(asset.name)
                else:
                    data_url, kind, decoded = prepared
                    if document is None:
                        document = self._documents.create(
                            page_size=options.page_size, orientation=options.orientation
                        )
                    else:
                        document.add_page()
                    pages.append(
                        self._place_image(document, asset, data_url, kind, decoded, options)
                    )
                if progress_reporter:
                    progress_reporter.increment()

            if document is None:
                if not self._config.allow_empty_document:
                    raise EmptyDocumentError(
                        f"No page could be produced from {len(images)} image(s); "
                        f"skipped: {', '.join(skipped)}"
                    )
                logger.warning("Every image was skipped; producing a blank document.")
                document = self._documents.create(
                    page_size=options.page_size, orientation=options.orientation
                )

            pdf_bytes = document.to_bytes()
        finally:
            if document is not None:
                document.close()
            if progress_reporter:
                progress_reporter.close()

        logger.info(
            f"Conversion complete. Pages: {len(pages)} | Skipped: {len(skipped)} "
            f"| Size: {len(pdf_bytes)} bytes"
        )
        return ConversionReport(pdf_bytes=pdf_bytes, pages=pages, skipped=skipped)

    async def _prepare_image(
        self, asset: ImageAsset
    ) -> tuple[str, ImageKind, DecodedImage] | None:
        """Read, normalize and decode one image; ``None`` means skip it."""
        try:
            data_url = await self._reader.read_as_data_url(asset)
        except Exception as exc:
            logger.error(f"Reading {asset.name} failed: {exc}")
            raise ImageReadError(asset.name, exc) from exc

        kind: ImageKind = asset.kind
        if kind == "webp":
            normalized = await self._normalize_webp(asset, data_url)
            if normalized is None:
                return None
            data_url, kind = normalized, "png"

        decoded = await self._decode(asset, data_url)
        asset.record_dimensions(decoded.width, decoded.height)
        return data_url, kind, decoded

    def _place_image(
        self,
        document: PdfDocument,
        asset: ImageAsset,
        data_url: str,
        kind: ImageKind,
        decoded: DecodedImage,
        options: LayoutOptions,
    ) -> PlacedPage:
        # The backend may report a size that differs slightly from the nominal paper size.
        page_width, page_height = document.current_page_size()
        geometry = compute_layout(
            decoded.width, decoded.height, page_width, page_height, options.image_fit
        )
        document.add_image(
            data_url, kind, geometry.x, geometry.y, geometry.width, geometry.height
        )
        logger.debug(
            f"{asset.name}: {decoded.width}x{decoded.height}px -> "
            f"{geometry.width:.2f}x{geometry.height:.2f}mm at ({geometry.x:.2f}, {geometry.y:.2f})"
        )
        return PlacedPage(
            source_name=asset.name,
            kind=kind,
            page_width=page_width,
            page_height=page_height,
            geometry=geometry,
        )

    async def _decode(self, asset: ImageAsset, data_url: str) -> DecodedImage:
        try:
            return await self._decoder.decode(data_url)
        except Exception as exc:
            logger.error(f"Decoding {asset.name} failed: {exc}")
            raise ImageDecodeError(asset.name, exc) from exc

    async def _normalize_webp(self, asset: ImageAsset, data_url: str) -> str | None:
        """Re-encode a WebP image as PNG through an off-screen surface."""
        decoded = await self._decode(asset, data_url)
        surface = self._surfaces.create_surface(decoded.width, decoded.height)
        if surface is None:
            logger.warning(f"No drawing surface for {asset.name}; skipping it.")
            return None
        surface.draw(decoded)
        return surface.to_png_data_url()


def default_pipeline(config: PipelineConfig | None = None) -> ConversionPipeline:
    """Build a pipeline wired to the aiofiles, Pillow and PyMuPDF backends."""
    config = config or PipelineConfig()
    return ConversionPipeline(
        reader=AiofilesReader(),
        decoder=PillowDecoder(),
        surfaces=PillowSurfaceFactory(max_pixels=config.max_surface_pixels),
        documents=FitzDocumentFactory(),
        config=config,
    )


async def convert_images(
    images: Sequence[ImageAsset],
    options: LayoutOptions,
    *,
    allow_empty_document: bool = False,
    progress_reporter: ProgressReporter | None = None,
) -> bytes:
    pipeline = default_pipeline(PipelineConfig(allow_empty_document=allow_empty_document))
    return await pipeline.convert(images, options, progress_reporter=progress_reporter)


__all__ = [
    "ConversionPipeline",
    "ConversionReport",
    "PipelineConfig",
    "PlacedPage",
    "convert_images",
    "default_pipeline",
]
