from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
import shutil

from pagebinder.assets import ImageAsset
from pagebinder.config import get_settings
from pagebinder.layout import LayoutOptions
from pagebinder.pdf import PipelineConfig, default_pipeline
from pagebinder.session import SessionController, TempFileArtifactStore
from pagebinder.utils.concurrency import TqdmProgressReporter
from pagebinder.utils.log_utils import logger

from .helpers import format_file_size


EXIT_OK = 0
EXIT_CONVERSION_FAILED = 1
EXIT_SELECTION_ERROR = 2


@dataclass(slots=True)
class ConvertOptions:
    inputs: Sequence[Path]
    output: Path
    page_size: str | None
    orientation: str | None
    image_fit: str | None
    allow_empty: bool | None
    overwrite: bool


def _resolve_layout(options: ConvertOptions, defaults: LayoutOptions) -> LayoutOptions:
    changes = {
        key: value
        for key, value in (
            ("page_size", options.page_size),
            ("orientation", options.orientation),
            ("image_fit", options.image_fit),
        )
        if value is not None
    }
    return defaults.replace(**changes)


def describe_inputs(inputs: Sequence[Path]) -> list[ImageAsset]:
    """Log each input with its size and whether it will be converted.

    Repeated paths are kept; each argument becomes its own page.
    """
    assets = [ImageAsset.from_path(path) for path in inputs]
    for asset in assets:
        size = format_file_size(asset.size_bytes) if asset.size_bytes is not None else "?"
        marker = asset.kind.upper() if asset.is_supported else "SKIP"
        logger.info(f"[{marker}] {asset.name} ({size})")
    return assets


async def run(options: ConvertOptions) -> int:
    settings = get_settings()
    layout = _resolve_layout(options, settings.layout)
    allow_empty = (
        settings.runtime.allow_empty_document if options.allow_empty is None else options.allow_empty
    )

    if options.output.exists() and not options.overwrite:
        logger.error(f"{options.output} already exists; pass --overwrite to replace it.")
        return EXIT_SELECTION_ERROR

    pipeline = default_pipeline(
        PipelineConfig(
            allow_empty_document=allow_empty,
            max_surface_pixels=settings.runtime.max_surface_pixels,
        )
    )
    controller = SessionController(
        pipeline=pipeline,
        artifacts=TempFileArtifactStore(settings.runtime.artifact_dir),
        options=layout,
        progress_reporter=TqdmProgressReporter("convert"),
    )

    controller.add_assets(describe_inputs(options.inputs))
    logger.info(
        f"Layout: {layout.page_size} / {layout.orientation} / {layout.image_fit} "
        f"| Files: {len(controller.session.files)}"
    )

    try:
        handle = await controller.convert()
        if handle is None:
            message = controller.session.message or "Conversion did not run."
            logger.error(message)
            if controller.session.status == "idle" or not controller.session.files:
                return EXIT_SELECTION_ERROR
            return EXIT_CONVERSION_FAILED

        options.output.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(handle.path, options.output)
        report = controller.last_report
        if report is not None:
            for name in report.skipped:
                logger.warning(f"Skipped {name}: no drawing surface available.")
        logger.info(
            f"Wrote {options.output} ({format_file_size(handle.size_bytes)}, "
            f"{report.page_count if report else '?'} page(s))"
        )
        return EXIT_OK
    finally:
        controller.reset()
