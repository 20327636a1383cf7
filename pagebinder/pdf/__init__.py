"""Image-to-PDF conversion.

Primary public entry point:
    ``ConversionPipeline`` – a strictly sequential asyncio pipeline that, for
    each image in input order:
      1. Reads the file into a data URL.
      2. Re-encodes WebP images as PNG through an off-screen surface.
      3. Decodes the image to learn its pixel size.
      4. Opens the document (first image) or appends a page (later images).
      5. Places the image according to the layout options.

The capabilities it needs (file reading, decoding, surfaces, document
assembly) are injected; ``default_pipeline`` wires the aiofiles, Pillow and
PyMuPDF backends.
"""

from .runner import (
    ConversionPipeline,
    ConversionReport,
    PipelineConfig,
    PlacedPage,
    convert_images,
    default_pipeline,
)


__all__ = [
    "ConversionPipeline",
    "ConversionReport",
    "PipelineConfig",
    "PlacedPage",
    "convert_images",
    "default_pipeline",
]
