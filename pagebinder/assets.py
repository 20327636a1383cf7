"""Input image descriptions and the supported-format filter."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
import mimetypes
import os
from pathlib import Path
from typing import Literal


ImageKind = Literal["png", "jpeg", "webp", "unsupported"]

SUPPORTED_KINDS: tuple[ImageKind, ...] = ("png", "jpeg", "webp")

KIND_BY_MIME: dict[str, ImageKind] = {
    "image/png": "png",
    "image/jpeg": "jpeg",
    "image/jpg": "jpeg",
    "image/webp": "webp",
}

MIME_BY_KIND: dict[str, str] = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
}

# Some platforms ship a mimetypes table without WebP.
KIND_BY_SUFFIX: dict[str, ImageKind] = {
    ".png": "png",
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
    ".webp": "webp",
}


def kind_from_mime(mime_type: str | None) -> ImageKind:
    if not mime_type:
        return "unsupported"
    return KIND_BY_MIME.get(mime_type.strip().lower(), "unsupported")


def kind_from_path(path: str | os.PathLike[str]) -> ImageKind:
    """Guess the declared kind of a file from its name."""
    suffix = Path(path).suffix.lower()
    if suffix in KIND_BY_SUFFIX:
        return KIND_BY_SUFFIX[suffix]
    mime_type, _ = mimetypes.guess_type(str(path))
    return kind_from_mime(mime_type)


@dataclass(slots=True, eq=False)
class ImageAsset:
    """One selected input image.

    ``width`` and ``height`` stay ``None`` until the conversion pipeline has
    decoded the image, and are written once.
    """

    source: Path
    kind: ImageKind
    name: str = ""
    size_bytes: int | None = None
    width: int | None = field(default=None)
    height: int | None = field(default=None)

    def __post_init__(self) -> None:
        if not self.name:
            self.name = self.source.name

    @classmethod
    def from_path(cls, path: str | os.PathLike[str], *, mime_type: str | None = None) -> ImageAsset:
        source = Path(path)
        kind = kind_from_mime(mime_type) if mime_type else kind_from_path(source)
        try:
            size_bytes: int | None = source.stat().st_size
        except OSError:
            size_bytes = None
        return cls(source=source, kind=kind, size_bytes=size_bytes)

    @property
    def is_supported(self) -> bool:
        return self.kind in SUPPORTED_KINDS

    @property
    def mime_type(self) -> str:
        return MIME_BY_KIND.get(self.kind, "application/octet-stream")

    def record_dimensions(self, width: int, height: int) -> None:
        if self.width is None and self.height is None:
            self.width = width
            self.height = height


def filter_supported(assets: Iterable[ImageAsset]) -> list[ImageAsset]:
    """Keep supported assets, preserving order."""
    return [asset for asset in assets if asset.is_supported]


__all__ = [
    "ImageKind",
    "SUPPORTED_KINDS",
    "KIND_BY_MIME",
    "MIME_BY_KIND",
    "ImageAsset",
    "filter_supported",
    "kind_from_mime",
    "kind_from_path",
]
