"""Custom exception types for the conversion core."""

from __future__ import annotations


class PageBinderError(RuntimeError):
    """Base class for every failure the conversion core reports."""

    pass


class SelectionError(PageBinderError):
    """Raised when a conversion is requested without any supported image."""

    pass


class ServiceUnavailableError(PageBinderError):
    """Raised when the document-assembly backend cannot be used."""

    pass


class ImageReadError(PageBinderError):
    """Raised when an input file cannot be read.

    Aborts the whole conversion; no partial document is returned.
    """

    def __init__(self, name: str, reason: BaseException | str) -> None:
        super().__init__(f"Failed to read image '{name}': {reason}")
        self.name = name


class ImageDecodeError(PageBinderError):
    """Raised when encoded image data cannot be decoded into pixels.

    Aborts the whole conversion; no partial document is returned.
    """

    def __init__(self, name: str, reason: BaseException | str) -> None:
        super().__init__(f"Failed to decode image '{name}': {reason}")
        self.name = name


class EmptyDocumentError(PageBinderError):
    """Raised when every input image was skipped and no page was placed."""

    pass


__all__ = [
    "PageBinderError",
    "SelectionError",
    "ServiceUnavailableError",
    "ImageReadError",
    "ImageDecodeError",
    "EmptyDocumentError",
]
