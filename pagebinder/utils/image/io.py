"""Async image reading and data-URL helpers."""

from __future__ import annotations

import base64
import binascii
from io import BytesIO
from pathlib import Path

import aiofiles
from PIL import Image


_DATA_URL_PREFIX = "data:"
_BASE64_MARKER = ";base64,"


async def read_bytes_async(path: str | Path) -> bytes:
    """Read a whole file without blocking the event loop."""
    async with aiofiles.open(Path(path), "rb") as file_obj:
        return await file_obj.read()


def encode_data_url(data: bytes, mime_type: str) -> str:
    """Wrap raw bytes as a ``data:<mime>;base64,<payload>`` string."""
    payload = base64.b64encode(data).decode("ascii")
    return f"{_DATA_URL_PREFIX}{mime_type}{_BASE64_MARKER}{payload}"


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    """Split a base64 data URL into its MIME type and raw bytes.

    Raises:
        ValueError: If the string is not a base64 data URL.
    """
    if not data_url.startswith(_DATA_URL_PREFIX) or _BASE64_MARKER not in data_url:
        raise ValueError("Expected a base64 data URL.")
    header, payload = data_url[len(_DATA_URL_PREFIX) :].split(_BASE64_MARKER, 1)
    try:
        raw = base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 payload: {exc}") from exc
    return header, raw


def open_data_url(data_url: str) -> Image.Image:
    """Decode a data URL into a fully loaded Pillow image."""
    _, raw = decode_data_url(data_url)
    image = Image.open(BytesIO(raw))
    image.load()
    return image


def image_to_data_url(image: Image.Image, *, format: str = "PNG") -> str:
    """Encode a Pillow image as a data URL in the given format."""
    buffer = BytesIO()
    image.save(buffer, format=format)
    return encode_data_url(buffer.getvalue(), f"image/{format.lower()}")


__all__ = [
    "read_bytes_async",
    "encode_data_url",
    "decode_data_url",
    "open_data_url",
    "image_to_data_url",
]
