from __future__ import annotations

from io import BytesIO
from pathlib import Path

from PIL import Image
import pytest

from pagebinder.utils.image import (
    decode_data_url,
    encode_data_url,
    image_to_data_url,
    open_data_url,
    read_bytes_async,
)


def test_encode_data_url_layout() -> None:
    assert encode_data_url(b"hi", "image/png") == "data:image/png;base64,aGk="


def test_decode_data_url_returns_mime_and_bytes() -> None:
    mime, raw = decode_data_url("data:image/jpeg;base64,aGk=")
    assert mime == "image/jpeg"
    assert raw == b"hi"


@pytest.mark.parametrize(
    "value",
    ["not a url", "data:image/png,plain", "data:image/png;base64,@@@"],
)
def test_decode_data_url_rejects_malformed(value: str) -> None:
    with pytest.raises(ValueError):
        decode_data_url(value)


def test_image_to_data_url_is_png() -> None:
    image = Image.new("RGBA", (3, 2), (255, 0, 0, 255))

    data_url = image_to_data_url(image)

    assert data_url.startswith("data:image/png;base64,")
    decoded = open_data_url(data_url)
    assert decoded.size == (3, 2)
    assert decoded.format == "PNG"


def test_open_data_url_rejects_garbage() -> None:
    with pytest.raises(OSError):
        open_data_url(encode_data_url(b"definitely not an image", "image/png"))


@pytest.mark.asyncio
async def test_read_bytes_async(tmp_path: Path) -> None:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), "white").save(buffer, format="JPEG")
    path = tmp_path / "tiny.jpg"
    path.write_bytes(buffer.getvalue())

    assert await read_bytes_async(path) == buffer.getvalue()
