from .io import (
    decode_data_url,
    encode_data_url,
    image_to_data_url,
    open_data_url,
    read_bytes_async,
)


__all__ = [
    "decode_data_url",
    "encode_data_url",
    "image_to_data_url",
    "open_data_url",
    "read_bytes_async",
]
