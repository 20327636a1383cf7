from __future__ import annotations


_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(size_bytes: int) -> str:
    """Human-readable size with 1024-based units, e.g. ``1.5 KB``."""
    if size_bytes <= 0:
        return "0 Bytes"
    exponent = 0
    value = float(size_bytes)
    while value >= 1024 and exponent < len(_SIZE_UNITS) - 1:
        value /= 1024
        exponent += 1
    # Drop trailing zeros: 1.50 -> 1.5, 2.00 -> 2
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[exponent]}"


__all__ = ["format_file_size"]
