"""Local image-to-PDF binding: layout math, conversion pipeline and session."""

__version__ = "0.1.0"
