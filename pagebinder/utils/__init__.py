"""Shared helpers: logging, progress reporting and image I/O."""
