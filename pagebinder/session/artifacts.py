"""Transient handles to produced PDF files."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import tempfile
from typing import Protocol

from pagebinder.utils.log_utils import logger


@dataclass(frozen=True, slots=True)
class ArtifactHandle:
    path: Path
    size_bytes: int


class ArtifactStore(Protocol):
    def publish(self, data: bytes) -> ArtifactHandle: ...

    def release(self, handle: ArtifactHandle) -> None: ...


class TempFileArtifactStore(ArtifactStore):
    """Keeps each artifact in its own temporary file until released."""

    def __init__(self, directory: str | os.PathLike[str] | None = None) -> None:
        self._directory = Path(directory) if directory is not None else None

    def publish(self, data: bytes) -> ArtifactHandle:
        if self._directory is not None:
            self._directory.mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(prefix="pagebinder-", suffix=".pdf", dir=self._directory)
        path = Path(name)
        try:
            with os.fdopen(fd, "wb") as file_obj:
                file_obj.write(data)
        except Exception:
            path.unlink(missing_ok=True)
            raise
        logger.debug(f"Published artifact {path} ({len(data)} bytes)")
        return ArtifactHandle(path=path, size_bytes=len(data))

    def release(self, handle: ArtifactHandle) -> None:
        handle.path.unlink(missing_ok=True)
        logger.debug(f"Released artifact {handle.path}")


__all__ = ["ArtifactHandle", "ArtifactStore", "TempFileArtifactStore"]
