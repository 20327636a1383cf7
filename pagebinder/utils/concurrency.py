"""Progress reporting for the sequential conversion loop."""

from __future__ import annotations

from typing import Protocol

from tqdm import tqdm


class ProgressReporter(Protocol):
    """Lightweight progress reporter abstraction."""

    def start(self, total: int) -> None: ...

    def increment(self) -> None: ...

    def close(self) -> None: ...


class TqdmProgressReporter:
    """Progress reporter backed by tqdm; one tick per processed image."""

    def __init__(self, desc: str, *, disable: bool | None = None) -> None:
        self._desc = desc
        # None lets tqdm hide the bar when stderr is not a terminal.
        self._disable = disable
        self._pbar: tqdm | None = None

    def start(self, total: int) -> None:
        self.close()
        self._pbar = tqdm(
            total=total,
            desc=self._desc,
            unit="image",
            smoothing=0,
            leave=False,
            disable=self._disable,
        )

    def increment(self) -> None:
        if self._pbar is not None:
            self._pbar.update(1)

    def close(self) -> None:
        if self._pbar is not None:
            self._pbar.close()
            self._pbar = None


__all__ = ["ProgressReporter", "TqdmProgressReporter"]
