"""Runs session transitions and carries out their effects."""

from __future__ import annotations

from collections.abc import Iterable
import os
from typing import Any

from pagebinder.assets import ImageAsset
from pagebinder.layout import LayoutOptions
from pagebinder.pdf import ConversionPipeline, ConversionReport
from pagebinder.utils.concurrency import ProgressReporter
from pagebinder.utils.log_utils import logger

from .artifacts import ArtifactHandle, ArtifactStore
from .state import (
    ConversionFailed,
    ConversionSession,
    ConversionSucceeded,
    ConvertRequested,
    Effect,
    Event,
    FileRemoved,
    FilesAdded,
    LogMessage,
    OptionsChanged,
    ReleaseArtifact,
    Reset,
    StartConversion,
    transition,
)


class SessionController:
    """Owns one ``ConversionSession`` and the services its effects need.

    The pipeline may be ``None`` when no PDF backend is available; convert
    requests then leave the session unchanged apart from a message.
    """

    def __init__(
        self,
        *,
        pipeline: ConversionPipeline | None,
        artifacts: ArtifactStore,
        options: LayoutOptions | None = None,
        progress_reporter: ProgressReporter | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._artifacts = artifacts
        self._progress = progress_reporter
        self._session = ConversionSession(options=options or LayoutOptions())
        self._last_report: ConversionReport | None = None

    @property
    def session(self) -> ConversionSession:
        return self._session

    @property
    def last_report(self) -> ConversionReport | None:
        return self._last_report

    def dispatch(self, event: Event) -> list[StartConversion]:
        """Apply an event, run immediate effects and return pending conversions."""
        self._session, effects = transition(self._session, event)
        return self._run_effects(effects)

    def add_files(self, paths: Iterable[str | os.PathLike[str]]) -> ConversionSession:
        assets = tuple(ImageAsset.from_path(path) for path in paths)
        self.dispatch(FilesAdded(assets))
        return self._session

    def add_assets(self, assets: Iterable[ImageAsset]) -> ConversionSession:
        self.dispatch(FilesAdded(tuple(assets)))
        return self._session

    def remove_file(self, index: int) -> ConversionSession:
        self.dispatch(FileRemoved(index))
        return self._session

    def change_options(self, **changes: Any) -> ConversionSession:
        self.dispatch(OptionsChanged(changes))
        return self._session

    def reset(self) -> ConversionSession:
        self.dispatch(Reset())
        return self._session

    async def convert(self) -> ArtifactHandle | None:
        """Run the pipeline on the current selection.

        Returns the new artifact handle, or ``None`` when the request was
        rejected or the conversion failed; ``session.message`` says why.
        """
        service_available = self._pipeline is not None and self._pipeline.is_ready
        pending = self.dispatch(ConvertRequested(service_available=service_available))
        if not pending:
            if self._session.message:
                logger.warning(self._session.message)
            return None

        for start in pending:
            await self._run_conversion(start)
        if self._session.status == "success":
            return self._session.artifact
        return None

    async def _run_conversion(self, start: StartConversion) -> None:
        assert self._pipeline is not None
        try:
            report = await self._pipeline.convert_with_report(
                start.files, start.options, progress_reporter=self._progress
            )
            handle = self._artifacts.publish(report.pdf_bytes)
        except Exception as exc:
            logger.exception("Image to PDF conversion failed")
            self.dispatch(ConversionFailed(str(exc)))
            return
        self._last_report = report
        self.dispatch(ConversionSucceeded(handle))

    def _run_effects(self, effects: list[Effect]) -> list[StartConversion]:
        pending: list[StartConversion] = []
        for effect in effects:
            match effect:
                case ReleaseArtifact(handle=handle):
                    self._artifacts.release(handle)
                case LogMessage(level=level, text=text):
                    logger.log(level.upper(), text)
                case StartConversion():
                    pending.append(effect)
        return pending


__all__ = ["SessionController"]
