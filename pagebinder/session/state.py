"""Session state and its pure transition function.

``transition(session, event)`` never performs I/O. It returns the next
session together with a list of effects (start the pipeline, release an
artifact handle, log a diagnostic) that ``SessionController`` carries out.

Status flow::

    idle -> files_selected -> converting -> success
                 ^                |
                 +---- failure ---+

Any state goes back to ``idle`` on ``Reset``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal

from pagebinder.assets import ImageAsset, filter_supported
from pagebinder.layout import LayoutOptions

from .artifacts import ArtifactHandle


SessionStatus = Literal["idle", "files_selected", "converting", "success"]

SELECTION_MESSAGE = "Please select at least one image file."
SERVICE_UNAVAILABLE_MESSAGE = "PDF library is not loaded yet. Please wait a moment and try again."
CONVERSION_FAILED_MESSAGE = "Error converting images to PDF. Please try again."
SUCCESS_MESSAGE = "PDF created successfully."


@dataclass(frozen=True, slots=True)
class ConversionSession:
    files: tuple[ImageAsset, ...] = ()
    options: LayoutOptions = field(default_factory=LayoutOptions)
    status: SessionStatus = "idle"
    artifact: ArtifactHandle | None = None
    message: str | None = None


# Events


@dataclass(frozen=True, slots=True)
class FilesAdded:
    assets: tuple[ImageAsset, ...]


@dataclass(frozen=True, slots=True)
class FileRemoved:
    index: int


@dataclass(frozen=True, slots=True)
class OptionsChanged:
    changes: dict[str, Any]


@dataclass(frozen=True, slots=True)
class ConvertRequested:
    service_available: bool = True


@dataclass(frozen=True, slots=True)
class ConversionSucceeded:
    artifact: ArtifactHandle


@dataclass(frozen=True, slots=True)
class ConversionFailed:
    reason: str


@dataclass(frozen=True, slots=True)
class Reset:
    pass


Event = (
    FilesAdded
    | FileRemoved
    | OptionsChanged
    | ConvertRequested
    | ConversionSucceeded
    | ConversionFailed
    | Reset
)


# Effects


@dataclass(frozen=True, slots=True)
class StartConversion:
    files: tuple[ImageAsset, ...]
    options: LayoutOptions


@dataclass(frozen=True, slots=True)
class ReleaseArtifact:
    handle: ArtifactHandle


@dataclass(frozen=True, slots=True)
class LogMessage:
    level: Literal["debug", "info", "warning", "error"]
    text: str


Effect = StartConversion | ReleaseArtifact | LogMessage


def transition(session: ConversionSession, event: Event) -> tuple[ConversionSession, list[Effect]]:
    """Return the next session and the side effects the change requires."""
    match event:
        case FilesAdded(assets=assets):
            return _files_added(session, assets)
        case FileRemoved(index=index):
            return _file_removed(session, index)
        case OptionsChanged(changes=changes):
            if session.status == "converting":
                return session, []
            return replace(session, options=session.options.replace(**changes)), []
        case ConvertRequested(service_available=service_available):
            return _convert_requested(session, service_available)
        case ConversionSucceeded(artifact=artifact):
            effects: list[Effect] = []
            if session.artifact is not None and session.artifact != artifact:
                effects.append(ReleaseArtifact(session.artifact))
            return (
                replace(session, status="success", artifact=artifact, message=SUCCESS_MESSAGE),
                effects,
            )
        case ConversionFailed(reason=reason):
            status: SessionStatus = "files_selected" if session.files else "idle"
            return (
                replace(session, status=status, message=CONVERSION_FAILED_MESSAGE),
                [LogMessage("error", f"Conversion failed: {reason}")],
            )
        case Reset():
            effects = [ReleaseArtifact(session.artifact)] if session.artifact is not None else []
            return ConversionSession(options=session.options), effects
    raise TypeError(f"Unknown session event: {event!r}")


def _files_added(
    session: ConversionSession, assets: tuple[ImageAsset, ...]
) -> tuple[ConversionSession, list[Effect]]:
    if session.status == "converting":
        return session, [LogMessage("warning", "Ignoring new files while a conversion is running.")]

    effects: list[Effect] = [
        LogMessage("warning", f"Skipping unsupported file {asset.name} ({asset.kind}).")
        for asset in assets
        if not asset.is_supported
    ]
    accepted = filter_supported(assets)
    if not accepted:
        return session, effects

    return (
        replace(
            session,
            files=session.files + tuple(accepted),
            status="files_selected",
            message=None,
        ),
        effects,
    )


def _file_removed(session: ConversionSession, index: int) -> tuple[ConversionSession, list[Effect]]:
    if session.status == "converting" or not 0 <= index < len(session.files):
        return session, []

    files = session.files[:index] + session.files[index + 1 :]
    if files:
        return replace(session, files=files, status="files_selected", message=None), []

    # Removing the last file ends the session.
    effects: list[Effect] = [ReleaseArtifact(session.artifact)] if session.artifact is not None else []
    return ConversionSession(options=session.options), effects


def _convert_requested(
    session: ConversionSession, service_available: bool
) -> tuple[ConversionSession, list[Effect]]:
    if session.status == "converting":
        return session, []
    files = tuple(filter_supported(session.files))
    if not files:
        return replace(session, message=SELECTION_MESSAGE), []
    if not service_available:
        return replace(session, message=SERVICE_UNAVAILABLE_MESSAGE), []
    return (
        replace(session, status="converting", message=None),
        [StartConversion(files=files, options=session.options)],
    )


__all__ = [
    "SessionStatus",
    "ConversionSession",
    "FilesAdded",
    "FileRemoved",
    "OptionsChanged",
    "ConvertRequested",
    "ConversionSucceeded",
    "ConversionFailed",
    "Reset",
    "Event",
    "StartConversion",
    "ReleaseArtifact",
    "LogMessage",
    "Effect",
    "transition",
    "SELECTION_MESSAGE",
    "SERVICE_UNAVAILABLE_MESSAGE",
    "CONVERSION_FAILED_MESSAGE",
    "SUCCESS_MESSAGE",
]
