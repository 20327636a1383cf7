"""Conversion session: state, transitions, artifact handles and the controller."""

from .artifacts import ArtifactHandle, ArtifactStore, TempFileArtifactStore
from .controller import SessionController
from .state import (
    CONVERSION_FAILED_MESSAGE,
    SELECTION_MESSAGE,
    SERVICE_UNAVAILABLE_MESSAGE,
    SUCCESS_MESSAGE,
    ConversionFailed,
    ConversionSession,
    ConversionSucceeded,
    ConvertRequested,
    FileRemoved,
    FilesAdded,
    LogMessage,
    OptionsChanged,
    ReleaseArtifact,
    Reset,
    SessionStatus,
    StartConversion,
    transition,
)


__all__ = [
    "ArtifactHandle",
    "ArtifactStore",
    "TempFileArtifactStore",
    "SessionController",
    "CONVERSION_FAILED_MESSAGE",
    "SELECTION_MESSAGE",
    "SERVICE_UNAVAILABLE_MESSAGE",
    "SUCCESS_MESSAGE",
    "ConversionFailed",
    "ConversionSession",
    "ConversionSucceeded",
    "ConvertRequested",
    "FileRemoved",
    "FilesAdded",
    "LogMessage",
    "OptionsChanged",
    "ReleaseArtifact",
    "Reset",
    "SessionStatus",
    "StartConversion",
    "transition",
]
