"""Import-matching pipeline: submit, stream, resolve, apply."""

from __future__ import annotations

from .events import (
    TRANSPORT_ERROR_MESSAGE,
    UNEXPECTED_ERROR_MESSAGE,
    ErrorEvent,
    ErrorKind,
    ProgressEvent,
    StreamEvent,
    TerminalResultEvent,
)
from .model import (
    ApplySelectionsPayload,
    FullImportPayload,
    ImportJob,
    InexactAlbumMatch,
    InexactTrackMatch,
    JobKind,
    JobState,
    MatchCandidate,
    MatchedAlbum,
    MatchedTrack,
    SelectionResult,
)
from .reconciliation import MatchReconciliation
from .selection import extract_selections, matched_albums, matched_tracks, unmatched_albums
from .session import ImportSession
from .state_machine import (
    ImportSignal,
    ImportStateMachine,
    InvalidTransitionError,
    JobInProgressError,
)

__all__ = [
    "TRANSPORT_ERROR_MESSAGE",
    "UNEXPECTED_ERROR_MESSAGE",
    "ApplySelectionsPayload",
    "ErrorEvent",
    "ErrorKind",
    "FullImportPayload",
    "ImportJob",
    "ImportSession",
    "ImportSignal",
    "ImportStateMachine",
    "InexactAlbumMatch",
    "InexactTrackMatch",
    "InvalidTransitionError",
    "JobInProgressError",
    "JobKind",
    "JobState",
    "MatchCandidate",
    "MatchReconciliation",
    "MatchedAlbum",
    "MatchedTrack",
    "ProgressEvent",
    "SelectionResult",
    "StreamEvent",
    "TerminalResultEvent",
    "extract_selections",
    "matched_albums",
    "matched_tracks",
    "unmatched_albums",
]
