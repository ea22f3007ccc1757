"""Typed events decoded from an import job's message stream."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .model import InexactAlbumMatch, InexactTrackMatch

UNEXPECTED_ERROR_MESSAGE = "Unexpected error"
TRANSPORT_ERROR_MESSAGE = "Unexpected error. Probably network error."


class ErrorKind(StrEnum):
    """Where a failure came from."""

    REPORTED = "reported"
    PROTOCOL = "protocol"
    TRANSPORT = "transport"


@dataclass(slots=True, frozen=True)
class ProgressEvent:
    fraction: float


@dataclass(slots=True, frozen=True)
class TerminalResultEvent:
    album_matches: tuple[InexactAlbumMatch, ...] = field(default=())
    track_matches: tuple[InexactTrackMatch, ...] = field(default=())

    @property
    def is_empty(self) -> bool:
        return not self.album_matches and not self.track_matches


@dataclass(slots=True, frozen=True)
class ErrorEvent:
    message: str
    kind: ErrorKind = ErrorKind.REPORTED

    def __post_init__(self) -> None:
        if not self.message.strip():
            object.__setattr__(self, "message", UNEXPECTED_ERROR_MESSAGE)


type StreamEvent = ProgressEvent | TerminalResultEvent | ErrorEvent
