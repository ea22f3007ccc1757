"""Import jobs, match groups and the payloads derived from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class JobKind(StrEnum):
    FULL_IMPORT = "full-import"
    APPLY_SELECTIONS = "apply-selections"


class JobState(StrEnum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    RUNNING = "running"
    AWAITING_RESOLUTION = "awaiting-resolution"
    APPLYING_COMPLETION = "applying-completion"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_streaming(self) -> bool:
        return self in {JobState.SUBMITTING, JobState.RUNNING}

    @property
    def is_terminal(self) -> bool:
        return self in {JobState.COMPLETE, JobState.ERROR}


@dataclass(slots=True, kw_only=True)
class MatchCandidate:
    """One catalog option offered for a local album or track.

    ``metadata`` carries whatever display fields the matcher sent (name,
    artists, images, ...). It is passed back untouched when the candidate is
    applied.
    """

    id: str
    selected: bool = False
    metadata: dict[str, Any] = field(default_factory=dict[str, Any])


@dataclass(slots=True, kw_only=True)
class InexactAlbumMatch:
    """A local record whose album match needs the user's choice."""

    record_id: str
    matches: list[MatchCandidate] = field(default_factory=list[MatchCandidate])

    @property
    def selected(self) -> MatchCandidate | None:
        return _first_selected(self.matches)


@dataclass(slots=True, kw_only=True)
class InexactTrackMatch:
    """A local track whose track match needs the user's choice."""

    record_id: str
    track_id: str
    options: list[MatchCandidate] = field(default_factory=list[MatchCandidate])

    @property
    def selected(self) -> MatchCandidate | None:
        return _first_selected(self.options)


def _first_selected(candidates: list[MatchCandidate]) -> MatchCandidate | None:
    return next((candidate for candidate in candidates if candidate.selected), None)


@dataclass(slots=True, frozen=True)
class MatchedAlbum:
    record_id: str
    album: MatchCandidate


@dataclass(slots=True, frozen=True)
class MatchedTrack:
    record_id: str
    track_id: str
    spotify_track_id: str


@dataclass(slots=True, frozen=True)
class SelectionResult:
    """Everything the apply job needs, derived from the current selections."""

    matched_albums: tuple[MatchedAlbum, ...] = ()
    matched_tracks: tuple[MatchedTrack, ...] = ()
    unmatched_albums: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class FullImportPayload:
    records: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class ApplySelectionsPayload:
    matched_albums: tuple[MatchedAlbum, ...] = ()
    matched_tracks: tuple[MatchedTrack, ...] = ()
    unmatched_albums: tuple[str, ...] = ()

    @classmethod
    def from_selection(cls, selection: SelectionResult) -> ApplySelectionsPayload:
        return cls(
            matched_albums=selection.matched_albums,
            matched_tracks=selection.matched_tracks,
            unmatched_albums=selection.unmatched_albums,
        )


type JobPayload = FullImportPayload | ApplySelectionsPayload


@dataclass(slots=True, kw_only=True)
class ImportJob:
    """One matching run against the catalog.

    Only :class:`~crateimport.domain.importing.state_machine.ImportStateMachine`
    mutates ``state``, ``progress`` and ``error``.
    """

    kind: JobKind
    payload: JobPayload
    state: JobState = JobState.IDLE
    progress: float = 0.0
    error: str | None = None

    def __post_init__(self) -> None:
        expected = (
            FullImportPayload if self.kind is JobKind.FULL_IMPORT else ApplySelectionsPayload
        )
        if not isinstance(self.payload, expected):
            raise TypeError(
                f"{self.kind} job requires {expected.__name__}, got {type(self.payload).__name__}"
            )

    @classmethod
    def full_import(cls, record_ids: list[str] | tuple[str, ...]) -> ImportJob:
        return cls(kind=JobKind.FULL_IMPORT, payload=FullImportPayload(records=tuple(record_ids)))

    @classmethod
    def apply_selections(cls, selection: SelectionResult) -> ImportJob:
        return cls(
            kind=JobKind.APPLY_SELECTIONS,
            payload=ApplySelectionsPayload.from_selection(selection),
        )
