"""Translate between crate backend payloads and domain import types."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from crateimport.domain.importing import (
    ApplySelectionsPayload,
    FullImportPayload,
    InexactAlbumMatch,
    InexactTrackMatch,
    MatchCandidate,
    TerminalResultEvent,
)

if TYPE_CHECKING:
    from crateimport.domain.importing import ImportJob, MatchedAlbum, MatchedTrack

    from .schema import (
        CandidatePayload,
        InexactAlbumMatchPayload,
        InexactTrackMatchPayload,
        TerminalResultPayload,
    )


def translate_candidate(payload: CandidatePayload) -> MatchCandidate:
    return MatchCandidate(
        id=payload.id,
        selected=payload.selected,
        metadata=dict(payload.model_extra or {}),
    )


def translate_album_match(payload: InexactAlbumMatchPayload) -> InexactAlbumMatch:
    return InexactAlbumMatch(
        record_id=payload.record_id,
        matches=[translate_candidate(candidate) for candidate in payload.matches],
    )


def translate_track_match(payload: InexactTrackMatchPayload) -> InexactTrackMatch:
    return InexactTrackMatch(
        record_id=payload.record_id,
        track_id=payload.track_id,
        options=[translate_candidate(candidate) for candidate in payload.options],
    )


def translate_terminal_result(payload: TerminalResultPayload) -> TerminalResultEvent:
    return TerminalResultEvent(
        album_matches=tuple(translate_album_match(m) for m in payload.inexact_album_matches),
        track_matches=tuple(translate_track_match(m) for m in payload.inexact_track_matches),
    )


def candidate_to_payload(candidate: MatchCandidate) -> dict[str, object]:
    return {**candidate.metadata, "id": candidate.id, "selected": candidate.selected}


def matched_album_to_payload(matched: MatchedAlbum) -> dict[str, object]:
    return {"recordID": matched.record_id, "album": candidate_to_payload(matched.album)}


def matched_track_to_payload(matched: MatchedTrack) -> dict[str, object]:
    return {
        "recordID": matched.record_id,
        "trackID": matched.track_id,
        "spotifyTrackID": matched.spotify_track_id,
    }


def build_submission_form(job: ImportJob) -> dict[str, str]:
    """Form fields for a job submission; every value is a JSON string."""

    payload = job.payload
    if isinstance(payload, FullImportPayload):
        return {"records": json.dumps(list(payload.records))}
    if isinstance(payload, ApplySelectionsPayload):
        return {
            "matchedAlbums": json.dumps(
                [matched_album_to_payload(album) for album in payload.matched_albums]
            ),
            "matchedTracks": json.dumps(
                [matched_track_to_payload(track) for track in payload.matched_tracks]
            ),
            "unmatchedAlbums": json.dumps(list(payload.unmatched_albums)),
        }
    raise TypeError(f"Unsupported job payload: {type(payload).__name__}")  # pragma: no cover
