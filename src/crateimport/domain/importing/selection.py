"""Derive the apply-job payload from the current selections.

Nothing here is cached; call again after every toggle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .model import MatchedAlbum, MatchedTrack, SelectionResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .model import InexactAlbumMatch, InexactTrackMatch
    from .reconciliation import MatchReconciliation


def matched_albums(groups: Iterable[InexactAlbumMatch]) -> list[MatchedAlbum]:
    return [
        MatchedAlbum(record_id=group.record_id, album=selected)
        for group in groups
        if (selected := group.selected) is not None
    ]


def unmatched_albums(groups: Iterable[InexactAlbumMatch]) -> list[str]:
    return [group.record_id for group in groups if group.selected is None]


def matched_tracks(groups: Iterable[InexactTrackMatch]) -> list[MatchedTrack]:
    return [
        MatchedTrack(
            record_id=group.record_id,
            track_id=group.track_id,
            spotify_track_id=selected.id,
        )
        for group in groups
        if (selected := group.selected) is not None
    ]


def extract_selections(reconciliation: MatchReconciliation) -> SelectionResult:
    return SelectionResult(
        matched_albums=tuple(matched_albums(reconciliation.album_matches)),
        matched_tracks=tuple(matched_tracks(reconciliation.track_matches)),
        unmatched_albums=tuple(unmatched_albums(reconciliation.album_matches)),
    )
