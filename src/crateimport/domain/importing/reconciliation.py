"""Single-choice selection over inexact match groups.

Each group behaves like a set of radio buttons that can also be cleared:
choosing an unselected candidate selects only that candidate, choosing the
selected candidate again leaves the group with no selection. A group with
no selection is applied as "unmatched".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger

from .model import InexactAlbumMatch, InexactTrackMatch, MatchCandidate

log = getLogger(__name__)


@dataclass(slots=True)
class MatchReconciliation:
    """Toggle operations over match groups owned by the state machine.

    The lists are held by reference; the state machine replaces their
    contents in place when a new terminal result arrives.
    """

    album_matches: list[InexactAlbumMatch] = field(default_factory=list[InexactAlbumMatch])
    track_matches: list[InexactTrackMatch] = field(default_factory=list[InexactTrackMatch])

    def toggle_album_option(self, record_id: str, option_id: str) -> None:
        group = next((m for m in self.album_matches if m.record_id == record_id), None)
        if group is None:
            log.debug(f"No album match group for record {record_id}")
            return
        _toggle(group.matches, option_id)

    def toggle_track_option(self, track_id: str, option_id: str) -> None:
        group = next((m for m in self.track_matches if m.track_id == track_id), None)
        if group is None:
            log.debug(f"No track match group for track {track_id}")
            return
        _toggle(group.options, option_id)

    def replace(
        self,
        *,
        album_matches: list[InexactAlbumMatch] | tuple[InexactAlbumMatch, ...] = (),
        track_matches: list[InexactTrackMatch] | tuple[InexactTrackMatch, ...] = (),
    ) -> None:
        self.album_matches[:] = album_matches
        self.track_matches[:] = track_matches

    def clear(self) -> None:
        self.replace()

    @property
    def is_empty(self) -> bool:
        return not self.album_matches and not self.track_matches


def _toggle(candidates: list[MatchCandidate], option_id: str) -> None:
    target = next((c for c in candidates if c.id == option_id), None)
    if target is None:
        return
    was_selected = target.selected
    for candidate in candidates:
        candidate.selected = False
    if not was_selected:
        target.selected = True
