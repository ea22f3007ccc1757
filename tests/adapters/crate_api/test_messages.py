from __future__ import annotations

import pytest

from crateimport.adapters.crate_api import decode_message
from crateimport.domain.importing import (
    UNEXPECTED_ERROR_MESSAGE,
    ErrorEvent,
    ErrorKind,
    ProgressEvent,
    TerminalResultEvent,
)
from tests.helpers.import_jobs import EMPTY_RESULT, result_message


@pytest.mark.parametrize(
    ("message", "fraction"),
    [("0", 0.0), ("0.3", 0.3), ("0.999", 0.999), ("1", 1.0), (" 0.5\n", 0.5)],
)
def test_decodes_progress(message: str, fraction: float) -> None:
    assert decode_message(message) == ProgressEvent(fraction)


def test_error_prefix_is_stripped() -> None:
    assert decode_message("Error: catalog unavailable") == ErrorEvent("catalog unavailable")


def test_error_without_prefix_keeps_message() -> None:
    event = decode_message("Error")

    assert isinstance(event, ErrorEvent)
    assert event.kind is ErrorKind.REPORTED
    assert event.message == "Error"


def test_blank_error_gets_generic_message() -> None:
    event = decode_message("Error: ")

    assert isinstance(event, ErrorEvent)
    assert event.message == UNEXPECTED_ERROR_MESSAGE


def test_error_takes_precedence_over_other_markers() -> None:
    event = decode_message('Error: json:{"inexactAlbumMatches": []}')

    assert isinstance(event, ErrorEvent)
    assert event.message == 'json:{"inexactAlbumMatches": []}'


def test_empty_terminal_result() -> None:
    event = decode_message(EMPTY_RESULT)

    assert isinstance(event, TerminalResultEvent)
    assert event.is_empty


def test_terminal_result_with_matches() -> None:
    message = result_message(
        albums=[
            {
                "recordID": "R1",
                "matches": [
                    {"id": "A", "name": "Kind of Blue", "artists": [{"name": "Miles Davis"}]},
                    {"id": "B", "selected": True},
                ],
            }
        ],
        tracks=[{"recordID": "R1", "trackID": "T1", "options": [{"id": "X"}]}],
    )

    event = decode_message(message)

    assert isinstance(event, TerminalResultEvent)
    (album,) = event.album_matches
    assert album.record_id == "R1"
    assert album.matches[0].metadata == {
        "name": "Kind of Blue",
        "artists": [{"name": "Miles Davis"}],
    }
    assert album.selected is album.matches[1]
    (track,) = event.track_matches
    assert (track.record_id, track.track_id) == ("R1", "T1")
    assert [option.id for option in track.options] == ["X"]


def test_null_match_lists_are_empty() -> None:
    event = decode_message('json:{"inexactAlbumMatches":null,"inexactTrackMatches":null}')

    assert isinstance(event, TerminalResultEvent)
    assert event.is_empty


def test_missing_match_lists_are_empty() -> None:
    event = decode_message("json:{}")

    assert isinstance(event, TerminalResultEvent)
    assert event.is_empty


@pytest.mark.parametrize(
    "message",
    [
        "json",
        "json:not json",
        'json:{"inexactAlbumMatches":[{"matches":[]}]}',
        "halfway",
        "",
        "1.5",
        "-0.1",
        "nan",
    ],
)
def test_malformed_messages_become_protocol_errors(message: str) -> None:
    event = decode_message(message)

    assert isinstance(event, ErrorEvent)
    assert event.kind is ErrorKind.PROTOCOL


def test_protocol_error_preview_is_truncated() -> None:
    event = decode_message("x" * 200)

    assert isinstance(event, ErrorEvent)
    assert "..." in event.message
    assert len(event.message) < 100
