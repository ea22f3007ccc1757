from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from urllib.parse import parse_qs

import httpx
import pytest

from crateimport.adapters.crate_api import CrateApiClient, CrateAPIError
from crateimport.domain.importing import TRANSPORT_ERROR_MESSAGE, MatchedTrack
from tests.helpers.crate_http import make_client_factory

if TYPE_CHECKING:
    from crateimport.config import CrateApiConfig

RECORDS = [
    {
        "_id": "R1",
        "title": "Blue Train",
        "artists": "John Coltrane",
        "year": 1957,
        "spotifyID": "album-1",
        "tracks": [
            {
                "_id": "T1",
                "title": "Blue Train",
                "spotifyID": "track-1",
                "bpm": 136.0,
                "audioFeatures": {
                    "acousticness": 0.5,
                    "danceability": 0.4,
                    "duration_ms": 643000,
                    "energy": 0.5,
                    "instrumentalness": 0.8,
                    "key": 3,
                    "liveness": 0.1,
                    "loudness": -10.2,
                    "mode": 0,
                    "speechiness": 0.04,
                    "tempo": 136.0,
                    "time_signature": 4,
                    "valence": 0.6,
                },
            },
            {"_id": "T2", "title": "Moment's Notice"},
        ],
    },
    {"_id": "R2", "title": "Giant Steps"},
]


def test_fetch_records_parses_catalog(crate_config: CrateApiConfig) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=RECORDS)

    client = CrateApiClient(config=crate_config, client_factory=make_client_factory(handler))

    records = asyncio.run(client.fetch_records(token="secret"))

    assert [record.id for record in records] == ["R1", "R2"]
    first = records[0]
    assert first.spotify_id == "album-1"
    assert [track.id for track in first.tracks] == ["T1", "T2"]
    assert first.tracks[0].audio_features is not None
    assert first.tracks[0].audio_features.tempo == 136.0
    assert first.tracks[1].spotify_id is None
    assert records[1].tracks == []

    (request,) = seen
    assert request.method == "GET"
    assert str(request.url) == "http://crate.test/api/records"
    assert request.headers["Authorization"] == "Bearer secret"


def test_fetch_records_rejects_unexpected_payload(crate_config: CrateApiConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"records": "nope"})

    client = CrateApiClient(config=crate_config, client_factory=make_client_factory(handler))

    with pytest.raises(CrateAPIError):
        asyncio.run(client.fetch_records(token="secret"))


def test_error_status_carries_server_message(crate_config: CrateApiConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"message": "Forbidden"})

    client = CrateApiClient(config=crate_config, client_factory=make_client_factory(handler))

    with pytest.raises(CrateAPIError) as excinfo:
        asyncio.run(client.fetch_records(token="secret"))

    assert str(excinfo.value) == "Forbidden"
    assert excinfo.value.status_code == 403


def test_error_status_without_body_uses_generic_message(crate_config: CrateApiConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="<html>oops</html>")

    client = CrateApiClient(config=crate_config, client_factory=make_client_factory(handler))

    with pytest.raises(CrateAPIError) as excinfo:
        asyncio.run(client.fetch_records(token="secret"))

    assert str(excinfo.value) == "Unexpected error"


def test_network_failure_is_reported_generically(crate_config: CrateApiConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = CrateApiClient(config=crate_config, client_factory=make_client_factory(handler))

    with pytest.raises(CrateAPIError) as excinfo:
        asyncio.run(client.fetch_records(token="secret"))

    assert str(excinfo.value) == TRANSPORT_ERROR_MESSAGE
    assert excinfo.value.status_code is None


def test_fetch_track_features_posts_manual_match(crate_config: CrateApiConfig) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    client = CrateApiClient(config=crate_config, client_factory=make_client_factory(handler))
    track = MatchedTrack(record_id="R1", track_id="T2", spotify_track_id="track-2")

    asyncio.run(client.fetch_track_features(track, token="secret"))

    (request,) = seen
    assert request.method == "POST"
    assert str(request.url) == "http://crate.test/api/spotify/track_features"
    assert parse_qs(request.content.decode()) == {
        "recordID": ["R1"],
        "trackID": ["T2"],
        "spotifyTrackID": ["track-2"],
    }
