from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING
from urllib.parse import parse_qs

import httpx
import pytest

from crateimport.adapters.crate_api import CrateJobStream, iter_event_data, job_stream_url
from crateimport.domain.importing import ImportJob, JobKind, SelectionResult
from crateimport.domain.ports.importing import JobStreamError
from tests.helpers.crate_http import make_client_factory, sse_body
from tests.helpers.import_jobs import EMPTY_RESULT

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from crateimport.config import CrateApiConfig


async def _lines(*lines: str) -> AsyncIterator[str]:
    for line in lines:
        yield line


async def _collect(stream: CrateJobStream, job: ImportJob, token: str = "secret") -> list[str]:
    return [message async for message in stream(job, token=token)]


def _parse_events(*lines: str) -> list[str]:
    async def run() -> list[str]:
        return [data async for data in iter_event_data(_lines(*lines))]

    return asyncio.run(run())


def test_job_stream_url_per_kind() -> None:
    base = "http://crate.test/api/spotify_sse/"

    assert job_stream_url(base, JobKind.FULL_IMPORT) == (
        "http://crate.test/api/spotify_sse/import_selected"
    )
    assert job_stream_url(base.rstrip("/"), JobKind.APPLY_SELECTIONS) == (
        "http://crate.test/api/spotify_sse/import_matched"
    )


def test_iter_event_data_splits_on_blank_lines() -> None:
    assert _parse_events("data: 0.1", "", "data: 0.2", "") == ["0.1", "0.2"]


def test_iter_event_data_joins_multiline_data() -> None:
    assert _parse_events("data: json:{", "data: }", "") == ["json:{\n}"]


def test_iter_event_data_skips_comments_and_other_fields() -> None:
    events = _parse_events(": keep-alive", "", "event: progress", "id: 7", "data:0.5", "")

    assert events == ["0.5"]


def test_iter_event_data_flushes_trailing_event() -> None:
    assert _parse_events("data: 1") == ["1"]


def test_stream_posts_form_and_yields_messages(crate_config: CrateApiConfig) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            headers={"Content-Type": "text/event-stream"},
            content=sse_body("0.3", "0.6", EMPTY_RESULT, "1"),
        )

    stream = CrateJobStream(config=crate_config, client_factory=make_client_factory(handler))

    messages = asyncio.run(_collect(stream, ImportJob.full_import(["R1", "R2"])))

    assert messages == ["0.3", "0.6", EMPTY_RESULT, "1"]
    (request,) = seen
    assert request.method == "POST"
    assert str(request.url) == "http://crate.test/api/spotify_sse/import_selected"
    assert request.headers["Authorization"] == "Bearer secret"
    assert request.headers["Accept"] == "text/event-stream"
    form = parse_qs(request.content.decode())
    assert json.loads(form["records"][0]) == ["R1", "R2"]


def test_apply_job_uses_matched_endpoint(crate_config: CrateApiConfig) -> None:
    urls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        urls.append(str(request.url))
        return httpx.Response(200, content=sse_body("1"))

    stream = CrateJobStream(config=crate_config, client_factory=make_client_factory(handler))

    messages = asyncio.run(_collect(stream, ImportJob.apply_selections(SelectionResult())))

    assert messages == ["1"]
    assert urls == ["http://crate.test/api/spotify_sse/import_matched"]


def test_http_error_status_raises_with_server_message(crate_config: CrateApiConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "Invalid token"})

    stream = CrateJobStream(config=crate_config, client_factory=make_client_factory(handler))

    with pytest.raises(JobStreamError) as excinfo:
        asyncio.run(_collect(stream, ImportJob.full_import(["R1"])))

    assert str(excinfo.value) == "Invalid token"
    assert excinfo.value.status_code == 401


def test_connection_failure_raises_stream_error(crate_config: CrateApiConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    stream = CrateJobStream(config=crate_config, client_factory=make_client_factory(handler))

    with pytest.raises(JobStreamError) as excinfo:
        asyncio.run(_collect(stream, ImportJob.full_import(["R1"])))

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)
