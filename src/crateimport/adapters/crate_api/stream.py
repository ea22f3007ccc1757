"""Server-sent event channel for Spotify import jobs."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from crateimport.adapters.http_resilience import ResilientClient
from crateimport.config.crate_api import get_crate_api_config
from crateimport.domain.importing import JobKind
from crateimport.domain.ports.importing import JobStreamError

from .client import error_message_from_response
from .translator import build_submission_form

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, AsyncIterable, AsyncIterator, Callable

    from crateimport.config.crate_api import CrateApiConfig
    from crateimport.config.http_resilience import ResilienceConfig
    from crateimport.domain.importing import ImportJob
    from crateimport.domain.ports.importing import JobStreamOpener

log = getLogger(__name__)

JOB_PATHS = {
    JobKind.FULL_IMPORT: "import_selected",
    JobKind.APPLY_SELECTIONS: "import_matched",
}


def job_stream_url(sse_url: str, kind: JobKind) -> str:
    return f"{sse_url.rstrip('/')}/{JOB_PATHS[kind]}"


async def iter_event_data(lines: AsyncIterable[str]) -> AsyncIterator[str]:
    """Yield the ``data`` of each server-sent event in ``lines``.

    Multi-line data fields are joined with ``\\n``; comments and the
    ``event``/``id``/``retry`` fields are ignored. A trailing event without
    the closing blank line is still delivered.
    """

    buffer: list[str] = []
    async for line in lines:
        if not line:
            if buffer:
                yield "\n".join(buffer)
                buffer = []
            continue
        if line.startswith(":"):
            continue
        name, _separator, value = line.partition(":")
        if name == "data":
            buffer.append(value.removeprefix(" "))
    if buffer:
        yield "\n".join(buffer)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class CrateJobStream:
    """Submit an import job and stream its messages back."""

    config: CrateApiConfig = field(default_factory=get_crate_api_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    async def __call__(self, job: ImportJob, *, token: str) -> AsyncGenerator[str, None]:
        url = job_stream_url(self.config.sse_url, job.kind)
        headers = {
            "Accept": "text/event-stream",
            "Authorization": f"Bearer {token}",
        }
        log.debug(f"Opening import stream {url}")
        try:
            async with (
                self.client_factory(self.config.stream_resilience) as client,
                client.stream(
                    "POST", url, data=build_submission_form(job), headers=headers
                ) as response,
            ):
                if response.is_error:
                    await response.aread()
                    message = error_message_from_response(response)
                    raise JobStreamError(message, status_code=response.status_code)
                async for data in iter_event_data(response.aiter_lines()):
                    yield data
        except httpx.HTTPError as exc:
            raise JobStreamError(f"{type(exc).__name__}: {exc}") from exc


if TYPE_CHECKING:
    _stream_check: JobStreamOpener = CrateJobStream()
