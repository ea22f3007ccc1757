"""HTTP client for the crate backend's REST API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import TypeAdapter, ValidationError

from crateimport.adapters.http_resilience import ResilientClient
from crateimport.config.crate_api import get_crate_api_config
from crateimport.domain.importing import TRANSPORT_ERROR_MESSAGE, UNEXPECTED_ERROR_MESSAGE

from .schema import ErrorResponse, RecordPayload
from .translator import matched_track_to_payload

if TYPE_CHECKING:
    from collections.abc import Callable

    from crateimport.config.crate_api import CrateApiConfig
    from crateimport.config.http_resilience import ResilienceConfig
    from crateimport.domain.importing import MatchedTrack
    from crateimport.domain.ports.importing import CatalogRefresher

log = getLogger(__name__)

_RECORD_LIST = TypeAdapter(list[RecordPayload])


class CrateAPIError(RuntimeError):
    """Raised when the crate backend rejects a request or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def error_message_from_response(response: httpx.Response) -> str:
    """Return the backend's ``{"message": ...}`` text, or a generic message."""

    try:
        payload = ErrorResponse.model_validate_json(response.content)
    except ValidationError:
        return UNEXPECTED_ERROR_MESSAGE
    return payload.message or UNEXPECTED_ERROR_MESSAGE


class CrateApiClient:
    """Catalog re-fetch and Spotify helpers used around import jobs."""

    def __init__(
        self,
        *,
        config: CrateApiConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config or get_crate_api_config()
        self._resilience = self._config.api_resilience
        self._client_factory = client_factory or ResilientClient

    def _url(self, path: str) -> str:
        return f"{self._config.api_url.rstrip('/')}/{path}"

    async def fetch_records(self, *, token: str) -> list[RecordPayload]:
        """Fetch the user's records, refreshed with any imported Spotify data."""

        response = await self._request("GET", "records", token=token)
        try:
            records = _RECORD_LIST.validate_json(response.content)
        except ValidationError as exc:
            raise CrateAPIError("Unexpected records payload") from exc
        log.info(f"Fetched {len(records)} records")
        return records

    async def fetch_track_features(self, track: MatchedTrack, *, token: str) -> None:
        """Ask the backend to store audio features for a hand-matched track."""

        await self._request(
            "POST",
            "spotify/track_features",
            token=token,
            data={key: str(value) for key, value in matched_track_to_payload(track).items()},
        )
        log.info(f"Stored audio features for track {track.track_id}")

    async def _request(
        self,
        method: str,
        path: str,
        *,
        token: str,
        data: dict[str, str] | None = None,
    ) -> httpx.Response:
        headers = {"Authorization": f"Bearer {token}"}
        try:
            async with self._client_factory(self._resilience) as client:
                response = await client.request(method, self._url(path), data=data, headers=headers)
        except httpx.HTTPError as exc:
            log.error(f"Crate API {method} {path} failed: {exc}")
            raise CrateAPIError(TRANSPORT_ERROR_MESSAGE) from exc

        if response.is_error:
            message = error_message_from_response(response)
            log.error(f"Crate API {method} {path} returned {response.status_code}: {message}")
            raise CrateAPIError(message, status_code=response.status_code)
        return response


if TYPE_CHECKING:
    _refresher_check: CatalogRefresher = CrateApiClient().fetch_records
