"""Crate API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import env_or_default, require_env_var
from .http_resilience import NO_RETRY, RateLimit, ResilienceConfig

DEFAULT_CRATE_API_URL = "http://localhost:5000/api"
DEFAULT_CRATE_SSE_URL = "http://localhost:5001/api/spotify_sse/"
CRATE_API_TIMEOUT_SECONDS = 10.0

DEFAULT_HEADERS = {"Accept": "application/json"}


def default_api_resilience(base_url: str = DEFAULT_CRATE_API_URL) -> ResilienceConfig:
    return ResilienceConfig(
        name="crate-api",
        base_url=base_url,
        timeout_seconds=CRATE_API_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        default_headers=DEFAULT_HEADERS,
    )


def default_stream_resilience(base_url: str = DEFAULT_CRATE_SSE_URL) -> ResilienceConfig:
    # Matching jobs can run for minutes between messages.
    return ResilienceConfig(
        name="crate-sse",
        base_url=base_url,
        timeout_seconds=None,
        retry=NO_RETRY,
        default_headers=DEFAULT_HEADERS,
    )


@dataclass(frozen=True)
class CrateApiConfig:
    """Endpoints of the crate backend and its Spotify import stream."""

    api_url: str = DEFAULT_CRATE_API_URL
    sse_url: str = DEFAULT_CRATE_SSE_URL
    api_resilience: ResilienceConfig = field(default_factory=default_api_resilience)
    stream_resilience: ResilienceConfig = field(default_factory=default_stream_resilience)


def get_crate_api_config() -> CrateApiConfig:
    api_url = env_or_default("CRATE_API_URL", DEFAULT_CRATE_API_URL)
    sse_url = env_or_default("CRATE_SSE_URL", DEFAULT_CRATE_SSE_URL)
    return CrateApiConfig(
        api_url=api_url,
        sse_url=sse_url,
        api_resilience=default_api_resilience(api_url),
        stream_resilience=default_stream_resilience(sse_url),
    )


def get_crate_api_token() -> str:
    return require_env_var("CRATE_API_TOKEN")
