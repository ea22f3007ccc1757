"""Shared fixtures for crate backend adapter tests."""

from __future__ import annotations

import pytest

from crateimport.config import CrateApiConfig
from tests.helpers.crate_http import API_URL, SSE_URL


@pytest.fixture
def crate_config() -> CrateApiConfig:
    return CrateApiConfig(api_url=API_URL, sse_url=SSE_URL)
