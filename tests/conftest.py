from __future__ import annotations

import pytest

CRATE_ENV_VARS = ("CRATE_API_URL", "CRATE_SSE_URL", "CRATE_API_TOKEN")


@pytest.fixture(autouse=True)
def _isolated_crate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in CRATE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
