"""Domain port definitions for adapters."""

from __future__ import annotations

from .importing import CatalogRefresher, JobStreamError, JobStreamOpener, MessageDecoder

__all__ = [
    "CatalogRefresher",
    "JobStreamError",
    "JobStreamOpener",
    "MessageDecoder",
]
