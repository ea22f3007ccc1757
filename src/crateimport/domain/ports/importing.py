"""Ports the import session depends on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from crateimport.domain.importing.events import StreamEvent
    from crateimport.domain.importing.model import ImportJob


class JobStreamError(RuntimeError):
    """Raised by stream adapters when the job channel cannot be opened or read."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@runtime_checkable
class JobStreamOpener(Protocol):
    """Submit ``job`` and yield the raw text of each message, in arrival order."""

    def __call__(self, job: ImportJob, *, token: str) -> AsyncGenerator[str, None]: ...


@runtime_checkable
class MessageDecoder(Protocol):
    """Classify one raw stream message."""

    def __call__(self, message: str) -> StreamEvent: ...


@runtime_checkable
class CatalogRefresher(Protocol):
    """Re-fetch the caller's canonical records once a job has been applied."""

    async def __call__(self, *, token: str) -> object: ...


__all__ = ["CatalogRefresher", "JobStreamError", "JobStreamOpener", "MessageDecoder"]
