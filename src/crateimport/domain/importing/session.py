"""Drive import jobs from a message stream through the state machine."""

from __future__ import annotations

from contextlib import aclosing
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from crateimport.domain.ports.importing import JobStreamError

from .model import ImportJob, JobState
from .state_machine import ImportStateMachine

if TYPE_CHECKING:
    from collections.abc import Sequence

    from crateimport.domain.ports.importing import (
        CatalogRefresher,
        JobStreamOpener,
        MessageDecoder,
    )

log = getLogger(__name__)


@dataclass(slots=True)
class ImportSession:
    """One caller's import workflow: a full import, then zero or more apply jobs.

    Messages are handled strictly in arrival order on the running event loop.
    Reading stops as soon as the job leaves ``submitting``/``running``; the
    catalog refresher then runs at most once for that job.
    """

    open_stream: JobStreamOpener
    decode: MessageDecoder
    refresh_catalog: CatalogRefresher
    token: str
    machine: ImportStateMachine = field(default_factory=ImportStateMachine)

    async def import_records(self, record_ids: Sequence[str]) -> ImportStateMachine:
        if not record_ids:
            log.info("No records selected; nothing to import")
            return self.machine
        return await self.run(ImportJob.full_import(tuple(record_ids)))

    async def apply_selections(self) -> ImportStateMachine:
        return await self.run(ImportJob.apply_selections(self.machine.selections()))

    async def run(self, job: ImportJob) -> ImportStateMachine:
        self.machine.submit(job)
        try:
            await self._consume(job)
        except (JobStreamError, TimeoutError) as exc:
            self.machine.fail_transport(str(exc))
            return self.machine

        if self.machine.state.is_streaming:
            log.warning("Import stream closed before the job finished")
            self.machine.fail_transport("stream closed early")
        elif self.machine.state is JobState.APPLYING_COMPLETION:
            try:
                await self.refresh_catalog(token=self.token)
            except Exception as exc:
                self.machine.fail_completion(str(exc))
                raise
            self.machine.mark_complete()
        return self.machine

    async def _consume(self, job: ImportJob) -> None:
        async with aclosing(self.open_stream(job, token=self.token)) as messages:
            async for message in messages:
                state = self.machine.handle(self.decode(message))
                if not state.is_streaming:
                    return
