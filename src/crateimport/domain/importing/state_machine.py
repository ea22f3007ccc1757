"""Lifecycle of one import job, driven by decoded stream events.

::

    idle -> submitting -> running -> awaiting-resolution
                                  -> applying-completion -> complete
    submitting | running -> error

``complete``, ``error`` and ``awaiting-resolution`` accept a new submission,
which discards the previous job and its match groups. So does
``applying-completion`` once its catalog refresh has failed.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from .events import (
    TRANSPORT_ERROR_MESSAGE,
    ErrorEvent,
    ErrorKind,
    ProgressEvent,
    TerminalResultEvent,
)
from .model import ImportJob, JobKind, JobState
from .reconciliation import MatchReconciliation
from .selection import extract_selections

if TYPE_CHECKING:
    from .events import StreamEvent
    from .model import InexactAlbumMatch, InexactTrackMatch, SelectionResult

log = getLogger(__name__)

_SUBMITTABLE_STATES = frozenset(
    {JobState.IDLE, JobState.COMPLETE, JobState.ERROR, JobState.AWAITING_RESOLUTION}
)


class ImportSignal(StrEnum):
    """Side effects the caller's view must perform, emitted in order."""

    SELECTION_CLEARED = "selection-cleared"
    PROGRESS_CLOSED = "progress-closed"
    MATCHES_READY = "matches-ready"
    COMPLETION_REQUESTED = "completion-requested"
    COMPLETED = "completed"
    FAILED = "failed"


type SignalListener = Callable[[ImportSignal], None]


class JobInProgressError(RuntimeError):
    """Raised when a job is submitted while another one is still active."""


class InvalidTransitionError(RuntimeError):
    """Raised when the caller requests a transition the current state forbids."""


def _ignore_signal(_signal: ImportSignal) -> None:
    return None


@dataclass(slots=True)
class ImportStateMachine:
    listener: SignalListener = field(default=_ignore_signal)
    reconciliation: MatchReconciliation = field(default_factory=MatchReconciliation)
    _job: ImportJob | None = field(default=None, init=False)
    _progress_seen: bool = field(default=False, init=False)
    _completion_requested: bool = field(default=False, init=False)
    _completion_failed: bool = field(default=False, init=False)

    @property
    def job(self) -> ImportJob | None:
        return self._job

    @property
    def state(self) -> JobState:
        return JobState.IDLE if self._job is None else self._job.state

    @property
    def progress(self) -> float:
        return 0.0 if self._job is None else self._job.progress

    @property
    def error(self) -> str | None:
        return None if self._job is None else self._job.error

    @property
    def completion_failed(self) -> bool:
        return self._completion_failed

    @property
    def album_matches(self) -> list[InexactAlbumMatch]:
        return self.reconciliation.album_matches

    @property
    def track_matches(self) -> list[InexactTrackMatch]:
        return self.reconciliation.track_matches

    def selections(self) -> SelectionResult:
        return extract_selections(self.reconciliation)

    def submit(self, job: ImportJob) -> None:
        if self.state not in _SUBMITTABLE_STATES and not self._completion_failed:
            raise JobInProgressError(f"Cannot submit a {job.kind} job while {self.state}")

        self.reconciliation.clear()
        self._progress_seen = False
        self._completion_requested = False
        self._completion_failed = False
        job.progress = 0.0
        job.error = None
        self._job = job
        self._transition(job, JobState.SUBMITTING)
        log.info(f"Submitted {job.kind} job")

    def handle(self, event: StreamEvent) -> JobState:
        """Apply one decoded stream event and return the resulting state."""

        job = self._job
        if job is None:
            log.warning(f"Ignoring {type(event).__name__} with no active job")
            return JobState.IDLE

        if isinstance(event, ErrorEvent):
            self._on_error(job, event)
        elif isinstance(event, TerminalResultEvent):
            self._on_terminal_result(job, event)
        else:
            self._on_progress(job, event)
        return job.state

    def fail_transport(self, detail: str | None = None) -> None:
        """Record a dropped or unreadable connection as a job error."""

        if detail:
            log.error(f"Import stream failed: {detail}")
        if self._job is not None:
            self._on_error(self._job, ErrorEvent(TRANSPORT_ERROR_MESSAGE, ErrorKind.TRANSPORT))

    def mark_complete(self) -> None:
        """Finish a job once the catalog has been re-fetched."""

        job = self._job
        if job is None or job.state is not JobState.APPLYING_COMPLETION:
            raise InvalidTransitionError(f"Cannot complete a job while {self.state}")
        self._transition(job, JobState.COMPLETE)
        self.listener(ImportSignal.COMPLETED)
        log.info(f"Finished {job.kind} job")

    def fail_completion(self, detail: str) -> None:
        """Record a failed catalog refresh so the job can be resubmitted.

        The job stays in ``applying-completion``; ``mark_complete`` is still
        allowed if the caller retries the refresh itself.
        """

        job = self._job
        if job is None or job.state is not JobState.APPLYING_COMPLETION:
            raise InvalidTransitionError(f"No completion to fail while {self.state}")
        log.error(f"Catalog refresh after {job.kind} job failed: {detail}")
        self._completion_failed = True

    def _on_progress(self, job: ImportJob, event: ProgressEvent) -> None:
        if not job.state.is_streaming:
            log.debug(f"Ignoring progress {event.fraction} while {job.state}")
            return

        self._progress_seen = True
        job.progress = event.fraction
        self._transition(job, JobState.RUNNING)
        # A full import finishes at its terminal result instead.
        if event.fraction == 1.0 and job.kind is JobKind.APPLY_SELECTIONS:
            self._request_completion(job)

    def _on_terminal_result(self, job: ImportJob, event: TerminalResultEvent) -> None:
        if not job.state.is_streaming:
            log.warning(f"Ignoring terminal result while {job.state}")
            return
        if not self._progress_seen:
            log.warning("Terminal result arrived before any progress; treating as protocol error")
            self._on_error(
                job,
                ErrorEvent("Received a result before any progress", ErrorKind.PROTOCOL),
            )
            return

        job.progress = 1.0
        self.listener(ImportSignal.SELECTION_CLEARED)
        # The progress view must be gone before match groups become visible.
        self.listener(ImportSignal.PROGRESS_CLOSED)
        self.reconciliation.replace(
            album_matches=event.album_matches,
            track_matches=event.track_matches,
        )

        if self.reconciliation.is_empty:
            self._request_completion(job)
            return

        log.info(
            f"{len(event.album_matches)} album and {len(event.track_matches)} track "
            "matches need resolution"
        )
        self._transition(job, JobState.AWAITING_RESOLUTION)
        self.listener(ImportSignal.MATCHES_READY)

    def _on_error(self, job: ImportJob, event: ErrorEvent) -> None:
        if not job.state.is_streaming:
            log.warning(f"Ignoring {event.kind} error while {job.state}: {event.message}")
            return

        if event.kind is ErrorKind.PROTOCOL:
            log.warning(f"Protocol error in {job.kind} job: {event.message}")
        else:
            log.error(f"{job.kind} job failed ({event.kind}): {event.message}")
        job.error = event.message
        self._transition(job, JobState.ERROR)
        self.listener(ImportSignal.FAILED)

    def _request_completion(self, job: ImportJob) -> None:
        if self._completion_requested:
            return
        self._completion_requested = True
        self._transition(job, JobState.APPLYING_COMPLETION)
        self.listener(ImportSignal.COMPLETION_REQUESTED)

    def _transition(self, job: ImportJob, state: JobState) -> None:
        if job.state is not state:
            log.debug(f"{job.kind} job: {job.state} -> {state}")
        job.state = state
