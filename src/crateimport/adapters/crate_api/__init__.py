"""Public interface for the crate backend adapter."""

from __future__ import annotations

from .client import CrateApiClient, CrateAPIError, error_message_from_response
from .messages import decode_message
from .schema import (
    CandidatePayload,
    ErrorResponse,
    RecordPayload,
    TerminalResultPayload,
    TrackPayload,
)
from .stream import CrateJobStream, iter_event_data, job_stream_url
from .translator import build_submission_form, translate_terminal_result

__all__ = [
    "CandidatePayload",
    "CrateAPIError",
    "CrateApiClient",
    "CrateJobStream",
    "ErrorResponse",
    "RecordPayload",
    "TerminalResultPayload",
    "TrackPayload",
    "build_submission_form",
    "decode_message",
    "error_message_from_response",
    "iter_event_data",
    "job_stream_url",
    "translate_terminal_result",
]
