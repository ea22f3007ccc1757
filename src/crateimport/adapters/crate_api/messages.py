"""Classify raw import-stream messages into domain events.

The backend sends one text message per event:

* ``Error...`` - the matcher failed; an optional ``"Error: "`` prefix is dropped.
* ``json:{...}`` - the terminal result with the inexact album/track matches.
* anything else - progress as a decimal fraction in ``[0, 1]``.

Malformed messages are returned as protocol :class:`ErrorEvent` values,
never raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError

from crateimport.domain.importing import (
    ErrorEvent,
    ErrorKind,
    ProgressEvent,
    StreamEvent,
)

from .schema import TerminalResultPayload
from .translator import translate_terminal_result

ERROR_MARKER = "Error"
ERROR_PREFIX = "Error: "
RESULT_MARKER = "json"

_PREVIEW_LENGTH = 40


def decode_message(message: str) -> StreamEvent:
    if message.startswith(ERROR_MARKER):
        return ErrorEvent(message.removeprefix(ERROR_PREFIX))
    if message.startswith(RESULT_MARKER):
        return _decode_terminal_result(message)
    return _decode_progress(message)


def _decode_terminal_result(message: str) -> StreamEvent:
    _marker, separator, data = message.partition(":")
    if not separator:
        return _protocol_error("Result message has no payload", message)
    try:
        payload = TerminalResultPayload.model_validate_json(data)
    except ValidationError as exc:
        return _protocol_error(f"Invalid result payload ({exc.error_count()} errors)", message)
    return translate_terminal_result(payload)


def _decode_progress(message: str) -> StreamEvent:
    try:
        fraction = float(message.strip())
    except ValueError:
        return _protocol_error("Malformed progress message", message)
    if not 0.0 <= fraction <= 1.0:
        return _protocol_error("Progress out of range", message)
    return ProgressEvent(fraction)


def _protocol_error(reason: str, message: str) -> ErrorEvent:
    preview = message if len(message) <= _PREVIEW_LENGTH else message[:_PREVIEW_LENGTH] + "..."
    return ErrorEvent(f"{reason}: {preview!r}", ErrorKind.PROTOCOL)


if TYPE_CHECKING:
    from crateimport.domain.ports.importing import MessageDecoder

    _decoder_check: MessageDecoder = decode_message
