# -*- coding: utf-8 -*-
"""GenAI: decide whether a failed attempt is worth retrying with another key.

The check is a textual/status heuristic, not a protocol signal. A missed
rate-limit only aborts the call early; it never burns extra keys.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

_RETRYABLE_STATUS = 429
_RETRYABLE_MARKERS = ("429", "quota", "rate limit")


class ErrorKind(str, Enum):
    retryable = "retryable"
    fatal = "fatal"


@dataclass(frozen=True)
class ErrorSignal:
    message: str
    status: Optional[int] = None


def _coerce_status(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def normalize_error(error: BaseException) -> ErrorSignal:
    """Reduce an arbitrary exception to message text plus an optional status."""
    message = str(error)
    if not message:
        attr = getattr(error, "message", None)
        if isinstance(attr, str):
            message = attr

    status: Optional[int] = None
    for name in ("status", "status_code", "code"):
        status = _coerce_status(getattr(error, name, None))
        if status is not None:
            break
    if status is None:
        response = getattr(error, "response", None)
        if response is not None:
            status = _coerce_status(getattr(response, "status_code", None))

    return ErrorSignal(message=message, status=status)


def classify_signal(signal: ErrorSignal) -> ErrorKind:
    if signal.status == _RETRYABLE_STATUS:
        return ErrorKind.retryable
    text = signal.message.lower()
    if any(marker in text for marker in _RETRYABLE_MARKERS):
        return ErrorKind.retryable
    return ErrorKind.fatal


def classify(error: BaseException) -> ErrorKind:
    # A deliberate abort must never look like a quota problem.
    if isinstance(error, asyncio.CancelledError):
        return ErrorKind.fatal
    return classify_signal(normalize_error(error))
