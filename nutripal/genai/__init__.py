# -*- coding: utf-8 -*-
"""Generative-AI access with API key rotation.

All production calls to Gemini go through a `RotationExecutor`; build one at
startup with `build_executor(settings)` and pass it to the flows.
"""

from __future__ import annotations

import httpx

from ..config import Settings
from .classifier import ErrorKind, ErrorSignal, classify, normalize_error
from .client import GeminiClient, gemini_client_factory
from .credentials import CredentialPool
from .errors import CredentialConfigError, GenerationError, NoCredentialsConfigured
from .rotation import Attempt, Outcome, RotationExecutor


def build_executor(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RotationExecutor[GeminiClient]:
    pool = CredentialPool.from_settings(settings)
    return RotationExecutor(pool, gemini_client_factory(settings, transport=transport))


__all__ = [
    "Attempt",
    "CredentialConfigError",
    "CredentialPool",
    "ErrorKind",
    "ErrorSignal",
    "GeminiClient",
    "GenerationError",
    "NoCredentialsConfigured",
    "Outcome",
    "RotationExecutor",
    "build_executor",
    "classify",
    "gemini_client_factory",
    "normalize_error",
]
