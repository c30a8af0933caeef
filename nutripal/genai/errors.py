# -*- coding: utf-8 -*-
"""GenAI: exception types."""

from __future__ import annotations


class CredentialConfigError(ValueError):
    """A configured API key is malformed (e.g. empty)."""


class NoCredentialsConfigured(RuntimeError):
    """The credential pool is empty, so no attempt can be made."""

    def __init__(self, message: str = "No Gemini API keys configured") -> None:
        super().__init__(message)


class GenerationError(RuntimeError):
    """The generation API rejected a request or returned an unusable answer."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is not None:
            return f"[{self.status}] {self.message}"
        return self.message
