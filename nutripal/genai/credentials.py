# -*- coding: utf-8 -*-
"""GenAI: fixed, ordered pool of API keys."""

from __future__ import annotations

from typing import Iterable, Iterator, Tuple

from .errors import CredentialConfigError


def mask(credential: str) -> str:
    """Render a key in a form that is safe to log: at most its last 4 characters."""
    if len(credential) < 16:
        return "***"
    return f"…{credential[-4:]}"


class CredentialPool:
    """Ordered, read-only sequence of credentials.

    Position in the pool is the credential's identity and defines the order in
    which keys are tried. The pool is built once at startup and shared by all
    concurrent callers without locking, since nothing mutates it afterwards.
    """

    __slots__ = ("_credentials",)

    def __init__(self, credentials: Iterable[str] = ()) -> None:
        items: list[str] = []
        for index, credential in enumerate(credentials):
            if not isinstance(credential, str):
                raise CredentialConfigError(
                    f"credential #{index} must be a string, got {type(credential).__name__}"
                )
            if not credential.strip():
                raise CredentialConfigError(f"credential #{index} is empty")
            items.append(credential)
        self._credentials: Tuple[str, ...] = tuple(items)

    @classmethod
    def from_settings(cls, settings) -> "CredentialPool":
        return cls(settings.gemini_api_keys)

    @property
    def credentials(self) -> Tuple[str, ...]:
        return self._credentials

    def __len__(self) -> int:
        return len(self._credentials)

    def __iter__(self) -> Iterator[str]:
        return iter(self._credentials)

    def __getitem__(self, index: int) -> str:
        return self._credentials[index]

    def __bool__(self) -> bool:
        return bool(self._credentials)

    def __repr__(self) -> str:
        return f"CredentialPool(size={len(self._credentials)})"
