# -*- coding: utf-8 -*-
"""GenAI: run a unit of work, rotating through API keys on rate limiting.

Every `run` starts again from the first key and walks the pool in order, one
attempt at a time:

- success returns the work's result;
- a fatal error is re-raised at once, whatever keys are left;
- a retryable (quota / rate-limit) error moves on to the next key, and on the
  last key it is re-raised unchanged.

Nothing is remembered between calls. The work may run more than once with
different clients, so callers must only pass work that tolerates that.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

from .classifier import ErrorKind, classify
from .credentials import CredentialPool, mask
from .errors import NoCredentialsConfigured

logger = logging.getLogger(__name__)

C = TypeVar("C")
T = TypeVar("T")


class Outcome(str, Enum):
    success = "success"
    retryable = "retryable"
    fatal = "fatal"


@dataclass
class Attempt:
    """One try of the work with one key; lives only inside a single `run`."""

    index: int
    credential: str = field(repr=False)
    outcome: Optional[Outcome] = None

    @property
    def masked_credential(self) -> str:
        return mask(self.credential)


class RotationExecutor(Generic[C]):
    def __init__(self, pool: CredentialPool, client_factory: Callable[[str], C]) -> None:
        self._pool = pool
        self._client_factory = client_factory

    @property
    def pool(self) -> CredentialPool:
        return self._pool

    async def run(self, work: Callable[[C], Awaitable[T]]) -> T:
        size = len(self._pool)
        if size == 0:
            logger.error("genai call aborted: no API keys configured")
            raise NoCredentialsConfigured()

        attempts: List[Attempt] = []
        for index, credential in enumerate(self._pool):
            attempt = Attempt(index=index, credential=credential)
            attempts.append(attempt)
            client = self._client_factory(credential)
            try:
                result = await work(client)
            except Exception as exc:
                kind = classify(exc)
                attempt.outcome = Outcome(kind.value)
                if kind is ErrorKind.fatal:
                    logger.info(
                        "genai call failed on key #%d (%s), not rotating: %s",
                        index,
                        attempt.masked_credential,
                        exc,
                    )
                    raise
                if index == size - 1:
                    logger.warning(
                        "genai keys exhausted after %d attempt(s); last error: %s",
                        len(attempts),
                        exc,
                    )
                    raise
                logger.warning(
                    "key rotation: key #%d (%s) rate limited, trying key #%d of %d",
                    index,
                    attempt.masked_credential,
                    index + 1,
                    size,
                )
                continue

            attempt.outcome = Outcome.success
            if index > 0:
                logger.info("genai call succeeded on key #%d after rotation", index)
            return result

        # Unreachable: the last attempt either returns or raises.
        raise AssertionError("rotation loop finished without an outcome")
