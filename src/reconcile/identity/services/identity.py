from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

from psycopg import errors as pg_errors

from reconcile.shared.logging import get_logger

from ..config import IdentitySettings, get_settings
from ..db import run_in_transaction
from ..errors import MissingIdentifierError, RetryExhaustedError
from ..models import IdentifyRequest, IdentifyResponse
from .resolver import IdentityResolver

logger = get_logger("identity.service")

T = TypeVar("T")
TransactionRunner = Callable[[Callable[[Any], Awaitable[T]]], Awaitable[T]]

RETRYABLE_ERRORS = (pg_errors.SerializationFailure, pg_errors.DeadlockDetected)


class IdentityService:
    """Runs one resolver call per transaction, retrying on write conflicts."""

    def __init__(
        self,
        resolver: IdentityResolver | None = None,
        transaction_runner: TransactionRunner | None = None,
        settings: IdentitySettings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._resolver = resolver or IdentityResolver()
        self._run = transaction_runner or self._default_runner

    async def _default_runner(self, fn: Callable[[Any], Awaitable[T]]) -> T:
        return await run_in_transaction(fn, timeout_ms=self._settings.transaction_timeout_ms)

    async def identify(self, request: IdentifyRequest) -> IdentifyResponse:
        if request.is_empty():
            raise MissingIdentifierError()

        email, phone_number = request.email, request.phone_number
        max_attempts = self._settings.identify_max_attempts

        async def _execute(tx: Any) -> IdentifyResponse:
            return await self._resolver.identify(tx, email, phone_number)

        last_error: Exception | None = None
        for attempt in range(1, max_attempts + 1):
            try:
                return await self._run(_execute)
            except RETRYABLE_ERRORS as exc:
                last_error = exc
                if attempt == max_attempts:
                    break
                backoff = self._settings.retry_base_delay * (2 ** (attempt - 1))
                logger.info(
                    "identify_retry_scheduled",
                    attempt=attempt,
                    backoff=backoff,
                    error=type(exc).__name__,
                )
                await asyncio.sleep(backoff)

        logger.warning(
            "identify_retries_exhausted",
            attempts=max_attempts,
            email=email,
            phone_number=phone_number,
            error=str(last_error),
        )
        raise RetryExhaustedError(max_attempts) from last_error


__all__ = ["IdentityService", "RETRYABLE_ERRORS", "TransactionRunner"]
