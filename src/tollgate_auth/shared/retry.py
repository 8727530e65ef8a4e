"""Retry helper for idempotent store reads."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tollgate_auth.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_store_read(
    fn: Callable[[], Awaitable[T]],
    *,
    retries: int = 2,
    base: float = 0.05,
    cap: float = 1.0,
    jitter: bool = True,
) -> T:
    """Await fn() with capped exponential backoff on StoreUnavailableError.

    Only StoreUnavailableError is retried; every other error propagates on
    the first attempt. Use for reads only, never for writes.

    retries: number of retry attempts (so total calls = 1 + retries)
    """
    attempt = 0
    while True:
        try:
            return await fn()
        except StoreUnavailableError as ex:
            if attempt >= retries:
                raise
            delay = min(cap, base * (2**attempt))
            if jitter:
                delay = delay * (0.5 + random.random())
            attempt += 1
            logger.warning(
                "Store unavailable, retrying read (attempt %d/%d in %.2fs): %s",
                attempt,
                retries,
                delay,
                ex.message,
            )
            await asyncio.sleep(delay)
