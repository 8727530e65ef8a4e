"""Process-wide in-memory OAuth state store.

States only live for a few minutes and are bound to the process that
issued them; deployments with several workers need sticky routing of the
OAuth callback.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from tollgate_auth.shared.time import utc_now
from tollgate_identity.domain.oauth import OAuthStateData, OAuthStateStore

logger = logging.getLogger(__name__)


class InMemoryOAuthStateStore(OAuthStateStore):
    # Sweep expired entries on every n-th save
    SWEEP_INTERVAL = 64

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._states: dict[str, OAuthStateData] = {}
        self._lock = asyncio.Lock()
        self._clock = clock
        self._saves = 0

    async def save(self, data: OAuthStateData) -> None:
        async with self._lock:
            self._states[data.state] = data
            self._saves += 1
            if self._saves % self.SWEEP_INTERVAL == 0:
                self._sweep()

    async def consume(self, state: str) -> OAuthStateData | None:
        async with self._lock:
            data = self._states.pop(state, None)
        if data is None or data.is_expired(self._clock()):
            return None
        return data

    async def purge_expired(self) -> int:
        async with self._lock:
            return self._sweep()

    def __len__(self) -> int:
        return len(self._states)

    def _sweep(self) -> int:
        now = self._clock()
        expired = [key for key, data in self._states.items() if data.is_expired(now)]
        for key in expired:
            del self._states[key]
        if expired:
            logger.debug("Dropped %d expired OAuth states", len(expired))
        return len(expired)
