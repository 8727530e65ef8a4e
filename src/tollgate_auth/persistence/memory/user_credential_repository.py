"""In-memory implementation of UserCredentialRepository."""

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta

from tollgate_auth.repositories import UserCredentialData, UserCredentialRepository
from tollgate_auth.shared.time import utc_now

logger = logging.getLogger(__name__)


class InMemoryUserCredentialRepository(UserCredentialRepository):
    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._credentials: dict[str, UserCredentialData] = {}
        self._clock = clock

    async def save(self, user_id: str, password_hash: str) -> UserCredentialData:
        existing = self._credentials.get(user_id)
        if existing is not None:
            credential = replace(existing, password_hash=password_hash)
        else:
            credential = UserCredentialData(
                user_id=user_id,
                password_hash=password_hash,
                failed_login_attempts=0,
                locked_until=None,
                last_login_at=None,
            )
        self._credentials[user_id] = credential
        return credential

    async def find_by_user_id(self, user_id: str) -> UserCredentialData | None:
        return self._credentials.get(user_id)

    async def increment_failed_attempts(self, user_id: str) -> int:
        credential = self._credentials.get(user_id)
        if credential is None:
            return 0

        attempts = credential.failed_login_attempts + 1
        locked_until = credential.locked_until
        if attempts >= self.MAX_FAILED_ATTEMPTS:
            locked_until = self._clock() + timedelta(
                minutes=self.LOCKOUT_DURATION_MINUTES,
            )
            logger.warning(
                "Account locked for user %s due to %d failed attempts",
                user_id,
                attempts,
            )
        self._credentials[user_id] = replace(
            credential,
            failed_login_attempts=attempts,
            locked_until=locked_until,
        )
        return attempts

    async def reset_failed_attempts(self, user_id: str) -> None:
        credential = self._credentials.get(user_id)
        if credential is not None:
            self._credentials[user_id] = replace(
                credential,
                failed_login_attempts=0,
                locked_until=None,
            )

    async def update_last_login(self, user_id: str) -> None:
        credential = self._credentials.get(user_id)
        if credential is not None:
            self._credentials[user_id] = replace(
                credential,
                last_login_at=self._clock(),
            )

    async def is_account_locked(self, user_id: str) -> tuple[bool, datetime | None]:
        credential = self._credentials.get(user_id)
        if credential is None or not credential.is_locked(self._clock()):
            return False, None
        return True, credential.locked_until

    async def delete(self, user_id: str) -> bool:
        return self._credentials.pop(user_id, None) is not None
