"""Password credential verification."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tollgate_auth import (
    AccountLockedError,
    EmailUnverifiedError,
    InvalidCredentialsError,
)
from tollgate_auth.shared.retry import retry_store_read
from tollgate_identity.domain.user import normalize_email

if TYPE_CHECKING:
    from tollgate_auth.repositories import UserCredentialRepository
    from tollgate_auth.services import PasswordHasher
    from tollgate_identity.domain.user import User, UserRepository

logger = logging.getLogger(__name__)


class CredentialVerifier:
    """
    Checks an email/password pair against the stored hash.

    Unknown email, a user without password credentials and a wrong
    password all fail with the same InvalidCredentialsError. For unknown
    emails a dummy hash comparison keeps the response time in line with a
    real check.

    A hash made with an outdated work factor is replaced after a successful
    check.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        credential_repository: UserCredentialRepository,
        password_hasher: PasswordHasher,
        require_verified_email: bool = False,
    ):
        self._user_repo = user_repository
        self._credential_repo = credential_repository
        self._hasher = password_hasher
        self._require_verified_email = require_verified_email

    async def verify(self, email: str, password: str) -> User:
        """Return the user the credentials belong to.

        Raises
        ------
        InvalidCredentialsError
            Unknown email, no password set, or wrong password
        AccountLockedError
            Too many failed attempts; checked before the password so a
            locked account gives no feedback on guesses
        EmailUnverifiedError
            Correct password but verification is required and missing
        """
        user = await retry_store_read(
            lambda: self._user_repo.find_by_email(normalize_email(email)),
        )
        if user is None:
            self._hasher.verify_dummy(password)
            raise InvalidCredentialsError

        is_locked, locked_until = await self._credential_repo.is_account_locked(
            user.id,
        )
        if is_locked:
            logger.warning("Login attempt for locked account: %s", user.id)
            raise AccountLockedError(
                locked_until=locked_until.isoformat() if locked_until else None,
            )

        credential = await self._credential_repo.find_by_user_id(user.id)
        if credential is None:
            self._hasher.verify_dummy(password)
            raise InvalidCredentialsError

        if not self._hasher.verify(password, credential.password_hash):
            attempts = await self._credential_repo.increment_failed_attempts(user.id)
            logger.info("Failed login for user %s (%d attempts)", user.id, attempts)
            raise InvalidCredentialsError

        if self._require_verified_email and not user.email_verified:
            raise EmailUnverifiedError

        if self._hasher.needs_rehash(credential.password_hash):
            await self._credential_repo.save(
                user_id=user.id,
                password_hash=self._hasher.hash(password),
            )
            logger.info("Password hash upgraded for user: %s", user.id)

        await self._credential_repo.reset_failed_attempts(user.id)
        await self._credential_repo.update_last_login(user.id)
        return user
