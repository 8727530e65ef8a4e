"""Token lifecycle: issuing, verifying and refreshing session-bound tokens."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from enum import Enum

from tollgate_auth.exceptions import TokenRevokedError
from tollgate_auth.repositories import SessionData, SessionRepository
from tollgate_auth.schemas import (
    RefreshResult,
    TokenPair,
    TokenPayload,
    TokenSubject,
    TokenType,
)
from tollgate_auth.services.jwt_service import JWTService
from tollgate_auth.shared.retry import retry_store_read

logger = logging.getLogger(__name__)

SubjectResolver = Callable[[TokenPayload], Awaitable[TokenSubject | None]]


class RefreshPolicy(str, Enum):
    """Whether a refresh token may be presented more than once."""

    SINGLE_USE = "single_use"
    MULTI_USE = "multi_use"


class TokenService:
    """
    Issues and verifies tokens bound to persisted sessions.

    Access tokens are verified statelessly. Refresh tokens are only valid
    while the session they are bound to exists. Under the single-use policy
    every refresh rotates the session: the presented token dies and a new
    refresh token bound to the successor session is returned. Presenting a
    rotated token again revokes the whole session family.
    """

    def __init__(
        self,
        jwt_service: JWTService,
        session_repository: SessionRepository,
        policy: RefreshPolicy = RefreshPolicy.SINGLE_USE,
    ):
        self._jwt = jwt_service
        self._sessions = session_repository
        self._policy = RefreshPolicy(policy)

    @property
    def access_token_expires_in(self) -> int:
        return int(self._jwt.access_token_ttl.total_seconds())

    def session_expiry(self) -> datetime:
        """Expiry for a session created or rotated now."""
        return self._jwt.now() + self._jwt.refresh_token_ttl

    def issue(self, subject: TokenSubject, session: SessionData) -> TokenPair:
        access_token = self._jwt.create_token(
            subject, TokenType.ACCESS, session.id, session.family_id
        )
        refresh_token = self._jwt.create_token(
            subject, TokenType.REFRESH, session.id, session.family_id
        )
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.access_token_expires_in,
        )

    async def verify(self, token: str, expected_type: TokenType) -> TokenPayload:
        """Verify a token of the expected type.

        Raises
        ------
        TokenMalformedError, TokenExpiredError, WrongTokenTypeError
            From signature and claim verification
        TokenRevokedError
            If a refresh token's session no longer exists
        """
        payload = self._jwt.decode(token, expected_type)
        if expected_type is TokenType.REFRESH:
            await self._require_live_session(payload)
        return payload

    async def refresh(
        self,
        refresh_token: str,
        resolve_subject: SubjectResolver | None = None,
    ) -> RefreshResult:
        """Exchange a refresh token for a new access token.

        Parameters
        ----------
        refresh_token
            The refresh token presented by the client
        resolve_subject
            Loads the current identity for the token. New tokens carry its
            email and role instead of the presented claims. Returning None
            revokes the token's session family.

        Raises
        ------
        WrongTokenTypeError
            If an access token is presented
        TokenRevokedError
            If the session is gone; under single-use this also revokes the
            token's whole session family. Also raised when resolve_subject
            finds no current identity.
        """
        payload = self._jwt.decode(refresh_token, TokenType.REFRESH)
        subject = payload.to_subject()
        if resolve_subject is not None:
            resolved = await resolve_subject(payload)
            if resolved is None or resolved.user_id != payload.sub:
                removed = await self._sessions.delete_family(payload.fam)
                logger.warning(
                    "Refresh for unknown user %s; revoked %d sessions",
                    payload.sub,
                    removed,
                )
                raise TokenRevokedError
            subject = resolved

        if self._policy is RefreshPolicy.MULTI_USE:
            session = await self._require_live_session(payload)
            access_token = self._jwt.create_token(
                subject, TokenType.ACCESS, session.id, session.family_id
            )
            logger.debug("Access token refreshed for user: %s", payload.sub)
            return RefreshResult(
                access_token=access_token,
                expires_in=self.access_token_expires_in,
                session=session,
            )

        successor = await self._sessions.rotate(payload.sid, self.session_expiry())
        if successor is None:
            removed = await self._sessions.delete_family(payload.fam)
            logger.warning(
                "Refresh token reuse for user %s (session %s); revoked %d sessions",
                payload.sub,
                payload.sid,
                removed,
            )
            raise TokenRevokedError

        tokens = self.issue(subject, successor)
        logger.debug(
            "Session %s rotated to %s for user: %s",
            payload.sid,
            successor.id,
            payload.sub,
        )
        return RefreshResult(
            access_token=tokens.access_token,
            expires_in=tokens.expires_in,
            session=successor,
            refresh_token=tokens.refresh_token,
        )

    async def _require_live_session(self, payload: TokenPayload) -> SessionData:
        session = await retry_store_read(lambda: self._sessions.get(payload.sid))
        if session is None or session.user_id != payload.sub:
            raise TokenRevokedError
        return session
