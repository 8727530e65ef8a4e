"""JWT token service.

Provides JWT signing and verification for access and refresh tokens.
"""

import hashlib
import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta

import jwt

from tollgate_auth.exceptions import (
    TokenExpiredError,
    TokenMalformedError,
    WrongTokenTypeError,
)
from tollgate_auth.schemas import TokenPayload, TokenSubject, TokenType
from tollgate_auth.shared.time import utc_now

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "email", "role", "type", "iat", "exp", "sid", "fam"]


def key_id(secret_key: str) -> str:
    """Short, non-reversible fingerprint of a signing secret."""
    return hashlib.sha256(secret_key.encode("utf-8")).hexdigest()[:16]


class JWTService:
    """Service for JWT token creation and verification.

    Handles access tokens (short-lived) and refresh tokens (long-lived).
    Tokens are signed with the current secret and carry its fingerprint
    in the ``kid`` header. Previous secrets are accepted for verification
    only, so a key can be rotated without logging everybody out.

    The signing keys are fixed at construction time.

    Examples
    --------
    >>> service = JWTService(secret_key="your-secret-key")
    >>> token = service.create_token(subject, TokenType.ACCESS, "sess_...", "sess_...")
    >>> payload = service.decode(token, TokenType.ACCESS)
    >>> print(payload.sub)
    """

    DEFAULT_ACCESS_EXPIRE_MINUTES = 15
    DEFAULT_REFRESH_EXPIRE_DAYS = 7
    DEFAULT_ALGORITHM = "HS256"

    def __init__(  # noqa: PLR0913
        self,
        secret_key: str,
        access_token_expire_minutes: int = DEFAULT_ACCESS_EXPIRE_MINUTES,
        refresh_token_expire_days: int = DEFAULT_REFRESH_EXPIRE_DAYS,
        previous_secret_keys: Sequence[str] = (),
        algorithm: str = DEFAULT_ALGORITHM,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens. Must be kept secure.
        access_token_expire_minutes
            Minutes until access token expires (default 15)
        refresh_token_expire_days
            Days until refresh token expires (default 7)
        previous_secret_keys
            Retired secrets still accepted when verifying
        algorithm
            HMAC algorithm used for signing
        clock
            Source of the current time, used for iat/exp and expiry checks
        """
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)

        self._signing_kid = key_id(secret_key)
        self._keys: dict[str, str] = {self._signing_kid: secret_key}
        for previous in previous_secret_keys:
            if previous:
                self._keys.setdefault(key_id(previous), previous)

        self._algorithm = algorithm
        self._clock = clock
        self._ttl = {
            TokenType.ACCESS: timedelta(minutes=access_token_expire_minutes),
            TokenType.REFRESH: timedelta(days=refresh_token_expire_days),
        }

    @property
    def access_token_ttl(self) -> timedelta:
        return self._ttl[TokenType.ACCESS]

    @property
    def refresh_token_ttl(self) -> timedelta:
        return self._ttl[TokenType.REFRESH]

    def now(self) -> datetime:
        return self._clock()

    def create_token(
        self,
        subject: TokenSubject,
        token_type: TokenType,
        session_id: str,
        family_id: str,
    ) -> str:
        """Create a signed token of the given type bound to a session.

        Returns
        -------
        The encoded JWT token string
        """
        issued_at = int(self._clock().timestamp())
        expires_at = issued_at + int(self._ttl[token_type].total_seconds())

        payload = {
            "sub": subject.user_id,
            "email": subject.email,
            "role": subject.role,
            "type": token_type.value,
            "iat": issued_at,
            "exp": expires_at,
            "sid": session_id,
            "fam": family_id,
        }

        return jwt.encode(
            payload,
            self._keys[self._signing_kid],
            algorithm=self._algorithm,
            headers={"kid": self._signing_kid},
        )

    def decode(self, token: str, expected_type: TokenType) -> TokenPayload:
        """Verify and decode a JWT token.

        Parameters
        ----------
        token
            The JWT token string to verify
        expected_type
            The token type the caller accepts

        Returns
        -------
        TokenPayload containing the decoded claims

        Raises
        ------
        TokenMalformedError
            If the signature, structure or claims are invalid
        TokenExpiredError
            If the current time is at or past ``exp``
        WrongTokenTypeError
            If the ``type`` claim differs from expected_type
        """
        try:
            header = jwt.get_unverified_header(token)
            secret = self._keys.get(header.get("kid", ""))
            if secret is None:
                raise TokenMalformedError
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": REQUIRED_CLAIMS,
                },
            )
            payload = TokenPayload(
                sub=str(claims["sub"]),
                email=str(claims["email"]),
                role=str(claims["role"]),
                type=TokenType(claims["type"]),
                iat=int(claims["iat"]),
                exp=int(claims["exp"]),
                sid=str(claims["sid"]),
                fam=str(claims["fam"]),
            )
        except jwt.InvalidTokenError as e:
            logger.debug("Rejected token: %s", e)
            raise TokenMalformedError from e
        except (KeyError, ValueError, TypeError) as e:
            logger.debug("Malformed token payload: %s", e)
            raise TokenMalformedError from e

        if self._clock().timestamp() >= payload.exp:
            raise TokenExpiredError

        if payload.type is not expected_type:
            raise WrongTokenTypeError

        return payload
