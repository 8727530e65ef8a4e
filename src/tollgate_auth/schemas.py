"""Auth schemas and data structures.

These are simple data classes used for transferring authentication
data between components.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tollgate_auth.repositories import SessionData


class TokenType(str, Enum):
    """Discriminator carried in the ``type`` claim of every token."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenSubject:
    """The identity a token is minted for."""

    user_id: str
    email: str
    role: str


@dataclass(frozen=True)
class SessionMetadata:
    """Audit metadata recorded on a session. Never used for authorization."""

    user_agent: str | None = None
    ip_address: str | None = None


@dataclass(frozen=True)
class TokenPayload:
    """Decoded and verified JWT claim set.

    Attributes
    ----------
    sub
        The user id the token was issued to
    email
        The user's email address at issue time
    role
        The user's role at issue time
    type
        ACCESS or REFRESH; checked on every verification
    iat
        Issued-at, seconds since epoch
    exp
        Expiry, seconds since epoch (iat + TTL of the token type)
    sid
        Session the token is bound to
    fam
        Session family (first session of the rotation chain)
    """

    sub: str
    email: str
    role: str
    type: TokenType
    iat: int
    exp: int
    sid: str
    fam: str

    @property
    def user_id(self) -> str:
        return self.sub

    @property
    def session_id(self) -> str:
        return self.sid

    def to_subject(self) -> TokenSubject:
        return TokenSubject(user_id=self.sub, email=self.email, role=self.role)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int  # seconds until the access token expires


@dataclass(frozen=True)
class RefreshResult:
    """Outcome of a refresh call.

    refresh_token is None under the multi-use policy, where the presented
    refresh token stays valid.
    """

    access_token: str
    expires_in: int
    session: SessionData
    refresh_token: str | None = None
