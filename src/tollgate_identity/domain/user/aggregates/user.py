"""User aggregate."""

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from tollgate_auth.shared.identifiers import new_user_id
from tollgate_auth.shared.time import utc_now
from tollgate_identity.domain.user.exceptions import InvalidNameError
from tollgate_identity.domain.user.value_objects import Email, UserRole

MAX_NAME_LENGTH = 100


def validate_name(name: str) -> str:
    """Return the trimmed display name or raise InvalidNameError."""
    name = (name or "").strip()
    if not name:
        msg = "Name is required"
        raise InvalidNameError(msg)
    if len(name) > MAX_NAME_LENGTH:
        msg = f"Name cannot exceed {MAX_NAME_LENGTH} characters"
        raise InvalidNameError(msg)
    return name


@dataclass(frozen=True)
class PublicUser:
    """Profile that is safe to show to other users."""

    id: str
    name: str
    avatar_url: str | None
    created_at: datetime


class User:
    """
    User aggregate root.

    Holds identity data only. Password credentials live in the
    tollgate_auth credential store and OAuth links in OAuthAccount.
    """

    def __init__(  # noqa: PLR0913
        self,
        email: Union[str, Email],
        name: str,
        role: Union[str, UserRole] = UserRole.USER,
        email_verified: bool = False,
        avatar_url: str | None = None,
        id: str | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._email = email if isinstance(email, Email) else Email(email)
        self._name = validate_name(name)
        self._id = id or new_user_id()
        self._role = role if isinstance(role, UserRole) else UserRole(role)
        self._email_verified = email_verified
        self._avatar_url = avatar_url
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or self._created_at

    @property
    def id(self) -> str:
        return self._id

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def name(self) -> str:
        return self._name

    @property
    def role(self) -> UserRole:
        return self._role

    @property
    def email_verified(self) -> bool:
        return self._email_verified

    @property
    def avatar_url(self) -> str | None:
        return self._avatar_url

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def mark_email_verified(self) -> None:
        if not self._email_verified:
            self._email_verified = True
            self._updated_at = utc_now()

    def update_profile(
        self,
        name: str | None = None,
        avatar_url: str | None = None,
    ) -> None:
        if name is not None:
            self._name = validate_name(name)
        if avatar_url is not None:
            self._avatar_url = avatar_url
        self._updated_at = utc_now()

    def change_role(self, role: UserRole) -> None:
        self._role = role
        self._updated_at = utc_now()

    def to_public(self) -> PublicUser:
        return PublicUser(
            id=self._id,
            name=self._name,
            avatar_url=self._avatar_url,
            created_at=self._created_at,
        )

    @classmethod
    def create(
        cls,
        email: Union[str, Email],
        name: str,
        role: UserRole = UserRole.USER,
        email_verified: bool = False,
        avatar_url: str | None = None,
    ) -> "User":
        return cls(
            email=email,
            name=name,
            role=role,
            email_verified=email_verified,
            avatar_url=avatar_url,
        )

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: str,
        email: Union[str, Email],
        name: str,
        role: Union[str, UserRole],
        email_verified: bool,
        avatar_url: str | None,
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        return cls(
            id=id,
            email=email,
            name=name,
            role=role,
            email_verified=email_verified,
            avatar_url=avatar_url,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"User(id={self._id}, email={self._email.value})"
