"""SQLAlchemy model for User aggregate."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from tollgate_auth.persistence.sqlalchemy.base import ID_LENGTH, TimestampMixin
from tollgate_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase


class UserModel(IdentityBase, TimestampMixin):
    """SQLAlchemy model for persisting User aggregates.

    Contains only identity data. Password credentials are stored in the
    user_credentials table (managed by tollgate_auth).
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(20), default="user", nullable=False)
    email_verified: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    avatar_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email}, role={self.role})>"
