"""SQLAlchemy model for user authentication credentials.

This model stores password hashes and authentication metadata.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from tollgate_auth.persistence.sqlalchemy.base import (
    ID_LENGTH,
    AuthBase,
    TimestampMixin,
)


class UserCredentialModel(AuthBase, TimestampMixin):
    """
    SQLAlchemy model for user authentication credentials.

    This stores password hashes and security metadata separately from
    the users table. Each user has at most one credential record; users
    that signed up through an OAuth provider have none.

    Security features:
    - failed_login_attempts: Tracks consecutive failed logins
    - locked_until: Account lockout timestamp
    - last_login_at: Audit trail for login activity

    Table: user_credentials
    """

    __tablename__ = "user_credentials"

    user_id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)

    # Password hash (bcrypt format, ~60 chars)
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # Security metadata
    failed_login_attempts: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    locked_until: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<UserCredentialModel(user_id={self.user_id})>"
