"""SQLAlchemy model for sessions."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from tollgate_auth.persistence.sqlalchemy.base import ID_LENGTH, AuthBase
from tollgate_auth.shared.time import utc_now


class SessionModel(AuthBase):
    """
    SQLAlchemy model for authenticated sessions.

    user_id has no FK to stay decoupled from the users table; the identity
    layer deletes sessions explicitly when a user goes away.

    Table: sessions
    """

    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        nullable=False,
        index=True,
    )
    family_id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        nullable=False,
        index=True,
    )

    # Audit metadata only
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    def __repr__(self) -> str:
        return f"<SessionModel(id={self.id}, user_id={self.user_id})>"
