"""SQLAlchemy model for linked OAuth accounts."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tollgate_auth.persistence.sqlalchemy.base import ID_LENGTH, TimestampMixin
from tollgate_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase


class OAuthAccountModel(IdentityBase, TimestampMixin):
    """
    A provider account linked to a user.

    Table: oauth_accounts
    """

    __tablename__ = "oauth_accounts"
    __table_args__ = (
        UniqueConstraint(
            "provider",
            "provider_account_id",
            name="uq_oauth_accounts_provider_account",
        ),
        UniqueConstraint("user_id", "provider", name="uq_oauth_accounts_user_provider"),
    )

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    provider: Mapped[str] = mapped_column(String(20), nullable=False)
    provider_account_id: Mapped[str] = mapped_column(String(255), nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<OAuthAccountModel(id={self.id}, provider={self.provider}, "
            f"user_id={self.user_id})>"
        )
