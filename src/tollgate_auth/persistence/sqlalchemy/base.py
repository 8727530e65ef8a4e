"""SQLAlchemy declarative base for tollgate models.

Auth and identity models share this base (and therefore one metadata),
so a single ``AuthBase.metadata.create_all`` creates every table.

Examples
--------
# In Alembic env.py:
from tollgate_auth.persistence.sqlalchemy import AuthBase
import tollgate_identity.infrastructure.persistence.sqlalchemy.models  # noqa: F401
target_metadata = AuthBase.metadata
"""

from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from tollgate_auth.shared.time import utc_now

# TypeID strings are at most 63 + 1 + 26 characters
ID_LENGTH = 90


class AuthBase(DeclarativeBase):
    """Declarative base for all tollgate models."""


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps (utc_now)."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
