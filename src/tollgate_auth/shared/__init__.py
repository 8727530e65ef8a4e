"""Helpers shared across tollgate packages."""

from tollgate_auth.shared.identifiers import (
    is_valid_typeid,
    new_oauth_account_id,
    new_session_id,
    new_typeid,
    new_user_id,
)
from tollgate_auth.shared.retry import retry_store_read
from tollgate_auth.shared.time import ensure_tz_aware, utc_now

__all__ = [
    "ensure_tz_aware",
    "is_valid_typeid",
    "new_oauth_account_id",
    "new_session_id",
    "new_typeid",
    "new_user_id",
    "retry_store_read",
    "utc_now",
]
