from tollgate_auth.persistence.sqlalchemy.models.session_model import SessionModel
from tollgate_auth.persistence.sqlalchemy.models.user_credential_model import (
    UserCredentialModel,
)

__all__ = ["SessionModel", "UserCredentialModel"]
