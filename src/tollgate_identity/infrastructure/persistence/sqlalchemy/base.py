"""SQLAlchemy declarative base for tollgate_identity models.

Uses the same metadata as tollgate_auth's AuthBase so that one
``create_all`` creates the identity and auth tables together.
"""

from tollgate_auth.persistence.sqlalchemy.base import AuthBase

IdentityBase = AuthBase
