"""Persistence implementations for tollgate_auth.

This package contains implementations of the repository interfaces
defined in tollgate_auth.repositories.

Structure:
    persistence/
    ├── memory/         # In-process implementation (single process, tests)
    └── sqlalchemy/     # SQLAlchemy/SQL database implementation
"""
