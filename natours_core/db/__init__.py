"""
Database module for Natours Core

Provides:
- SQLAlchemy user model
- Session factory for database connections
- Credential store used by the auth flows
"""

from .models import (
    Base,
    User,
    UserRole,
)

from .session import (
    Database,
    create_db_engine,
    get_database,
    get_db,
    get_session_factory,
)

from .store import (
    CredentialStore,
    normalize_email,
)

__all__ = [
    # Models
    "Base",
    "User",
    "UserRole",
    # Session
    "Database",
    "create_db_engine",
    "get_database",
    "get_db",
    "get_session_factory",
    # Store
    "CredentialStore",
    "normalize_email",
]
