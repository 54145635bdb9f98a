"""
Auth service business logic layer
"""

from .auth_service import AuthService, AuthResult

__all__ = ["AuthService", "AuthResult"]
