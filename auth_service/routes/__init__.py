"""
Routers for the auth service
"""

from . import auth, users

__all__ = ["auth", "users"]
