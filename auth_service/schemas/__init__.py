"""
Pydantic schemas for Auth Service
"""

from .auth import (
    SignupRequest,
    LoginRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    UpdatePasswordRequest,
    MessageResponse,
)

from .users import (
    UserInfo,
    UserData,
    AuthResponse,
    UserResponse,
    SessionResponse,
    UserList,
)

__all__ = [
    # Auth
    "SignupRequest",
    "LoginRequest",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "UpdatePasswordRequest",
    "MessageResponse",
    # Users
    "UserInfo",
    "UserData",
    "AuthResponse",
    "UserResponse",
    "SessionResponse",
    "UserList",
]
