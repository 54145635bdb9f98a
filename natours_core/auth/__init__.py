"""
Authentication module for Natours Core

Provides:
- Password hashing utilities
- JWT token minting and verification
- Password reset tokens
- Input validation for the credential flows
- FastAPI authentication dependencies
"""

from .password import (
    hash_password,
    verify_password,
)

from .jwt import (
    TokenData,
    TokenIssuer,
    password_changed_after,
)

from .reset_token import (
    ResetToken,
    generate_reset_token,
    hash_reset_token,
    consume_reset_token,
)

from .validation import (
    validate_signup,
    validate_login,
    validate_new_password,
)

from .middleware import (
    AuthGate,
    RoleChecker,
    extract_token,
    get_auth_gate,
    get_current_user,
    get_current_user_optional,
    get_token_issuer,
    restrict_to,
)

__all__ = [
    # Password
    "hash_password",
    "verify_password",
    # JWT
    "TokenData",
    "TokenIssuer",
    "password_changed_after",
    # Reset tokens
    "ResetToken",
    "generate_reset_token",
    "hash_reset_token",
    "consume_reset_token",
    # Validation
    "validate_signup",
    "validate_login",
    "validate_new_password",
    # Middleware
    "AuthGate",
    "RoleChecker",
    "extract_token",
    "get_auth_gate",
    "get_current_user",
    "get_current_user_optional",
    "get_token_issuer",
    "restrict_to",
]
