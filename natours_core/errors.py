"""
Custom Exception Classes for Natours

Provides a hierarchy of exceptions for consistent error handling across the API.
Every error carries a stable machine-readable ``error_code`` and an HTTP status.
"""

from typing import Optional, Dict, Any, List


class NatoursError(Exception):
    """
    Base exception for all Natours errors.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code to return
        error_code: Machine-readable error code for programmatic handling
        details: Additional error details
    """
    status_code = 500
    error_code = 'INTERNAL_ERROR'
    default_message = 'An internal error occurred'

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        result = {
            'success': False,
            'error': self.message,
            'error_code': self.error_code
        }
        if self.details:
            result['details'] = self.details
        return result


class ValidationFailed(NatoursError):
    """Request validation failed (400)."""
    status_code = 400
    error_code = 'VALIDATION_FAILED'
    default_message = 'Validation failed'

    def __init__(
        self,
        message: Optional[str] = None,
        field_errors: Optional[Dict[str, List[str]]] = None
    ):
        self.field_errors = field_errors or {}
        details = {'fields': self.field_errors} if self.field_errors else None
        super().__init__(message, details=details)


class EmailAlreadyRegistered(NatoursError):
    """Signup with an email that already belongs to an identity (409)."""
    status_code = 409
    error_code = 'EMAIL_ALREADY_REGISTERED'
    default_message = 'An account with this email address already exists.'


class InvalidCredentials(NatoursError):
    """Login or password check failed (401).

    Deliberately does not say whether the email or the password was wrong.
    """
    status_code = 401
    error_code = 'INVALID_CREDENTIALS'
    default_message = 'Incorrect email or password.'


class NotAuthenticated(NatoursError):
    """Request carries no usable credentials (401)."""
    status_code = 401
    error_code = 'NOT_AUTHENTICATED'
    default_message = 'You are not logged in! Please log in to get access.'


class Forbidden(NatoursError):
    """Authenticated identity lacks the required role (403)."""
    status_code = 403
    error_code = 'FORBIDDEN'
    default_message = 'You do not have permission to perform this action.'


class NotFound(NatoursError):
    """Resource not found (404)."""
    status_code = 404
    error_code = 'NOT_FOUND'
    default_message = 'Resource not found'


class TokenInvalidOrExpired(NatoursError):
    """Password reset token unknown, already used, or past its window (400)."""
    status_code = 400
    error_code = 'TOKEN_INVALID_OR_EXPIRED'
    default_message = 'Token is invalid or has expired.'


class NotificationFailed(NatoursError):
    """A notification required by the flow could not be delivered (500)."""
    status_code = 500
    error_code = 'NOTIFICATION_FAILED'
    default_message = 'There was an error sending the email. Try again later.'


class RateLimited(NatoursError):
    """Too many requests from one client (429)."""
    status_code = 429
    error_code = 'RATE_LIMITED'
    default_message = 'Too many requests from this IP, please try again later.'


class TokenVerificationError(NatoursError):
    """Base for bearer token verification failures (401)."""
    status_code = 401
    error_code = 'TOKEN_VERIFICATION_FAILED'
    default_message = 'Invalid authentication token'


class InvalidSignature(TokenVerificationError):
    error_code = 'INVALID_SIGNATURE'
    default_message = 'Invalid token. Please log in again.'


class TokenExpired(TokenVerificationError):
    error_code = 'TOKEN_EXPIRED'
    default_message = 'Your token has expired. Please log in again.'


class IdentityNotFound(TokenVerificationError):
    error_code = 'IDENTITY_NOT_FOUND'
    default_message = 'The user belonging to this token no longer exists.'


class PasswordChangedSinceTokenIssued(TokenVerificationError):
    error_code = 'PASSWORD_CHANGED'
    default_message = 'User recently changed password. Please log in again.'
