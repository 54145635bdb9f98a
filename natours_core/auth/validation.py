"""
Input validation for the credential flows.

Each function collects per-field messages and raises a single
ValidationFailed carrying all of them.
"""

from typing import Dict, List, Optional

from email_validator import validate_email, EmailNotValidError

from natours_core.errors import ValidationFailed
from .password import MAX_PASSWORD_BYTES

DEFAULT_MIN_LENGTH = 8

FieldErrors = Dict[str, List[str]]


def _add(errors: FieldErrors, field: str, message: str) -> None:
    errors.setdefault(field, []).append(message)


def password_errors(
    password: Optional[str],
    password_confirm: Optional[str],
    min_length: int = DEFAULT_MIN_LENGTH,
) -> FieldErrors:
    """Rules for a new password and its confirmation."""
    errors: FieldErrors = {}

    if not password:
        _add(errors, 'password', 'A user must have a password.')
    else:
        if len(password) < min_length:
            _add(errors, 'password', f'Password must be at least {min_length} characters.')
        if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
            _add(errors, 'password', f'Password must be at most {MAX_PASSWORD_BYTES} bytes.')

    if not password_confirm:
        _add(errors, 'password_confirm', 'Please confirm your password.')
    elif password and password_confirm != password:
        # Exact, case-sensitive comparison
        _add(errors, 'password_confirm', 'Passwords are not the same.')

    return errors


def validate_new_password(
    password: Optional[str],
    password_confirm: Optional[str],
    min_length: int = DEFAULT_MIN_LENGTH,
) -> None:
    errors = password_errors(password, password_confirm, min_length)
    if errors:
        raise ValidationFailed('Invalid input data.', field_errors=errors)


def validate_signup(
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    password_confirm: Optional[str],
    min_length: int = DEFAULT_MIN_LENGTH,
) -> None:
    """
    Validate a signup request.

    Raises:
        ValidationFailed: With per-field messages for every broken rule
    """
    errors: FieldErrors = {}

    if not name or not name.strip():
        _add(errors, 'name', 'A user must have a name.')

    if not email or not email.strip():
        _add(errors, 'email', 'A user must have an email.')
    else:
        try:
            validate_email(email.strip(), check_deliverability=False)
        except EmailNotValidError:
            _add(errors, 'email', 'Email address is not valid.')

    errors.update(password_errors(password, password_confirm, min_length))

    if errors:
        raise ValidationFailed('Invalid input data.', field_errors=errors)


def validate_login(email: Optional[str], password: Optional[str]) -> None:
    errors: FieldErrors = {}
    if not email:
        _add(errors, 'email', 'Please provide an email.')
    if not password:
        _add(errors, 'password', 'Please provide a password.')
    if errors:
        raise ValidationFailed('Please provide an email and password.', field_errors=errors)
