"""
Natours Core - Shared library for the Natours API services

This package provides the authentication and credential-lifecycle pieces used
by the Natours services:
- Configuration management
- Error hierarchy with stable error codes
- Authentication primitives (password hashing, JWT, reset tokens, auth gate)
- User model, session management and credential store
- Email notifications
"""

__version__ = "1.0.0"
