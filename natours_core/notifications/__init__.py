"""
Notifications module for Natours Core
"""

from .mailer import (
    EmailSender,
    NotificationError,
    NotificationSender,
)

__all__ = [
    "EmailSender",
    "NotificationError",
    "NotificationSender",
]
