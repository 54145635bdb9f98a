"""
Password reset tokens.

The secret is mailed to the user and never stored. Only its sha256 digest
is persisted, unsalted so it can be recomputed for lookup.
"""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta
from typing import NamedTuple, TYPE_CHECKING

from natours_core.errors import TokenInvalidOrExpired

if TYPE_CHECKING:
    from natours_core.db.models import User
    from natours_core.db.store import CredentialStore

log = logging.getLogger(__name__)

RESET_TOKEN_BYTES = 32
DEFAULT_RESET_WINDOW = timedelta(minutes=10)


class ResetToken(NamedTuple):
    secret: str
    token_hash: str
    expires_at: datetime


def hash_reset_token(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def generate_reset_token(now: datetime, window: timedelta = DEFAULT_RESET_WINDOW) -> ResetToken:
    """
    Create a fresh reset secret, its digest and its expiry.

    Args:
        now: Current time
        window: How long the secret stays valid

    Returns:
        ResetToken(secret, token_hash, expires_at)
    """
    secret = secrets.token_hex(RESET_TOKEN_BYTES)
    return ResetToken(secret, hash_reset_token(secret), now + window)


def consume_reset_token(store: "CredentialStore", secret: str, now: datetime) -> "User":
    """
    Resolve the user a reset secret was issued to.

    The caller must clear the stored token in the same update that sets the
    new password (``CredentialStore.apply_password_reset``).

    Raises:
        TokenInvalidOrExpired: No active user holds this token, or it expired
    """
    if not secret:
        raise TokenInvalidOrExpired()

    user = store.find_by_reset_hash(hash_reset_token(secret), now)
    if user is None:
        log.info("Reset token lookup failed")
        raise TokenInvalidOrExpired()
    return user
