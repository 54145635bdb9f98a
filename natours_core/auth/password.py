"""Password hashing utilities.

bcrypt with a per-call random salt. Verification never raises: a mismatch,
an empty input or a malformed stored hash all verify as False.
"""

import logging

import bcrypt

log = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes of the secret
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """
    Hash a password.

    Args:
        password: The plain text password to hash

    Returns:
        The bcrypt hash string ($2b$...)
    """
    if not password:
        raise ValueError("Cannot hash an empty password")
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(provided_password: str, stored_hash: str) -> bool:
    """
    Verify a password against a stored hash.

    Args:
        provided_password: The password to verify
        stored_hash: The stored bcrypt hash

    Returns:
        True if the password matches, False otherwise
    """
    if not stored_hash or not provided_password:
        return False

    try:
        return bcrypt.checkpw(provided_password.encode("utf-8"), stored_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash, or a secret bcrypt refuses to process
        log.warning("Password verification against an unusable hash")
        return False
