"""
JWT Token Utilities for Natours

Mints and verifies the stateless bearer tokens used for authentication.
Tokens carry the user id, the issue time and the expiry. There is no
server-side session: a token is revoked implicitly when its user changes
their password after the token was issued.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, TYPE_CHECKING

from pydantic import BaseModel
from jose import jwt, JWTError

from natours_core.config import NatoursSettings
from natours_core.errors import (
    InvalidSignature,
    TokenExpired,
    IdentityNotFound,
    PasswordChangedSinceTokenIssued,
)
from natours_core.utils.datetime import Clock, utc_now, to_timestamp, from_timestamp

if TYPE_CHECKING:
    from natours_core.db.models import User
    from natours_core.db.store import CredentialStore

log = logging.getLogger(__name__)


class TokenData(BaseModel):
    """Data contained in a JWT token"""
    sub: str  # Subject (user id)
    iat: int  # Issued at, seconds since epoch
    exp: int  # Expiration, seconds since epoch

    @property
    def issued_at(self) -> datetime:
        return from_timestamp(self.iat)

    @property
    def expires_at(self) -> datetime:
        return from_timestamp(self.exp)


def password_changed_after(user: "User", issued_at: int) -> bool:
    """
    Check whether the user changed their password after a token was issued.

    Args:
        user: The user the token belongs to
        issued_at: The token's ``iat`` claim (whole seconds)

    Returns:
        True if the token predates the last password change
    """
    if user.password_changed_at is None:
        return False
    return issued_at < to_timestamp(user.password_changed_at)


class TokenIssuer:
    """
    Signs and validates bearer tokens.

    Usage:
        issuer = TokenIssuer.from_settings(get_settings())
        token = issuer.mint(user.id)
        user = issuer.verify(token, store)
    """

    def __init__(
        self,
        secret: str,
        lifetime: timedelta,
        algorithm: str = 'HS256',
        clock: Optional[Clock] = None,
    ):
        if not secret:
            raise ValueError("A signing secret is required")
        if lifetime <= timedelta(0):
            raise ValueError("Token lifetime must be positive")
        self._secret = secret
        self.lifetime = lifetime
        self.algorithm = algorithm
        self.clock = clock or utc_now

    @classmethod
    def from_settings(cls, settings: NatoursSettings, clock: Optional[Clock] = None) -> "TokenIssuer":
        return cls(
            secret=settings.JWT_SECRET_KEY,
            lifetime=timedelta(days=settings.JWT_EXPIRES_IN_DAYS),
            algorithm=settings.JWT_ALGORITHM,
            clock=clock,
        )

    def mint(self, subject: str) -> str:
        """
        Create a token for a user.

        Args:
            subject: The user id to create a token for

        Returns:
            Encoded JWT string
        """
        now = to_timestamp(self.clock())
        payload = {
            "sub": subject,
            "iat": now,
            "exp": now + int(self.lifetime.total_seconds()),
        }
        token = jwt.encode(payload, self._secret, algorithm=self.algorithm)
        log.debug(f"Created token for user: {subject}")
        return token

    def decode(self, token: str) -> TokenData:
        """
        Check the signature and expiry of a token.

        Expiry is checked against this issuer's clock, not the wall clock.

        Raises:
            InvalidSignature: Tampered, malformed or foreign-signed token
            TokenExpired: Token is past its expiry
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
            data = TokenData(sub=payload["sub"], iat=payload["iat"], exp=payload["exp"])
        except (JWTError, KeyError, ValueError) as e:
            log.warning(f"JWT decode error: {e}")
            raise InvalidSignature() from e

        if to_timestamp(self.clock()) >= data.exp:
            log.info(f"Expired token for user: {data.sub}")
            raise TokenExpired()

        return data

    def verify(self, token: str, store: "CredentialStore") -> "User":
        """
        Fully verify a token and resolve the user it belongs to.

        Raises:
            InvalidSignature: Signature check failed
            TokenExpired: Token is past its expiry
            IdentityNotFound: The user no longer exists or is inactive
            PasswordChangedSinceTokenIssued: Password changed after the token was minted
        """
        data = self.decode(token)

        user = store.find_by_id(data.sub)
        if user is None:
            log.warning(f"Token for missing user: {data.sub}")
            raise IdentityNotFound()

        if password_changed_after(user, data.iat):
            log.info(f"Token for user {user.id} predates password change")
            raise PasswordChangedSinceTokenIssued()

        return user
