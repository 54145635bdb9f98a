"""
Authentication Service

Business logic for signup, login and the password lifecycle.
"""

import logging
from datetime import timedelta
from functools import lru_cache
from typing import List, NamedTuple, Optional

from natours_core.auth import (
    TokenIssuer,
    consume_reset_token,
    generate_reset_token,
    hash_password,
    hash_reset_token,
    validate_login,
    validate_new_password,
    validate_signup,
    verify_password,
)
from natours_core.config import NatoursSettings
from natours_core.db import CredentialStore, User
from natours_core.errors import (
    EmailAlreadyRegistered,
    InvalidCredentials,
    NotFound,
    NotificationFailed,
    TokenInvalidOrExpired,
)
from natours_core.notifications import NotificationError, NotificationSender
from natours_core.utils.datetime import Clock, utc_now

log = logging.getLogger(__name__)

# password_changed_at is backdated so a token minted right after the change
# (same second) still verifies
PASSWORD_CHANGED_SKEW = timedelta(seconds=1)


class AuthResult(NamedTuple):
    token: str
    user: User


@lru_cache()
def _dummy_hash() -> str:
    # Compared against when the email is unknown so both login failures cost a bcrypt check
    return hash_password("natours-dummy-password")


class AuthService:
    """
    Service for user authentication.

    Handles:
    - Signup with a best-effort welcome email
    - Login with a single generic failure
    - Forgot / reset password with one-time reset tokens
    - Password change for logged-in users
    - Account deactivation
    """

    def __init__(
        self,
        store: CredentialStore,
        issuer: TokenIssuer,
        sender: NotificationSender,
        settings: NatoursSettings,
        clock: Optional[Clock] = None,
    ):
        self.store = store
        self.issuer = issuer
        self.sender = sender
        self.settings = settings
        self.clock = clock or utc_now

    def _issue(self, user: User) -> AuthResult:
        return AuthResult(self.issuer.mint(user.id), user)

    def signup(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        password_confirm: Optional[str],
        base_url: str,
    ) -> AuthResult:
        """
        Register a new user and log them in.

        Raises:
            ValidationFailed: Missing or malformed fields
            EmailAlreadyRegistered: Email taken
        """
        validate_signup(name, email, password, password_confirm, self.settings.PASSWORD_MIN_LENGTH)

        if self.store.find_by_email(email) is not None:
            raise EmailAlreadyRegistered()

        user = self.store.create(name=name, email=email, password_hash=hash_password(password))
        log.info(f"User {user.id} signed up")

        try:
            self.sender.send_welcome(user, f"{base_url}/me")
        except NotificationError as e:
            log.warning(f"Welcome email for user {user.id} not sent: {e}")

        return self._issue(user)

    def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """
        Authenticate by email and password.

        Raises:
            ValidationFailed: Email or password missing
            InvalidCredentials: Unknown email or wrong password (indistinguishable)
        """
        validate_login(email, password)

        user = self.store.find_by_email(email)
        if user is None:
            verify_password(password, _dummy_hash())
            log.warning(f"Login failed: unknown email - {email}")
            raise InvalidCredentials()

        if not verify_password(password, user.password_hash):
            log.warning(f"Login failed: invalid password - {email}")
            raise InvalidCredentials()

        log.info(f"User {user.id} logged in")
        return self._issue(user)

    def forgot_password(self, email: Optional[str], base_url: str) -> None:
        """
        Mail a one-time reset link to the user.

        The stored token is removed again if the email cannot be sent.

        Raises:
            NotFound: No active user with that email
            NotificationFailed: The reset email could not be sent
        """
        user = self.store.find_by_email(email or '')
        if user is None:
            raise NotFound('There is no user with that email address.')

        window = timedelta(minutes=self.settings.PASSWORD_RESET_EXPIRES_MINUTES)
        reset = generate_reset_token(self.clock(), window)
        self.store.set_reset_token(user.id, reset.token_hash, reset.expires_at)

        reset_url = f"{base_url}/api/v1/users/resetPassword/{reset.secret}"
        try:
            self.sender.send_password_reset(user, reset_url)
        except NotificationError as e:
            self.store.clear_reset_token(user.id)
            log.error(f"Reset email for user {user.id} failed, token cleared")
            raise NotificationFailed() from e

        log.info(f"Password reset token sent to user {user.id}")

    def reset_password(
        self,
        secret: str,
        password: Optional[str],
        password_confirm: Optional[str],
    ) -> AuthResult:
        """
        Set a new password using a reset secret, then log the user in.

        Raises:
            TokenInvalidOrExpired: Unknown, used or expired secret
            ValidationFailed: New password rejected
        """
        now = self.clock()
        user = consume_reset_token(self.store, secret, now)
        validate_new_password(password, password_confirm, self.settings.PASSWORD_MIN_LENGTH)

        consumed = self.store.apply_password_reset(
            user.id,
            hash_reset_token(secret),
            hash_password(password),
            changed_at=now - PASSWORD_CHANGED_SKEW,
            now=now,
        )
        if not consumed:
            # Another request used the token between lookup and update
            raise TokenInvalidOrExpired()

        log.info(f"Password reset for user {user.id}")
        return self._issue(user)

    def update_password(
        self,
        user: User,
        password_current: Optional[str],
        password: Optional[str],
        password_confirm: Optional[str],
    ) -> AuthResult:
        """
        Change the password of a logged-in user.

        Raises:
            InvalidCredentials: Current password is wrong
            ValidationFailed: New password rejected
        """
        if not verify_password(password_current, user.password_hash):
            log.warning(f"Password change for user {user.id} rejected: wrong current password")
            raise InvalidCredentials('Your current password is wrong.')

        validate_new_password(password, password_confirm, self.settings.PASSWORD_MIN_LENGTH)

        self.store.set_password(
            user.id,
            hash_password(password),
            changed_at=self.clock() - PASSWORD_CHANGED_SKEW,
        )
        log.info(f"Password changed for user {user.id}")
        return self._issue(user)

    def deactivate(self, user: User) -> None:
        self.store.deactivate(user.id)

    def list_users(self) -> List[User]:
        return self.store.list_users()
