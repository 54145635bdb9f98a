"""
Credential Store

Persistence of user identities, password hashes and reset-token state.
Lookups only ever see active users. Mutations are single-row UPDATE
statements touching only the named columns, so concurrent requests for the
same user cannot clobber unrelated fields.
"""

import logging
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from natours_core.errors import EmailAlreadyRegistered
from .models import User, UserRole

log = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or '').strip().lower()


class CredentialStore:
    """
    SQLAlchemy-backed store for user identities.

    Handles:
    - Lookup by email, id and reset-token hash
    - Creation with unique-email enforcement
    - Partial field updates for password and reset-token state
    - Soft deletion through the active flag
    """

    def __init__(self, session: Session):
        self.session = session

    def _active(self):
        return self.session.query(User).filter(User.active.is_(True))

    def find_by_email(self, email: str) -> Optional[User]:
        """Get an active user by (case-normalized) email."""
        return self._active().filter(User.email == normalize_email(email)).first()

    def find_by_id(self, user_id: str) -> Optional[User]:
        """Get an active user by id."""
        if not user_id:
            return None
        return self._active().filter(User.id == user_id).first()

    def find_by_reset_hash(self, token_hash: str, now: datetime) -> Optional[User]:
        """Get the active user holding an unexpired reset token with this hash."""
        return self._active().filter(
            User.password_reset_token == token_hash,
            User.password_reset_expires > now,
        ).first()

    def list_users(self) -> List[User]:
        return self._active().order_by(User.created_at).all()

    def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: UserRole = UserRole.USER,
    ) -> User:
        """
        Create a new user.

        Args:
            name: Display name
            email: Email address (normalized before storing)
            password_hash: Already-hashed password
            role: User role

        Returns:
            Created User object

        Raises:
            EmailAlreadyRegistered: If the email is taken
        """
        if not password_hash:
            raise ValueError("password_hash must not be empty")

        user = User(
            name=name.strip(),
            email=normalize_email(email),
            password_hash=password_hash,
            role=role,
            active=True,
        )
        return self.save(user)

    def save(self, user: User) -> User:
        """Insert or flush a full user object."""
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            log.warning(f"Duplicate email rejected: {user.email}")
            raise EmailAlreadyRegistered()
        log.info(f"Saved user {user.id}")
        return user

    def update_fields(self, user_id: str, *criteria: Any, **fields: Any) -> int:
        """
        Update only the given columns of one user.

        Extra SQL criteria narrow the match (e.g. the reset token must still
        be valid). Returns the number of rows changed (0 or 1).
        """
        query = self.session.query(User).filter(User.id == user_id, *criteria)
        count = query.update(fields, synchronize_session='fetch')
        self.session.commit()
        return count

    def set_password(self, user_id: str, password_hash: str, changed_at: datetime) -> None:
        if not password_hash:
            raise ValueError("password_hash must not be empty")
        self.update_fields(
            user_id,
            password_hash=password_hash,
            password_changed_at=changed_at,
        )

    def set_reset_token(self, user_id: str, token_hash: str, expires_at: datetime) -> None:
        self.update_fields(
            user_id,
            password_reset_token=token_hash,
            password_reset_expires=expires_at,
        )

    def clear_reset_token(self, user_id: str) -> None:
        self.update_fields(
            user_id,
            password_reset_token=None,
            password_reset_expires=None,
        )

    def apply_password_reset(
        self,
        user_id: str,
        token_hash: str,
        password_hash: str,
        changed_at: datetime,
        now: datetime,
    ) -> bool:
        """
        Set a new password and clear the reset token in one statement.

        The update only matches while the token is still stored and unexpired,
        so at most one caller can consume a given token.

        Returns:
            True if the token was consumed by this call
        """
        if not password_hash:
            raise ValueError("password_hash must not be empty")
        count = self.update_fields(
            user_id,
            User.active.is_(True),
            User.password_reset_token == token_hash,
            User.password_reset_expires > now,
            password_hash=password_hash,
            password_changed_at=changed_at,
            password_reset_token=None,
            password_reset_expires=None,
        )
        return count == 1

    def deactivate(self, user_id: str) -> None:
        self.update_fields(user_id, active=False)
        log.info(f"Deactivated user {user_id}")
