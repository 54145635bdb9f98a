"""
SQLAlchemy Models for Natours

Defines the user identity model used by the authentication subsystem.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    String,
    Boolean,
    DateTime,
    Enum,
    Index,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, enum.Enum):
    """Closed set of user roles"""
    USER = "user"
    GUIDE = "guide"
    LEAD_GUIDE = "lead-guide"
    ADMIN = "admin"


class User(Base):
    """User accounts"""
    __tablename__ = 'users'

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    photo = Column(String(255), default='default.jpg')
    role = Column(
        Enum(UserRole, values_callable=lambda e: [m.value for m in e], name='user_role'),
        nullable=False,
        default=UserRole.USER,
    )
    password_hash = Column(String(255), nullable=False)
    password_changed_at = Column(DateTime(timezone=True), nullable=True)
    password_reset_token = Column(String(64), nullable=True)  # sha256 hex of the secret
    password_reset_expires = Column(DateTime(timezone=True), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index('idx_users_password_reset_token', 'password_reset_token'),
    )

    def to_public_dict(self) -> dict:
        """Serializable view of the user without credential fields."""
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'photo': self.photo or 'default.jpg',
            'role': self.role.value if isinstance(self.role, UserRole) else self.role,
        }

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"
