"""
FastAPI dependencies for the auth service.

Long-lived collaborators (settings, token issuer, notification sender,
clock) are built once in ``create_app`` and kept on ``app.state``; the
database session is per request.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from natours_core.db import CredentialStore, get_db

from auth_service.services import AuthService


def get_auth_service(request: Request, db: Session = Depends(get_db)) -> AuthService:
    state = request.app.state
    return AuthService(
        store=CredentialStore(db),
        issuer=state.token_issuer,
        sender=state.notification_sender,
        settings=state.settings,
        clock=state.clock,
    )


def get_base_url(request: Request) -> str:
    """Scheme and host the client used, e.g. ``https://natours.io``."""
    return str(request.base_url).rstrip('/')
