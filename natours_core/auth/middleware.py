"""
FastAPI Authentication Middleware for Natours

The AuthGate does the work: pull a token out of the request, verify it,
resolve the user and optionally check their role. The FastAPI dependencies
below wire it into routes and hand the resolved user to the handler as an
explicit parameter.
"""

import logging
from typing import Iterable, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from natours_core.db.models import User, UserRole
from natours_core.db.session import get_db
from natours_core.db.store import CredentialStore
from natours_core.errors import Forbidden, NotAuthenticated, TokenVerificationError
from .jwt import TokenIssuer

log = logging.getLogger(__name__)

DEFAULT_COOKIE_NAME = 'jwt'

# Value written to the cookie on logout
LOGGED_OUT_COOKIE = 'loggedout'


def extract_token(authorization: Optional[str], cookie: Optional[str]) -> str:
    """
    Get the candidate token from a request.

    A ``Bearer`` Authorization header wins over the cookie.

    Raises:
        NotAuthenticated: Neither source carries a token
    """
    if authorization:
        scheme, _, credentials = authorization.partition(' ')
        if scheme.lower() == 'bearer' and credentials.strip():
            return credentials.strip()

    if cookie and cookie != LOGGED_OUT_COOKIE:
        return cookie

    raise NotAuthenticated()


class AuthGate:
    """
    Resolves the current user for a request.

    Usage:
        gate = AuthGate(issuer, CredentialStore(session))
        user = gate.authenticate(request.headers.get('Authorization'), request.cookies.get('jwt'))
        gate.authorize(user, [UserRole.ADMIN])
    """

    def __init__(self, issuer: TokenIssuer, store: CredentialStore):
        self.issuer = issuer
        self.store = store

    def authenticate(self, authorization: Optional[str], cookie: Optional[str]) -> User:
        """
        Resolve the user, failing the request if that is not possible.

        Raises:
            NotAuthenticated: No token, or the token failed verification
        """
        token = extract_token(authorization, cookie)
        try:
            return self.issuer.verify(token, self.store)
        except TokenVerificationError as e:
            raise NotAuthenticated(e.message) from e

    def identify(self, authorization: Optional[str], cookie: Optional[str]) -> Optional[User]:
        """
        Resolve the user if there is one, for pages that render for both
        anonymous and logged-in visitors. Never raises for auth failures.
        """
        try:
            return self.authenticate(authorization, cookie)
        except NotAuthenticated as e:
            log.debug(f"Anonymous request: {e.message}")
            return None

    @staticmethod
    def authorize(user: User, roles: Iterable[UserRole]) -> User:
        """
        Check that the user holds one of the allowed roles.

        Raises:
            Forbidden: The user's role is not allowed
        """
        allowed = {UserRole(r) for r in roles}
        if UserRole(user.role) not in allowed:
            log.warning(
                f"User {user.id} lacks required roles. "
                f"Has: {UserRole(user.role).value}, Needs: {sorted(r.value for r in allowed)}"
            )
            raise Forbidden()
        return user


def get_token_issuer(request: Request) -> TokenIssuer:
    """The issuer built at startup and stored on the application."""
    return request.app.state.token_issuer


def _cookie_name(request: Request) -> str:
    settings = getattr(request.app.state, 'settings', None)
    return getattr(settings, 'JWT_COOKIE_NAME', DEFAULT_COOKIE_NAME)


def get_auth_gate(
    issuer: TokenIssuer = Depends(get_token_issuer),
    db: Session = Depends(get_db),
) -> AuthGate:
    return AuthGate(issuer, CredentialStore(db))


async def get_current_user(
    request: Request,
    gate: AuthGate = Depends(get_auth_gate),
) -> User:
    """
    Get the current authenticated user.

    Usage:
        @router.get("/me")
        async def me(user: User = Depends(get_current_user)):
            return user.to_public_dict()

    Raises:
        NotAuthenticated: 401 if no valid token is provided
    """
    return gate.authenticate(
        request.headers.get('Authorization'),
        request.cookies.get(_cookie_name(request)),
    )


async def get_current_user_optional(
    request: Request,
    gate: AuthGate = Depends(get_auth_gate),
) -> Optional[User]:
    """
    Get the current user if authenticated, or None if not.

    Only the cookie is consulted, as for server-rendered pages.
    """
    return gate.identify(None, request.cookies.get(_cookie_name(request)))


class RoleChecker:
    """
    Dependency class for checking user roles.

    Usage:
        admin_only = RoleChecker(UserRole.ADMIN)

        @router.get("/")
        async def list_users(user: User = Depends(admin_only)):
            ...
    """

    def __init__(self, *roles: UserRole):
        if not roles:
            raise ValueError("RoleChecker needs at least one role")
        self.roles = tuple(UserRole(r) for r in roles)

    async def __call__(self, user: User = Depends(get_current_user)) -> User:
        return AuthGate.authorize(user, self.roles)


def restrict_to(*roles: UserRole) -> RoleChecker:
    return RoleChecker(*roles)
