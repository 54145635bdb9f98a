"""
Authentication routes
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response, status

from natours_core.auth import get_current_user
from natours_core.auth.middleware import LOGGED_OUT_COOKIE
from natours_core.db import User

from auth_service.dependencies import get_auth_service, get_base_url
from auth_service.rate_limit import auth_limit, limiter
from auth_service.schemas import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    ResetPasswordRequest,
    SignupRequest,
    UpdatePasswordRequest,
    UserInfo,
)
from auth_service.services import AuthResult, AuthService

log = logging.getLogger(__name__)
router = APIRouter()


def send_token(request: Request, response: Response, result: AuthResult) -> Dict[str, Any]:
    """Set the auth cookie and build the token response body."""
    settings = request.app.state.settings
    max_age = settings.JWT_COOKIE_EXPIRES_IN_DAYS * 24 * 60 * 60
    response.set_cookie(
        key=settings.JWT_COOKIE_NAME,
        value=result.token,
        max_age=max_age,
        expires=max_age,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return AuthResponse(
        token=result.token,
        data={"user": UserInfo(**result.user.to_public_dict())},
    ).model_dump()


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    body: SignupRequest,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    base_url: str = Depends(get_base_url),
):
    """
    Create an account and log the new user in.
    """
    result = service.signup(
        name=body.name,
        email=body.email,
        password=body.password,
        password_confirm=body.password_confirm,
        base_url=base_url,
    )
    return send_token(request, response, result)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(auth_limit)
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate user and return a JWT.
    """
    result = service.login(body.email, body.password)
    return send_token(request, response, result)


@router.get("/logout", response_model=MessageResponse)
async def logout(request: Request, response: Response):
    """
    Overwrite the auth cookie with a short-lived placeholder.

    Tokens are stateless; a client holding the raw token can still use it
    until it expires.
    """
    settings = request.app.state.settings
    response.set_cookie(
        key=settings.JWT_COOKIE_NAME,
        value=LOGGED_OUT_COOKIE,
        max_age=10,
        expires=10,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return MessageResponse(message="Logged out successfully")


@router.post("/forgotPassword", response_model=MessageResponse)
@limiter.limit(auth_limit)
async def forgot_password(
    body: ForgotPasswordRequest,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    base_url: str = Depends(get_base_url),
):
    """
    Email a password reset link.
    """
    service.forgot_password(body.email, base_url)
    return MessageResponse(message="Token sent to email!")


@router.patch("/resetPassword/{token}", response_model=AuthResponse)
async def reset_password(
    token: str,
    body: ResetPasswordRequest,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    """
    Set a new password with a reset token and log the user in.
    """
    result = service.reset_password(token, body.password, body.password_confirm)
    return send_token(request, response, result)


@router.patch("/updateMyPassword", response_model=AuthResponse)
async def update_password(
    body: UpdatePasswordRequest,
    request: Request,
    response: Response,
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    """
    Change the logged-in user's password and issue a fresh token.
    """
    result = service.update_password(
        current_user,
        body.password_current,
        body.password,
        body.password_confirm,
    )
    return send_token(request, response, result)
