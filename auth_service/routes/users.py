"""
Current-user and user management routes
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from natours_core.auth import get_current_user, get_current_user_optional, restrict_to
from natours_core.db import User, UserRole

from auth_service.dependencies import get_auth_service
from auth_service.schemas import SessionResponse, UserInfo, UserList, UserResponse
from auth_service.services import AuthService

log = logging.getLogger(__name__)
router = APIRouter()
session_router = APIRouter()

admin_only = restrict_to(UserRole.ADMIN)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """
    Get current authenticated user info.
    """
    return UserResponse(data={"user": UserInfo(**current_user.to_public_dict())})


@router.delete("/deleteMe", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    """
    Deactivate the current user's account.
    """
    service.deactivate(current_user)
    log.info(f"User {current_user.id} deactivated their account")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("", response_model=UserList)
async def list_users(
    current_user: User = Depends(admin_only),
    service: AuthService = Depends(get_auth_service),
):
    """
    List all active users. Admins only.
    """
    users = [UserInfo(**u.to_public_dict()) for u in service.list_users()]
    return UserList(data=users, total=len(users))


@session_router.get("", response_model=SessionResponse)
async def get_session_user(current_user: Optional[User] = Depends(get_current_user_optional)):
    """
    Report who the auth cookie belongs to, or nobody. Never fails on a bad token.
    """
    if current_user is None:
        return SessionResponse(user=None)
    return SessionResponse(user=UserInfo(**current_user.to_public_dict()))
