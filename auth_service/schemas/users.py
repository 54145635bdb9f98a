"""
User schemas
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class UserInfo(BaseModel):
    """User information returned to clients (no credential fields)"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    photo: str = "default.jpg"
    role: str = "user"


class UserData(BaseModel):
    user: UserInfo


class AuthResponse(BaseModel):
    """Token plus the authenticated user"""
    success: bool = True
    token: str
    data: UserData


class UserResponse(BaseModel):
    success: bool = True
    data: UserData


class SessionResponse(BaseModel):
    """Who, if anyone, the request's cookie identifies"""
    success: bool = True
    user: Optional[UserInfo] = None


class UserList(BaseModel):
    """List of users response"""
    success: bool = True
    data: List[UserInfo]
    total: int
