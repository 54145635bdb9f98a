"""
Authentication schemas

Request fields are optional at the schema level; the service validates them
explicitly so every missing or broken field is reported together.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """Signup request body"""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    password_confirm: Optional[str] = Field(None, alias="passwordConfirm")


class LoginRequest(BaseModel):
    """Login request body"""
    email: Optional[str] = None
    password: Optional[str] = None


class ForgotPasswordRequest(BaseModel):
    """Forgot password request body"""
    email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    """Reset password request body; the token travels in the path"""
    model_config = ConfigDict(populate_by_name=True)

    password: Optional[str] = None
    password_confirm: Optional[str] = Field(None, alias="passwordConfirm")


class UpdatePasswordRequest(BaseModel):
    """Change password request for the logged-in user"""
    model_config = ConfigDict(populate_by_name=True)

    password_current: Optional[str] = Field(None, alias="passwordCurrent")
    password: Optional[str] = None
    password_confirm: Optional[str] = Field(None, alias="passwordConfirm")


class MessageResponse(BaseModel):
    success: bool = True
    message: str
