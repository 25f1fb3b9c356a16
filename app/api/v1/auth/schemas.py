"""
Authentication schemas for request/response validation
"""

from pydantic import EmailStr, Field, field_validator
import re

from app.core.security import SecurityUtils
from app.schemas.base import BaseSchema
from app.schemas.user import UserPublic

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")

class RegisterRequest(BaseSchema):
    """User registration request"""
    username: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(..., max_length=128)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        if not USERNAME_PATTERN.match(v):
            raise ValueError("Username can only contain letters, numbers, and underscores")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        is_valid, message = SecurityUtils.validate_password(v)
        if not is_valid:
            raise ValueError(message)
        return v

    model_config = {
        "json_schema_extra": {
            "example": {
                "username": "john_doe",
                "email": "john@example.com",
                "password": "Secret123"
            }
        }
    }

class LoginRequest(BaseSchema):
    """Login with email and password"""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

class AuthResponse(BaseSchema):
    """Issued token with the authenticated user"""
    message: str
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserPublic
