"""
Authentication and authorization schemas.

These schemas define the API contracts for user authentication,
registration, and JWT token management.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    """User login request schema."""

    email: EmailStr = Field(description="Account email")
    password: str = Field(min_length=8, max_length=128, description="User password")

    model_config = ConfigDict(
        json_schema_extra={"example": {"email": "alice@example.com", "password": "securepassword123"}}
    )


class RegisterRequest(BaseModel):
    """User registration request schema."""

    email: EmailStr = Field(description="Unique email, compared case-insensitively")
    password: str = Field(min_length=8, max_length=128, description="User password")
    display_name: Optional[str] = Field(default=None, max_length=100, description="Shown to collaborators")


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(description="Refresh token from login")


class TokenResponse(BaseModel):
    """JWT token response schema."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Access token lifetime in seconds")


class UserResponse(BaseModel):
    """User information response schema."""

    id: uuid.UUID
    email: str
    display_name: Optional[str] = None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
