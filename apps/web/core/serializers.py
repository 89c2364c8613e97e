"""
Pydantic schemas for account API requests and responses.
"""

from pydantic import Field

from .http import CamelModel


class UserSchema(CamelModel):
    """Public view of a user. The password hash is never serialized."""

    id: int
    username: str
    name: str
    is_admin: bool


class RegisterRequest(CamelModel):
    """Request body for POST /api/register."""

    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=1, max_length=200)


class LoginRequest(CamelModel):
    """Request body for POST /api/login."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
