"""Pydantic schemas for authentication endpoints.

Wire names are camelCase; Python attributes stay snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    """Request body for registration."""

    email: str = Field(..., min_length=1, max_length=320, description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")


class LoginRequest(CamelModel):
    """Request body for login."""

    email: str = Field(..., min_length=1, max_length=320, description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")


class RefreshRequest(CamelModel):
    """Request body for token refresh and logout."""

    refresh_token: str = Field(..., min_length=1, description="JWT refresh token")


class TokenPairResponse(CamelModel):
    """Access/refresh token pair returned by login and refresh."""

    access_token: str = Field(..., description="JWT access token, valid for 15 minutes")
    refresh_token: str = Field(..., description="One-time-use JWT refresh token, valid for 30 days")


class LogoutResponse(CamelModel):
    success: bool = True
