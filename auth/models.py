"""
Request / response schemas and the public views of a user.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email: str
    password: str


class PublicUser(BaseModel):
    """A stored user with the password hash stripped."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    email: str
    created_at: datetime


class TokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken")
    token_type: str = Field("bearer", alias="tokenType")


class TokenClaims(BaseModel):
    """Decoded and verified access-token claims."""

    subject: uuid.UUID
    email: str
    issued_at: datetime
    expires_at: datetime


class CurrentUser(BaseModel):
    id: uuid.UUID
    email: str
