"""
Auth domain — Pydantic V2 request/response schemas.

  - *Request  models:  input from the client (strict extra="forbid")
  - *Response models:  output to the client (no password hash exposed)
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from shared.constants import Role


class LoginRequest(BaseModel):
    """Body for POST /auth/login."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str | None
    email: str | None
    image: str | None
    role: Role
    email_verified_at: datetime | None
    created_at: datetime


class SessionResponse(BaseModel):
    """Returned by login. The same token is also set as the session cookie."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token lifetime in seconds.")
    user: UserResponse
