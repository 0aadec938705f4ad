"""Pydantic schemas for authentication endpoints."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import EmailStr, Field

from app.schemas.common import CamelModel


class UserRegister(CamelModel):
    """Request schema for user registration."""
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Literal["user", "provider"] = "user"
    phone: str | None = None


class UserLogin(CamelModel):
    """Request schema for user login."""
    email: EmailStr
    password: str


class UserOut(CamelModel):
    """Response schema for user info."""
    id: UUID
    name: str
    email: str
    role: str
    phone: str | None = None
    created_at: datetime | None = None


class Token(CamelModel):
    """Response schema for login and registration: JWT plus the user."""
    access_token: str
    token_type: str = "bearer"
    user: UserOut
