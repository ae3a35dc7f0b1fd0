"""Pydantic schemas for user and session endpoints."""

from typing import Any

from pydantic import BaseModel


class CreateUserRequest(BaseModel):
    """Request model for user registration. Presence and types are checked by the service."""
    email: Any = None
    password: Any = None


class UserResponse(BaseModel):
    """Response model for a user; never carries the password."""
    id: str
    email: str


class TokenResponse(BaseModel):
    """Response model for a successful credential exchange."""
    token: str
