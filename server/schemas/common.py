"""Common schemas used across multiple endpoints."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Response model for errors."""
    error: str


class StatusResponse(BaseModel):
    """Response model for dependency status."""
    redis: bool
    db: bool


class StatsResponse(BaseModel):
    """Response model for collection counts."""
    users: int
    files: int
