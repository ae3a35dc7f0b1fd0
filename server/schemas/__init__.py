"""Pydantic schemas for API requests and responses."""

from server.schemas.users import (
    CreateUserRequest,
    UserResponse,
    TokenResponse
)
from server.schemas.files import (
    UploadFileRequest,
    FileMetadataResponse
)
from server.schemas.common import ErrorResponse, StatusResponse, StatsResponse

__all__ = [
    "CreateUserRequest",
    "UserResponse",
    "TokenResponse",
    "UploadFileRequest",
    "FileMetadataResponse",
    "ErrorResponse",
    "StatusResponse",
    "StatsResponse"
]
