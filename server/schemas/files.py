"""Pydantic schemas for file endpoints."""

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


class UploadFileRequest(BaseModel):
    """
    Request model for creating a folder, file or image.

    Fields are left untyped so the service can answer with its own
    messages (Missing name, Missing type, Missing data).
    """
    model_config = ConfigDict(populate_by_name=True)

    name: Any = None
    type: Any = None
    parent_id: Any = Field(None, alias="parentId")
    is_public: Any = Field(False, alias="isPublic")
    data: Any = None


class FileMetadataResponse(BaseModel):
    """Response model for file metadata."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    name: str
    type: str
    is_public: bool = Field(alias="isPublic")
    parent_id: Union[int, str] = Field(alias="parentId")
