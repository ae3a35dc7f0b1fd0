"""File operation API routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import FileResponse

from common.models import ParentRef, User
from server.dependencies import get_current_user, get_file_service, get_optional_user
from server.schemas.files import FileMetadataResponse, UploadFileRequest
from server.services.file_service import FileService

router = APIRouter(prefix="/files", tags=["Files"])


@router.post("", response_model=FileMetadataResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    request: Optional[UploadFileRequest] = None,
    current_user: User = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service)
):
    """
    Create a folder, or upload a file or image as base64 data.

    Parameters:
        - name: File name
        - type: folder, file or image
        - parentId: Parent folder id, 0 for the root (default)
        - isPublic: Visibility (default false)
        - data: Base64 content, required unless type is folder
        - X-Token header (required)

    Returns:
        - id, userId, name, type, isPublic, parentId

    Raises:
        - 400: Missing name, Missing type, Missing data, Parent not found, Parent is not a folder
        - 401: Invalid or missing token
    """
    request = request or UploadFileRequest()
    file_node = await file_service.create_file(
        owner=current_user,
        name=request.name,
        file_type=request.type,
        is_public=request.is_public,
        parent=ParentRef.parse(request.parent_id),
        data=request.data,
    )
    return FileMetadataResponse(**file_node.to_response())


@router.get("", response_model=List[FileMetadataResponse])
async def list_files(
    parent_id: Optional[str] = Query(None, alias="parentId"),
    page: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service)
):
    """
    List the caller's files, 20 per page.

    Parameters:
        - parentId: Only list children of this folder (0 for the root)
        - page: Zero-based page number
        - X-Token header (required)

    Raises:
        - 401: Invalid or missing token
    """
    parent = ParentRef.parse(parent_id) if parent_id else None
    files = await file_service.list_files(current_user, parent, page)
    return [FileMetadataResponse(**file_node.to_response()) for file_node in files]


@router.get("/{file_id}", response_model=FileMetadataResponse)
async def get_file(
    file_id: str,
    current_user: User = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service)
):
    """
    Raises:
        - 401: Invalid or missing token
        - 404: File not found or not owned by the caller
    """
    file_node = await file_service.get_file(current_user, file_id)
    return FileMetadataResponse(**file_node.to_response())


@router.put("/{file_id}/publish", response_model=FileMetadataResponse)
async def publish_file(
    file_id: str,
    current_user: User = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service)
):
    """
    Make a file readable without a token.

    Raises:
        - 401: Invalid or missing token
        - 404: File not found or not owned by the caller
    """
    file_node = await file_service.set_public(current_user, file_id, True)
    return FileMetadataResponse(**file_node.to_response())


@router.put("/{file_id}/unpublish", response_model=FileMetadataResponse)
async def unpublish_file(
    file_id: str,
    current_user: User = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service)
):
    """
    Restrict reads of a file to its owner.

    Raises:
        - 401: Invalid or missing token
        - 404: File not found or not owned by the caller
    """
    file_node = await file_service.set_public(current_user, file_id, False)
    return FileMetadataResponse(**file_node.to_response())


@router.get("/{file_id}/data")
async def get_file_data(
    file_id: str,
    size: Optional[str] = Query(None),
    current_user: Optional[User] = Depends(get_optional_user),
    file_service: FileService = Depends(get_file_service)
):
    """
    Download the content of a file, or one of its thumbnails.

    Parameters:
        - size: Thumbnail width (500, 250 or 100)
        - X-Token header (optional; required for private files)

    Returns:
        - Raw bytes with a Content-Type derived from the file name

    Raises:
        - 400: The file is a folder
        - 404: File not found, not visible, or content missing
    """
    path, content_type = await file_service.read_content(current_user, file_id, size)
    return FileResponse(path, media_type=content_type)
