"""User account API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, status

from common.models import User
from server.dependencies import get_auth_service, get_current_user
from server.schemas.users import CreateUserRequest, UserResponse
from server.services.auth_service import AuthService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: Optional[CreateUserRequest] = None,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Register a new user account.

    Parameters:
        - email: Unique email address
        - password: User password (only its digest is stored)

    Returns:
        - id, email of the created user

    Raises:
        - 400: Missing email, Missing password, Already exist
    """
    request = request or CreateUserRequest()
    user = await auth_service.register_user(request.email, request.password)
    return UserResponse(**user.to_response())


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """
    Return the user owning the X-Token session.

    Raises:
        - 401: Invalid or missing token
    """
    return UserResponse(**current_user.to_response())
