"""Session API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Response, status

from common.models import User
from server.dependencies import get_auth_service, get_current_user
from server.schemas.users import TokenResponse
from server.services.auth_service import AuthService

router = APIRouter(tags=["Authentication"])


@router.get("/connect", response_model=TokenResponse)
async def connect(
    authorization: Optional[str] = Header(None),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Exchange Basic credentials for a session token valid 24 hours.

    Parameters:
        - Authorization header: Basic base64(email:password)

    Returns:
        - token: value to send back in the X-Token header

    Raises:
        - 401: Invalid credentials
    """
    token = await auth_service.connect(authorization)
    return TokenResponse(token=token)


@router.get("/disconnect", status_code=status.HTTP_204_NO_CONTENT)
async def disconnect(
    x_token: Optional[str] = Header(None),
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Revoke the X-Token session.

    Raises:
        - 401: Invalid or missing token
    """
    await auth_service.disconnect(x_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
