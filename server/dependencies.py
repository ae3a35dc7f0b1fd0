"""FastAPI dependencies wiring services to the stores built at startup."""

from typing import Optional

from fastapi import Depends, Header, Request

from common.exceptions import UnauthorizedError
from common.models import User
from common.repositories.file_repository import FileRepository
from common.repositories.user_repository import UserRepository
from server.services.auth_service import AuthService
from server.services.file_service import FileService


def get_auth_service(request: Request) -> AuthService:
    state = request.app.state
    return AuthService(UserRepository(state.metadata_store), state.token_store)


def get_file_service(request: Request) -> FileService:
    state = request.app.state
    return FileService(FileRepository(state.metadata_store), state.job_queue, state.storage)


async def get_optional_user(
    x_token: Optional[str] = Header(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[User]:
    """
    Resolve the X-Token header to a user, if any.

    A missing, expired or unknown token yields None rather than an error.
    """
    return await auth_service.get_user(x_token)


async def get_current_user(
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
) -> User:
    """
    Require a valid X-Token header.

    Raises:
        UnauthorizedError: 401 if the token does not resolve to a user
    """
    if user is None:
        raise UnauthorizedError()
    request.state.user_id = user.user_id
    return user
