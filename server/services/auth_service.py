"""Authentication service for business logic."""

from typing import Any, Optional

from common.constants import TOKEN_TTL_SECONDS
from common.exceptions import UnauthorizedError, ValidationError
from common.logging_config import get_logger
from common.models import User
from common.repositories.user_repository import UserRepository
from common.token_store import TokenStore
from server.auth import (
    generate_token,
    hash_password,
    parse_basic_credentials,
    token_key,
    verify_password,
)

logger = get_logger(__name__)


class AuthService:
    def __init__(self, user_repo: UserRepository, token_store: TokenStore):
        self.user_repo = user_repo
        self.token_store = token_store

    async def register_user(self, email: Any, password: Any) -> User:
        if not email or not isinstance(email, str):
            raise ValidationError("Missing email")
        if not password or not isinstance(password, str):
            raise ValidationError("Missing password")

        logger.info(f"Attempting to register user: {email}")
        existing_user = await self.user_repo.get_by_email(email)
        if existing_user is not None:
            logger.warning(f"Registration failed: email '{email}' already exists")
            raise ValidationError("Already exist")

        return await self.user_repo.create_user(email, hash_password(password))

    async def connect(self, authorization: Optional[str]) -> str:
        """
        Exchange Basic credentials for a new session token.

        Raises:
            UnauthorizedError: If the header is malformed or the credentials do not match
        """
        email, password = parse_basic_credentials(authorization)

        logger.info(f"Login attempt for user: {email}")
        user = await self.user_repo.get_by_email(email)
        if user is None:
            logger.warning(f"Login failed: email '{email}' not found")
            raise UnauthorizedError()

        if not verify_password(password, user.password_hash):
            logger.warning(f"Login failed: invalid password for email '{email}'")
            raise UnauthorizedError()

        token = generate_token()
        await self.token_store.set(token_key(token), user.user_id, TOKEN_TTL_SECONDS)
        logger.info(f"Successfully logged in user: {email} [user_id={user.user_id}]")
        return token

    async def get_user(self, token: Optional[str]) -> Optional[User]:
        """
        Resolve a session token to its user.

        Returns None for a missing token, an expired or unknown token, or a
        token whose user no longer exists. Store failures still raise.
        """
        if not token:
            return None

        user_id = await self.token_store.get(token_key(token))
        if not user_id:
            logger.debug("Token resolution failed: unknown or expired token")
            return None

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            logger.warning(f"Token points to missing user [user_id={user_id}]")
        return user

    async def disconnect(self, token: str) -> None:
        await self.token_store.delete(token_key(token))
        logger.info("Session token revoked")
