"""User repository for MongoDB operations."""

from typing import Optional

from pymongo.errors import DuplicateKeyError

from common.exceptions import ValidationError
from common.logging_config import get_logger
from common.metadata_store import MetadataStore
from common.models import NULL_ID, User, to_object_id

logger = get_logger(__name__)


class UserRepository:
    def __init__(self, store: MetadataStore):
        self._store = store

    async def create_user(self, email: str, password_hash: str) -> User:
        logger.debug(f"Creating user: {email}")
        document = {"email": email, "password": password_hash}
        with self._store.guard("insert user"):
            try:
                result = await self._store.users.insert_one(document)
            except DuplicateKeyError:
                logger.warning(f"Registration failed: email '{email}' already exists")
                raise ValidationError("Already exist")
        user_id = str(result.inserted_id)
        logger.info(f"User created successfully: {email} [user_id={user_id}]")
        return User(user_id=user_id, email=email, password_hash=password_hash)

    async def get_by_email(self, email: str) -> Optional[User]:
        logger.debug(f"Fetching user by email: {email}")
        with self._store.guard("find user"):
            document = await self._store.users.find_one({"email": email})

        if document is None:
            logger.debug(f"User not found: {email}")
            return None
        return User.from_document(document)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        object_id = to_object_id(user_id)
        if object_id == NULL_ID:
            return None

        with self._store.guard("find user"):
            document = await self._store.users.find_one({"_id": object_id})

        if document is None:
            logger.debug(f"User not found [user_id={user_id}]")
            return None
        return User.from_document(document)
