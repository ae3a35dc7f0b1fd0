"""MongoDB connection management for user and file metadata."""

from contextlib import contextmanager
from typing import Iterator, Optional

from pymongo import ASCENDING, AsyncMongoClient
from pymongo.errors import ConnectionFailure, PyMongoError

from common.config import DB_DATABASE, DB_HOST, DB_PORT
from common.constants import FILES_COLLECTION, USERS_COLLECTION
from common.exceptions import StoreUnavailableError
from common.logging_config import get_logger

logger = get_logger(__name__)


class MetadataStore:
    """
    Owns the database handle and exposes the users and files collections.

    Repositories run their queries inside guard() so that driver errors
    surface as StoreUnavailableError and keep the liveness flag current.
    """

    def __init__(self, database, client: Optional[AsyncMongoClient] = None):
        self._database = database
        self._client = client
        self._alive = True

    @property
    def users(self):
        return self._database[USERS_COLLECTION]

    @property
    def files(self):
        return self._database[FILES_COLLECTION]

    def is_alive(self) -> bool:
        return self._alive

    @contextmanager
    def guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except PyMongoError as e:
            if isinstance(e, ConnectionFailure):
                self._alive = False
            logger.error(f"MongoDB {operation} failed: {e}")
            raise StoreUnavailableError(f"MongoDB {operation} failed: {e}") from e
        self._alive = True

    async def connect(self) -> bool:
        """
        Ping the server and create the indexes the queries rely on.

        Returns:
            True if the server answered
        """
        try:
            await self._database.command("ping")
            await self.users.create_index([("email", ASCENDING)], unique=True)
            await self.files.create_index([("userId", ASCENDING), ("parentId", ASCENDING)])
        except PyMongoError as e:
            self._alive = False
            logger.warning(f"MongoDB ping failed: {e}")
            return False
        self._alive = True
        logger.info(f"Connected to MongoDB database: {self._database.name}")
        return True

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            logger.info("MongoDB connection closed")

    async def count_users(self) -> int:
        with self.guard("count users"):
            return await self.users.count_documents({})

    async def count_files(self) -> int:
        with self.guard("count files"):
            return await self.files.count_documents({})


def create_metadata_store(
    host: str = DB_HOST,
    port: int = DB_PORT,
    database: str = DB_DATABASE
) -> MetadataStore:
    client = AsyncMongoClient(host, port)
    return MetadataStore(client[database], client)
