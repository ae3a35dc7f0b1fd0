"""Repository layer for metadata access."""

from common.repositories.user_repository import UserRepository
from common.repositories.file_repository import FileRepository

__all__ = [
    "UserRepository",
    "FileRepository",
]
