"""Local disk storage for uploaded file bytes and thumbnail derivatives."""

import os
import uuid
from typing import Optional

import aiofiles
import aiofiles.os

from common.config import FOLDER_PATH


def derivative_path(local_path: str, size: Optional[int]) -> str:
    """
    Path of a thumbnail derivative, or the original when size is None.
    """
    return f"{local_path}_{size}" if size is not None else local_path


class LocalStorage:
    def __init__(self, base_dir: str = FOLDER_PATH):
        self._base_dir = base_dir

    @property
    def base_dir(self) -> str:
        return self._base_dir

    async def ensure_base_dir(self) -> None:
        """Create the base directory and its parents if missing."""
        await aiofiles.os.makedirs(self._base_dir, exist_ok=True)

    def new_path(self) -> str:
        """
        Derive a fresh, unguessable path under the base directory.
        """
        return os.path.join(self._base_dir, str(uuid.uuid4()))

    async def write_bytes(self, path: str, data: bytes) -> None:
        """
        Write data to path, replacing any previous content.

        Raises:
            OSError: If the write fails
        """
        async with aiofiles.open(path, "wb") as f:
            await f.write(data)

    async def read_bytes(self, path: str) -> bytes:
        async with aiofiles.open(path, "rb") as f:
            return await f.read()

    async def is_file(self, path: str) -> bool:
        """True if path exists and is a regular file."""
        return await aiofiles.os.path.isfile(path)
