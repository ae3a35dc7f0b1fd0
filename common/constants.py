"""Project-wide constants shared by the API server and the thumbnail worker."""

from typing import Tuple

AUTH_KEY_PREFIX: str = "auth_"
TOKEN_TTL_SECONDS: int = 24 * 60 * 60

ROOT_FOLDER_ID: int = 0
MAX_FILES_PER_PAGE: int = 20
DEFAULT_FOLDER_NAME: str = "files_manager"
DEFAULT_CONTENT_TYPE: str = "text/plain; charset=utf-8"

THUMBNAIL_QUEUE_NAME: str = "thumbnail generation"
THUMBNAIL_WIDTHS: Tuple[int, ...] = (500, 250, 100)

USERS_COLLECTION: str = "users"
FILES_COLLECTION: str = "files"
