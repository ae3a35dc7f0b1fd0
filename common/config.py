"""Environment-driven settings for the API server and the thumbnail worker."""

import os
import tempfile

from common.constants import DEFAULT_FOLDER_NAME


HOST = os.environ.get("HOST", "0.0.0.0")

PORT = int(os.environ.get("PORT", "5000"))

FOLDER_PATH = os.environ.get("FOLDER_PATH", "").strip() or os.path.join(
    tempfile.gettempdir(), DEFAULT_FOLDER_NAME
)

REDIS_HOST = os.environ.get("REDIS_HOST", "localhost")

REDIS_PORT = int(os.environ.get("REDIS_PORT", "6379"))

DB_HOST = os.environ.get("DB_HOST", "localhost")

DB_PORT = int(os.environ.get("DB_PORT", "27017"))

DB_DATABASE = os.environ.get("DB_DATABASE", "files_manager")

WORKER_POLL_TIMEOUT = float(os.environ.get("WORKER_POLL_TIMEOUT", "5"))
