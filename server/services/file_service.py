"""File service for business logic."""

import base64
import binascii
import mimetypes
from typing import Any, List, Optional, Tuple

from common.constants import DEFAULT_CONTENT_TYPE, MAX_FILES_PER_PAGE, THUMBNAIL_WIDTHS
from common.exceptions import BadRequestError, NotFoundError, ValidationError
from common.job_queue import JobQueue
from common.logging_config import get_logger
from common.models import FileNode, FileType, Job, ParentRef, User
from common.repositories.file_repository import FileRepository
from common.storage import LocalStorage, derivative_path

logger = get_logger(__name__)


def parse_page(value: Any) -> int:
    """
    Zero-based page number; anything that is not a non-negative integer is 0.
    """
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 0
    return page if page > 0 else 0


def decode_data(data: Any) -> bytes:
    """
    Decode base64 upload content. Missing padding is tolerated; anything
    else that is not base64 is reported as missing data.
    """
    if not isinstance(data, str):
        raise ValidationError("Missing data")
    data = data.strip()
    try:
        return base64.b64decode(data + "=" * (-len(data) % 4), validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Missing data")


class FileService:
    def __init__(self, file_repo: FileRepository, job_queue: JobQueue, storage: LocalStorage):
        self.file_repo = file_repo
        self.job_queue = job_queue
        self.storage = storage

    async def create_file(
        self,
        owner: User,
        name: Optional[str],
        file_type: Optional[str],
        is_public: bool = False,
        parent: Optional[ParentRef] = None,
        data: Optional[str] = None,
    ) -> FileNode:
        """
        Validate and persist a folder, file or image.

        Checks run in a fixed order and the first failure wins: name, type,
        data (not needed for folders), then parent existence and kind.
        Image uploads enqueue a thumbnail job; the upload succeeds even if
        the enqueue does not.
        """
        parent = parent or ParentRef.root()

        if not name or not isinstance(name, str):
            raise ValidationError("Missing name")
        kind = FileType.parse(file_type)
        if kind is None:
            raise ValidationError("Missing type")
        if not data and kind != FileType.FOLDER:
            raise ValidationError("Missing data")

        if not parent.is_root:
            parent_node = await self.file_repo.get_by_id(str(parent.folder_id))
            if parent_node is None:
                raise ValidationError("Parent not found")
            if parent_node.type != FileType.FOLDER:
                raise ValidationError("Parent is not a folder")

        await self.storage.ensure_base_dir()

        local_path = None
        if kind != FileType.FOLDER:
            content = decode_data(data)
            local_path = self.storage.new_path()
            await self.storage.write_bytes(local_path, content)
            logger.debug(f"Stored {len(content)} bytes for '{name}'")

        file_node = await self.file_repo.create_file(
            owner_id=owner.user_id,
            name=name,
            file_type=kind,
            is_public=bool(is_public),
            parent=parent,
            local_path=local_path,
        )

        if kind == FileType.IMAGE:
            job = Job.for_image(owner.user_id, file_node.file_id)
            if not await self.job_queue.enqueue(job):
                logger.warning(f"Thumbnail job not queued [file_id={file_node.file_id}]")

        return file_node

    async def get_file(self, owner: User, file_id: str) -> FileNode:
        file_node = await self.file_repo.get_owned(file_id, owner.user_id)
        if file_node is None:
            raise NotFoundError()
        return file_node

    async def list_files(self, owner: User, parent: Optional[ParentRef], page: Any = 0) -> List[FileNode]:
        skip = parse_page(page) * MAX_FILES_PER_PAGE
        return await self.file_repo.list_files(owner.user_id, parent, skip, MAX_FILES_PER_PAGE)

    async def set_public(self, owner: User, file_id: str, is_public: bool) -> FileNode:
        file_node = await self.get_file(owner, file_id)
        await self.file_repo.set_public(file_id, owner.user_id, is_public)
        file_node.is_public = is_public
        logger.info(f"File visibility set to {'public' if is_public else 'private'} [file_id={file_id}]")
        return file_node

    async def read_content(
        self,
        requester: Optional[User],
        file_id: str,
        size: Optional[str] = None,
    ) -> Tuple[str, str]:
        """
        Locate the bytes to serve for a file or one of its thumbnails.

        Files that are private and not owned by the requester are reported
        exactly like missing ones.

        Returns:
            (path, content_type) tuple
        """
        file_node = await self.file_repo.get_by_id(file_id)
        requester_id = requester.user_id if requester else None
        if file_node is None or (not file_node.is_public and file_node.owner_id != requester_id):
            raise NotFoundError()

        if file_node.type == FileType.FOLDER:
            raise BadRequestError("A folder doesn't have content")

        width = None
        if size:
            sizes = {str(w): w for w in THUMBNAIL_WIDTHS}
            if size not in sizes:
                raise NotFoundError()
            width = sizes[size]

        path = derivative_path(file_node.local_path, width)
        if not await self.storage.is_file(path):
            raise NotFoundError()

        content_type, _ = mimetypes.guess_type(file_node.name)
        return path, content_type or DEFAULT_CONTENT_TYPE
