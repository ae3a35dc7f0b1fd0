"""Thumbnail job processing."""

import asyncio
from typing import Dict, List, Sequence

from common.constants import THUMBNAIL_WIDTHS
from common.exceptions import JobError
from common.logging_config import get_logger
from common.models import Job
from common.repositories.file_repository import FileRepository
from common.storage import LocalStorage, derivative_path
from worker.thumbnails import render_thumbnail

logger = get_logger(__name__)


class ThumbnailProcessor:
    """
    Generates the fixed set of derivatives for one image job.

    Every derivative is rendered in memory before any is written, and
    writes simply overwrite earlier output, so processing the same job
    twice leaves the same files behind.
    """

    def __init__(
        self,
        file_repo: FileRepository,
        storage: LocalStorage,
        widths: Sequence[int] = THUMBNAIL_WIDTHS
    ):
        self.file_repo = file_repo
        self.storage = storage
        self.widths = tuple(widths)

    async def process(self, job: Job) -> List[str]:
        """
        Returns:
            Paths of the written derivatives

        Raises:
            JobError: If the job is incomplete, the file is unknown, or any derivative fails
        """
        if not job.file_id:
            raise JobError("Missing fileId")
        if not job.user_id:
            raise JobError("Missing userId")

        logger.info(f"Processing {job.name or job.file_id}")
        file_node = await self.file_repo.get_owned(job.file_id, job.user_id)
        if file_node is None or not file_node.local_path:
            raise JobError("File not found")

        try:
            original = await self.storage.read_bytes(file_node.local_path)
        except OSError as e:
            raise JobError(f"Cannot read original image: {e}") from e

        rendered: Dict[int, bytes] = {}
        for width in self.widths:
            try:
                rendered[width] = await asyncio.to_thread(render_thumbnail, original, width)
            except Exception as e:
                # Pillow raises more than OSError: decompression bombs, unwritable formats
                raise JobError(f"Cannot generate {width}px thumbnail: {e}") from e

        paths = []
        for width, data in rendered.items():
            path = derivative_path(file_node.local_path, width)
            try:
                await self.storage.write_bytes(path, data)
            except OSError as e:
                raise JobError(f"Cannot write {width}px thumbnail: {e}") from e
            logger.info(f"Generating file: {path}, size: {width}")
            paths.append(path)

        return paths
