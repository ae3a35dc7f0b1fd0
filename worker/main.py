"""Entry point for the thumbnail worker.

Claims jobs from the thumbnail queue one at a time and writes the
derivatives of each image next to the original.
"""

import asyncio
import signal
import sys
from typing import Optional

from common.config import WORKER_POLL_TIMEOUT
from common.exceptions import JobError, StoreUnavailableError
from common.job_queue import JobQueue
from common.logging_config import setup_logging
from common.metadata_store import create_metadata_store
from common.models import ClaimedJob
from common.repositories.file_repository import FileRepository
from common.storage import LocalStorage
from common.token_store import create_redis_client
from worker.processor import ThumbnailProcessor

logger = setup_logging('worker')

RETRY_DELAY_SECONDS = 1.0


async def handle_job(queue: JobQueue, processor: ThumbnailProcessor, claimed: ClaimedJob) -> bool:
    """
    Process one claimed job and settle it on the queue.

    Job errors and unexpected exceptions mark the job failed. Store outages
    hand the job back to the queue so it is delivered again.

    Returns:
        True if the job was acknowledged
    """
    job = claimed.job
    try:
        await processor.process(job)
    except JobError as e:
        logger.error(f"Job '{job.name}' failed: {e}")
        await queue.fail(claimed, str(e))
        return False
    except StoreUnavailableError as e:
        logger.error(f"Job '{job.name}' interrupted, returning it to the queue: {e}")
        await queue.release(claimed)
        return False
    except Exception as e:
        logger.exception(f"Job '{job.name}' crashed: {e}")
        await queue.fail(claimed, f"Unexpected error: {e}")
        return False

    await queue.ack(claimed)
    logger.info(f"Job '{job.name}' done")
    return True


async def run_worker(
    queue: JobQueue,
    processor: ThumbnailProcessor,
    stop_event: asyncio.Event,
    poll_timeout: float = WORKER_POLL_TIMEOUT,
    max_jobs: Optional[int] = None
) -> int:
    """
    Consume jobs until stop_event is set or max_jobs have been handled.

    Returns:
        Number of jobs handled
    """
    handled = 0
    while not stop_event.is_set():
        if max_jobs is not None and handled >= max_jobs:
            break
        try:
            claimed = await queue.dequeue(poll_timeout)
        except StoreUnavailableError as e:
            logger.error(f"Queue unavailable: {e}")
            await asyncio.sleep(RETRY_DELAY_SECONDS)
            continue

        if claimed is None:
            continue

        try:
            await handle_job(queue, processor, claimed)
        except StoreUnavailableError as e:
            logger.error(f"Could not settle job '{claimed.job.name}': {e}")
            await asyncio.sleep(RETRY_DELAY_SECONDS)
        handled += 1

    return handled


async def serve() -> None:
    redis_client = create_redis_client()
    metadata_store = create_metadata_store()
    queue = JobQueue(redis_client)
    processor = ThumbnailProcessor(FileRepository(metadata_store), LocalStorage())

    if not await metadata_store.connect():
        logger.warning("MongoDB not reachable at startup")

    await queue.requeue_unacked()
    logger.info(f"Worker listening on queue '{queue.name}': {await queue.counts()}")

    stop_event = asyncio.Event()

    def shutdown(sig=None):
        if sig:
            logger.info(f"Received signal {sig}, shutting down...")
        stop_event.set()

    if sys.platform != 'win32':
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, lambda s=sig: shutdown(s))

    try:
        handled = await run_worker(queue, processor, stop_event)
        logger.info(f"Worker stopped after {handled} job(s)")
    finally:
        await metadata_store.close()
        await redis_client.aclose()


def main() -> None:
    """Bootstrap the thumbnail worker."""
    logger.info("Initializing thumbnail worker...")
    try:
        asyncio.run(serve())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")


if __name__ == "__main__":
    main()
