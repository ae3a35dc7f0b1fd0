"""Durable named work queue on Redis lists.

Producers LPUSH onto the pending list. The consumer atomically moves one
entry into the processing list with BLMOVE, so a job claimed by a worker
that dies before acknowledging it is never lost: requeue_unacked() moves it
back to pending and it is delivered again. Delivery is therefore
at-least-once and consumers must be idempotent.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from common.constants import THUMBNAIL_QUEUE_NAME
from common.exceptions import StoreUnavailableError
from common.logging_config import get_logger
from common.models import ClaimedJob, Job

logger = get_logger(__name__)


class JobQueue:
    def __init__(self, client: redis.Redis, name: str = THUMBNAIL_QUEUE_NAME):
        self._client = client
        self._name = name
        self._pending_key = f"queue:{name}:pending"
        self._processing_key = f"queue:{name}:processing"
        self._failed_key = f"queue:{name}:failed"

    @property
    def name(self) -> str:
        return self._name

    async def enqueue(self, job: Job) -> bool:
        """
        Add a job without waiting on its outcome.

        Returns:
            False if Redis rejected the push; the error is logged, not raised
        """
        try:
            await self._client.lpush(self._pending_key, json.dumps(job.to_payload()))
        except RedisError as e:
            logger.error(f"Failed to enqueue job '{job.name}' on '{self._name}': {e}")
            return False
        logger.info(f"Enqueued job '{job.name}' on '{self._name}'")
        return True

    async def dequeue(self, timeout: float) -> Optional[ClaimedJob]:
        """
        Claim the oldest pending job, waiting up to timeout seconds.

        Entries that are not valid JSON objects are moved straight to the
        failed list and None is returned.
        """
        try:
            raw = await self._client.blmove(
                self._pending_key, self._processing_key, timeout, src="RIGHT", dest="LEFT"
            )
        except RedisError as e:
            raise StoreUnavailableError(f"Failed to dequeue from '{self._name}': {e}") from e

        if raw is None:
            return None

        try:
            payload = json.loads(raw)
            if not isinstance(payload, dict):
                raise ValueError("job payload is not an object")
        except ValueError as e:
            logger.error(f"Discarding malformed job on '{self._name}': {e}")
            await self._move_to_failed(raw, {"raw": raw}, str(e))
            return None

        return ClaimedJob(job=Job.from_payload(payload), raw=raw, payload=payload)

    async def ack(self, claimed: ClaimedJob) -> None:
        try:
            await self._client.lrem(self._processing_key, 1, claimed.raw)
        except RedisError as e:
            raise StoreUnavailableError(f"Failed to acknowledge job '{claimed.job.name}': {e}") from e

    async def release(self, claimed: ClaimedJob) -> None:
        """
        Put a claimed job back at the head of the pending list for redelivery.
        """
        try:
            pipe = self._client.pipeline()
            pipe.lrem(self._processing_key, 1, claimed.raw)
            pipe.rpush(self._pending_key, claimed.raw)
            await pipe.execute()
        except RedisError as e:
            raise StoreUnavailableError(f"Failed to release job '{claimed.job.name}': {e}") from e

    async def fail(self, claimed: ClaimedJob, error: str) -> None:
        await self._move_to_failed(claimed.raw, claimed.payload, error)

    async def _move_to_failed(self, raw: str, payload: Dict[str, Any], error: str) -> None:
        record = {
            "job": payload,
            "error": error,
            "failed_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            pipe = self._client.pipeline()
            pipe.lrem(self._processing_key, 1, raw)
            pipe.lpush(self._failed_key, json.dumps(record))
            await pipe.execute()
        except RedisError as e:
            raise StoreUnavailableError(f"Failed to record failed job on '{self._name}': {e}") from e

    async def requeue_unacked(self) -> int:
        """
        Return every claimed but unacknowledged job to the pending list.

        Returns:
            Number of jobs moved
        """
        moved = 0
        try:
            while await self._client.lmove(
                self._processing_key, self._pending_key, src="LEFT", dest="RIGHT"
            ) is not None:
                moved += 1
        except RedisError as e:
            raise StoreUnavailableError(f"Failed to requeue jobs on '{self._name}': {e}") from e

        if moved:
            logger.warning(f"Requeued {moved} unacknowledged job(s) on '{self._name}'")
        return moved

    async def counts(self) -> Dict[str, int]:
        try:
            pipe = self._client.pipeline()
            pipe.llen(self._pending_key)
            pipe.llen(self._processing_key)
            pipe.llen(self._failed_key)
            pending, processing, failed = await pipe.execute()
        except RedisError as e:
            raise StoreUnavailableError(f"Failed to read queue sizes for '{self._name}': {e}") from e
        return {"pending": pending, "processing": processing, "failed": failed}
