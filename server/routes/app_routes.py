"""Service status and statistics routes."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from server.schemas.common import StatsResponse, StatusResponse

router = APIRouter(tags=["App"])


@router.get("/status", response_model=StatusResponse)
async def get_status(request: Request):
    """
    Report whether Redis and MongoDB are reachable.

    Returns:
        - redis, db: liveness flags

    Raises:
        - 500: Either dependency is down
    """
    redis_alive = request.app.state.token_store.is_alive()
    db_alive = request.app.state.metadata_store.is_alive()

    if not (redis_alive and db_alive):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Either Redis or the database is not connected"}
        )
    return StatusResponse(redis=redis_alive, db=db_alive)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(request: Request):
    """
    Count stored users and files.
    """
    metadata_store = request.app.state.metadata_store
    return StatsResponse(
        users=await metadata_store.count_users(),
        files=await metadata_store.count_files(),
    )
