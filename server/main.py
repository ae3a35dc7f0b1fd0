"""Entry point for the API server."""

import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from common.config import FOLDER_PATH, HOST, PORT
from common.exceptions import (
    BadRequestError,
    FilesManagerError,
    NotFoundError,
    StoreUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from common.job_queue import JobQueue
from common.logging_config import setup_logging
from common.metadata_store import create_metadata_store
from common.storage import LocalStorage
from common.token_store import TokenStore, create_redis_client
from server.routes import app_router, auth_router, file_router, user_router
from server.schemas.common import ErrorResponse

logger = setup_logging('server')


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def init_state(app: FastAPI) -> None:
    """
    Build the store clients once per process, unless already provided.
    """
    state = app.state
    if getattr(state, "token_store", None) is None:
        redis_client = create_redis_client()
        state.token_store = TokenStore(redis_client)
        state.job_queue = JobQueue(redis_client)
    if getattr(state, "metadata_store", None) is None:
        state.metadata_store = create_metadata_store()
    if getattr(state, "storage", None) is None:
        state.storage = LocalStorage(FOLDER_PATH)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Files Manager",
        description="Personal file storage with token sessions and image thumbnails",
        version="1.0.0"
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """
        Middleware to log all HTTP requests and responses.
        """
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()
        logger.info(f"Request started: {request.method} {request.url.path} [request_id={request_id}]")

        response = await call_next(request)

        duration = time.time() - start_time
        user_id = getattr(request.state, 'user_id', None)
        logger.info(
            f"Request completed: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s "
            f"[request_id={request_id}] [user_id={user_id or 'anonymous'}]"
        )

        response.headers["X-Request-ID"] = request_id
        return response

    @app.on_event("startup")
    async def startup_event():
        logger.info("Server starting up...")
        init_state(app)

        if not await app.state.token_store.connect():
            logger.warning("Redis not reachable at startup")
        if not await app.state.metadata_store.connect():
            logger.warning("MongoDB not reachable at startup")

        await app.state.storage.ensure_base_dir()
        logger.info(f"Storing files under {app.state.storage.base_dir}")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Server shutting down...")
        await app.state.token_store.close()
        await app.state.metadata_store.close()

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.warning(f"Validation error: {exc} [request_id={request_id}] path={request.url.path}")
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.warning(f"Malformed request: {exc.errors()} [request_id={request_id}] path={request.url.path}")
        return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request")

    @app.exception_handler(BadRequestError)
    async def bad_request_handler(request: Request, exc: BadRequestError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.warning(f"Bad request: {exc} [request_id={request_id}] path={request.url.path}")
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(request: Request, exc: UnauthorizedError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.warning(f"Unauthorized: [request_id={request_id}] path={request.url.path}")
        return _error_response(status.HTTP_401_UNAUTHORIZED, "Unauthorized")

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.warning(f"Not found: [request_id={request_id}] path={request.url.path}")
        return _error_response(status.HTTP_404_NOT_FOUND, "Not found")

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.error(f"Store unavailable: {exc} [request_id={request_id}] path={request.url.path}", exc_info=True)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")

    @app.exception_handler(FilesManagerError)
    async def files_manager_error_handler(request: Request, exc: FilesManagerError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.error(f"Unhandled error: {exc} [request_id={request_id}] path={request.url.path}", exc_info=True)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")

    @app.exception_handler(OSError)
    async def os_error_handler(request: Request, exc: OSError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.error(f"Filesystem error: {exc} [request_id={request_id}] path={request.url.path}", exc_info=True)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.error(f"Unexpected error: {exc} [request_id={request_id}] path={request.url.path}", exc_info=True)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")

    app.include_router(app_router)
    app.include_router(user_router)
    app.include_router(auth_router)
    app.include_router(file_router)

    return app


app = create_app()


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "server.main:app",
        host=HOST,
        port=PORT,
    )


if __name__ == "__main__":
    main()
