"""
Application factory.

Run with `uvicorn main:create_app --factory` (from `api/`) or `python main.py`.
Services are built here and handed to routes through `app.state`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from auth import router as auth_router
from auth.service import AuthService
from core import db
from core.config import Settings
from core.errors import (
    ConflictError,
    InvalidCredentialError,
    InvalidPasswordError,
    InvalidTokenError,
    NotFoundError,
    PersistenceError,
    QueryError,
    RequestValidationFailed,
)
from core.logging_config import configure_logging, get_logging_config
from core.schemas import ApiResponse
from documents.repository import DocumentRepository
from documents.store import DocumentStore, PostgresDocumentStore
from tasks import router as tasks_router
from tasks.service import TasksService
from users import router as users_router
from users.service import UsersService

logger = logging.getLogger(__name__)


def _error_response(
    status_code: int,
    message: str,
    *,
    error: object = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ApiResponse(success=False, message=message, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=headers)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_: Request, exc: NotFoundError) -> JSONResponse:
        return _error_response(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(InvalidCredentialError)
    async def _invalid_credential(_: Request, exc: InvalidCredentialError) -> JSONResponse:
        return _error_response(status.HTTP_401_UNAUTHORIZED, str(exc))

    @app.exception_handler(InvalidTokenError)
    async def _invalid_token(_: Request, exc: InvalidTokenError) -> JSONResponse:
        return _error_response(status.HTTP_401_UNAUTHORIZED, str(exc))

    @app.exception_handler(InvalidPasswordError)
    async def _invalid_password(_: Request, exc: InvalidPasswordError) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(ConflictError)
    async def _conflict(_: Request, exc: ConflictError) -> JSONResponse:
        return _error_response(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(RequestValidationFailed)
    async def _validation_failed(_: Request, exc: RequestValidationFailed) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc), error=exc.violations)

    @app.exception_handler(QueryError)
    async def _bad_query(_: Request, exc: QueryError) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(PersistenceError)
    async def _persistence(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("persistence_failure path=%s detail=%s", request.url.path, exc, exc_info=exc)
        return _error_response(status.HTTP_502_BAD_GATEWAY, "Storage backend error.")

    @app.exception_handler(HTTPException)
    async def _http_error(_: Request, exc: HTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail), headers=exc.headers)


def create_app(settings: Settings | None = None, store: DocumentStore | None = None) -> FastAPI:
    """
    Build the API. Without an explicit `store`, documents live in PostgreSQL
    and the pool is opened/closed by the app lifespan.
    """
    settings = settings or Settings.from_env()
    document_store = store or PostgresDocumentStore()
    use_postgres = store is None

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if not use_postgres:
            yield
            return
        # Initialize the DB pool once per process.
        await db.init_pool()
        try:
            await document_store.ensure_schema()
            yield
        finally:
            await db.close_pool()

    app = FastAPI(title="Tasks API", lifespan=lifespan)

    documents = DocumentRepository(document_store)
    app.state.settings = settings
    app.state.auth_service = AuthService(documents, settings.auth)
    app.state.tasks_service = TasksService(documents)
    app.state.users_service = UsersService(documents)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)

    app.include_router(auth_router.router, tags=["auth"])
    app.include_router(tasks_router.router, tags=["tasks"])
    app.include_router(users_router.router, tags=["users"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"success": True, "message": "Welcome to the Tasks API!"}

    return app


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.info("starting_server port=%s app_env=%s", settings.port, settings.app_env)
    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=settings.port,
        log_config=get_logging_config(settings.log_level),
    )


if __name__ == "__main__":
    main()
