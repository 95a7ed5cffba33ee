# sqlite_editor/app.py
from __future__ import annotations

import logging
import sqlite3

import uvicorn
from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from .config import Config, load_config
from .errors import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    UnprocessableEntityError,
    UserInputError,
)
from .logging import setup_logging
from .middleware import RequestContextMiddleware
from .sessions import DirectorySessionStore, SessionStore
from .surface import files as surface_files
from .surface import rows as surface_rows
from .surface import sql as surface_sql
from .surface import tables as surface_tables

log = logging.getLogger(__name__)


async def _app_error(request: Request, exc: Exception) -> JSONResponse:
    status = getattr(exc, "status_code", 500)
    if status >= 500:
        log.exception("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    else:
        log.info("%s %s rejected (%d): %s", request.method, request.url.path, status, exc)
    return JSONResponse({"error": str(exc)}, status_code=status)


async def _sqlite_error(request: Request, exc: Exception) -> JSONResponse:
    log.exception("%s %s database error", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"error": str(exc)}, status_code=500)


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    log.exception("%s %s unhandled error", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"error": str(exc) or type(exc).__name__}, status_code=500)


async def _http_error(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


def build_app(cfg: Config, store: SessionStore | None = None) -> Starlette:
    if store is None:
        store = DirectorySessionStore(cfg.SESSION_DIR)

    # Register every route group in one place
    routes = [
        *surface_files.routes(store, cfg),
        *surface_tables.routes(store),
        *surface_sql.routes(store),
        *surface_rows.routes(store),
    ]

    app = Starlette(
        routes=routes,
        middleware=[Middleware(RequestContextMiddleware)],
        exception_handlers={
            UserInputError: _app_error,
            NotFoundError: _app_error,
            ConflictError: _app_error,
            UnprocessableEntityError: _app_error,
            DatabaseError: _app_error,
            sqlite3.Error: _sqlite_error,
            HTTPException: _http_error,
            Exception: _unhandled_error,
        },
    )
    app.state.config = cfg
    app.state.store = store
    return app


def main():
    cfg = load_config()
    setup_logging(cfg.LOG_LEVEL)

    log.info("Session directory=%s", cfg.SESSION_DIR.resolve())
    app = build_app(cfg)

    log.info("Starting SQLite editor API on http://%s:%d/api", cfg.HOST, cfg.PORT)
    uvicorn.run(app, host=cfg.HOST, port=cfg.PORT, log_level=cfg.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
