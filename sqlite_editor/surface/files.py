# sqlite_editor/surface/files.py
from __future__ import annotations

import logging

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.requests import Request
from starlette.responses import FileResponse, JSONResponse
from starlette.routing import Route

from ..config import ALLOWED_UPLOAD_EXTENSIONS, SESSION_COOKIE, Config
from ..db.init import create_sample_database, looks_like_sqlite
from ..errors import InvalidUploadError
from ..sessions import SessionStore, new_session_id, session_id_from_request

log = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "database_export.db"


def is_allowed_upload(filename: str) -> bool:
    return filename.lower().endswith(ALLOWED_UPLOAD_EXTENSIONS)


def _format_size(n: int) -> str:
    mib = 1024 * 1024
    return f"{n // mib}MB" if n % mib == 0 else f"{n} bytes"


def export_filename(original: str | None) -> str:
    name = original or DEFAULT_EXPORT_NAME
    if "_edited" in name:
        return name
    stem, dot, ext = name.rpartition(".")
    if dot:
        return f"{stem}_edited.{ext}"
    return f"{name}_edited"


def routes(store: SessionStore, cfg: Config) -> list[Route]:
    async def create_db(request: Request) -> JSONResponse:
        sid, path = store.create()
        tables = await run_in_threadpool(create_sample_database, path)
        log.info("session=%s created sample database", sid)
        return JSONResponse(
            {
                "success": True,
                "message": "New database created successfully",
                "sessionId": sid,
                "tables": [{"name": t} for t in tables],
            }
        )

    async def upload(request: Request) -> JSONResponse:
        cookie_sid = request.cookies.get(SESSION_COOKIE)
        sid = cookie_sid or new_session_id()

        async with request.form() as form:
            file = form.get("file")
            if not isinstance(file, UploadFile) or not file.filename:
                raise InvalidUploadError("No file uploaded")
            if not is_allowed_upload(file.filename):
                raise InvalidUploadError(
                    f"Invalid file type. Only {', '.join(ALLOWED_UPLOAD_EXTENSIONS)} files are allowed."
                )
            data = await file.read(cfg.MAX_UPLOAD_BYTES + 1)
            filename = file.filename

        if len(data) > cfg.MAX_UPLOAD_BYTES:
            raise InvalidUploadError(
                f"File is too large. Maximum size is {_format_size(cfg.MAX_UPLOAD_BYTES)}."
            )
        if not looks_like_sqlite(data):
            raise InvalidUploadError("Invalid file type. The file is not a SQLite database.")

        path = await run_in_threadpool(store.save, sid, filename, data)
        response = JSONResponse(
            {
                "success": True,
                "sessionId": sid,
                "filename": filename,
                "filepath": str(path),
            }
        )
        if not cookie_sid:
            response.set_cookie(
                SESSION_COOKIE,
                sid,
                httponly=True,
                samesite="strict",
                path="/",
                secure=cfg.COOKIE_SECURE,
            )
        return response

    async def export(request: Request) -> FileResponse:
        sid = session_id_from_request(request)
        path = store.resolve(sid)
        name = export_filename(store.original_filename(path))
        log.info("session=%s exporting as %s", sid, name)
        return FileResponse(path, media_type="application/vnd.sqlite3", filename=name)

    return [
        Route("/api/create-db", create_db, methods=["POST"]),
        Route("/api/upload", upload, methods=["POST"]),
        Route("/api/export", export, methods=["GET"]),
    ]
