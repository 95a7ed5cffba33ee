# sqlite_editor/surface/sql.py
from __future__ import annotations

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from ..db.gateway import execute_statement, prepare_statement
from ..sessions import SessionStore
from .common import database_for, json_body


def routes(store: SessionStore) -> list[Route]:
    async def run_sql(request: Request) -> JSONResponse:
        """Execute one SELECT/UPDATE/DELETE/INSERT/CREATE statement."""
        body = await json_body(request)
        sql = body.get("sql")
        query_type = prepare_statement(sql)
        db = database_for(request, store)
        result = await run_in_threadpool(execute_statement, db, sql, query_type)
        return JSONResponse(result)

    return [Route("/api/sql", run_sql, methods=["POST"])]
