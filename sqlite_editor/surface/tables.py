# sqlite_editor/surface/tables.py
from __future__ import annotations

import math
from typing import Any

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from ..config import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..db.client import Database, fetch_rows
from ..db.schema import describe_table, list_tables, quote_ident, require_table
from ..errors import InvalidInputError
from ..sessions import SessionStore
from .common import database_for


def parse_pagination(params) -> tuple[int, int]:
    try:
        page = int(params.get("page", DEFAULT_PAGE))
    except ValueError:
        raise InvalidInputError("Invalid page number") from None
    if page < 1:
        raise InvalidInputError("Invalid page number")

    try:
        limit = int(params.get("limit", DEFAULT_PAGE_LIMIT))
    except ValueError:
        raise InvalidInputError(f"Invalid limit. Must be between 1 and {MAX_PAGE_LIMIT}") from None
    if limit < 1 or limit > MAX_PAGE_LIMIT:
        raise InvalidInputError(f"Invalid limit. Must be between 1 and {MAX_PAGE_LIMIT}")
    return page, limit


def read_tables(db: Database) -> list[dict[str, str]]:
    with db.session(readonly=True) as con:
        return [{"name": n} for n in list_tables(con)]


def read_page(db: Database, table: str, page: int, limit: int) -> dict[str, Any]:
    with db.session(readonly=True) as con:
        require_table(con, table)
        columns = [c.as_pragma_row() for c in describe_table(con, table)]
        qt = quote_ident(table)
        total = int(con.execute(f"SELECT COUNT(*) FROM {qt}").fetchone()[0])
        rows = con.execute(
            f"SELECT * FROM {qt} LIMIT ? OFFSET ?", (limit, (page - 1) * limit)
        ).fetchall()

    return {
        "tableName": table,
        "columns": columns,
        "data": fetch_rows(rows),
        "pagination": {
            "page": page,
            "limit": limit,
            "totalRows": total,
            "totalPages": math.ceil(total / limit),
        },
    }


def routes(store: SessionStore) -> list[Route]:
    async def tables(request: Request) -> JSONResponse:
        db = database_for(request, store)
        return JSONResponse({"tables": await run_in_threadpool(read_tables, db)})

    async def table_data(request: Request) -> JSONResponse:
        page, limit = parse_pagination(request.query_params)
        db = database_for(request, store)
        table = request.path_params["table_name"]
        return JSONResponse(await run_in_threadpool(read_page, db, table, page, limit))

    return [
        Route("/api/tables", tables, methods=["GET"]),
        Route("/api/data/{table_name}", table_data, methods=["GET"]),
    ]
