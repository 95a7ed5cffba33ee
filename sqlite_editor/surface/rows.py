# sqlite_editor/surface/rows.py
from __future__ import annotations

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from ..db.mutations import RowIdentifier, check_row_data, delete_rows, insert_row, update_cell
from ..sessions import SessionStore
from .common import database_for, json_body, require_str


def routes(store: SessionStore) -> list[Route]:
    async def insert(request: Request) -> JSONResponse:
        body = await json_body(request)
        table = require_str(body, "tableName", "Table name is required")
        row_data = check_row_data(body.get("rowData"))
        db = database_for(request, store)
        new_row = await run_in_threadpool(insert_row, db, table, row_data)
        return JSONResponse({"success": True, "message": "Row inserted successfully", "newRow": new_row})

    async def edit(request: Request) -> JSONResponse:
        body = await json_body(request)
        table = require_str(body, "tableName", "Table name is required")
        column = require_str(body, "columnName", "Column name is required")
        ident = RowIdentifier.parse(body.get("rowIdentifier"))
        db = database_for(request, store)
        affected = await run_in_threadpool(update_cell, db, table, ident, column, body.get("newValue"))
        return JSONResponse({"success": True, "message": f"Updated {affected} row(s)", "affectedRows": affected})

    async def delete(request: Request) -> JSONResponse:
        body = await json_body(request)
        table = require_str(body, "tableName", "Table name is required")
        ident = RowIdentifier.parse(body.get("rowIdentifier"))
        db = database_for(request, store)
        affected = await run_in_threadpool(delete_rows, db, table, ident)
        return JSONResponse({"success": True, "message": f"Deleted {affected} row(s)", "affectedRows": affected})

    return [
        Route("/api/insert", insert, methods=["POST"]),
        Route("/api/edit", edit, methods=["POST"]),
        Route("/api/delete", delete, methods=["POST"]),
    ]
