# sqlite_editor/db/gateway.py
"""
Single-statement SQL execution against a session database.

Statements are classified by their leading keyword and anything outside
SELECT/UPDATE/DELETE/INSERT/CREATE is refused. SELECTs run on a read-only
connection and are capped at ``MAX_SELECT_ROWS`` rows; everything else runs
inside an explicit transaction that is rolled back on failure.

The multi-statement guard is a plain split on ``;``. It does not understand
string literals or trigger bodies, so ``SELECT 'a;b'`` is refused as well.
"""
from __future__ import annotations

import logging
import re
from typing import Any

from ..config import MAX_SELECT_ROWS
from ..errors import InvalidInputError, MultiStatementError, UnsupportedQueryTypeError
from ..logging import timeit
from .client import Database, fetch_rows, transaction

log = logging.getLogger(__name__)

ALLOWED_QUERY_TYPES = ("SELECT", "UPDATE", "DELETE", "INSERT", "CREATE")

_query_type_re = re.compile(r"^\s*(" + "|".join(ALLOWED_QUERY_TYPES) + r")\b", re.IGNORECASE)
_leading_word_re = re.compile(r"^\s*([A-Za-z_]+)")


def classify(sql: str) -> str:
    m = _query_type_re.match(sql)
    if m:
        return m.group(1).upper()
    word = _leading_word_re.match(sql)
    shown = word.group(1).upper() if word else "unknown"
    raise UnsupportedQueryTypeError(
        f"Query type '{shown}' is not allowed. "
        f"Only {', '.join(ALLOWED_QUERY_TYPES)} queries are supported."
    )


def statement_count(sql: str) -> int:
    return len([part for part in sql.strip().split(";") if part.strip()])


def prepare_statement(sql: Any) -> str:
    """Validate a raw statement and return its query type."""
    if not isinstance(sql, str) or not sql.strip():
        raise InvalidInputError("SQL query is required")
    query_type = classify(sql)
    if statement_count(sql) > 1:
        raise MultiStatementError()
    return query_type


@timeit
def execute_statement(db: Database, sql: str, query_type: str | None = None, *, max_rows: int = MAX_SELECT_ROWS) -> dict[str, Any]:
    if query_type is None:
        query_type = prepare_statement(sql)
    if query_type == "SELECT":
        return _execute_select(db, sql, max_rows)
    return _execute_mutation(db, sql, query_type)


def _execute_select(db: Database, sql: str, max_rows: int) -> dict[str, Any]:
    with db.session(readonly=True) as con:
        cur = con.execute(sql)
        try:
            rows = cur.fetchmany(max_rows)
            remaining = sum(1 for _ in cur)
        finally:
            cur.close()

    total = len(rows) + remaining
    has_more = total > max_rows
    columns = [{"name": k} for k in rows[0].keys()] if rows else []
    log.info("select returned total_rows=%d has_more=%s", total, has_more)
    return {
        "success": True,
        "queryType": "SELECT",
        "results": fetch_rows(rows),
        "totalRows": total,
        "hasMoreRows": has_more,
        "columns": columns,
        "message": f"Query returned {total} rows" + (f" (limited to {max_rows})" if has_more else ""),
    }


def _execute_mutation(db: Database, sql: str, query_type: str) -> dict[str, Any]:
    with db.session() as con:
        with transaction(con):
            cur = con.execute(sql)
            affected = cur.rowcount if cur.rowcount >= 0 else 0
            last_id = cur.lastrowid if query_type == "INSERT" else None
            cur.close()

    log.info("%s affected_rows=%d", query_type.lower(), affected)
    return {
        "success": True,
        "queryType": query_type,
        "affectedRows": affected,
        "lastInsertRowid": last_id,
        "message": f"{query_type} operation affected {affected} row(s)",
    }
