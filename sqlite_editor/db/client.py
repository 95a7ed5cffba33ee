# sqlite_editor/db/client.py
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator
from urllib.parse import quote

from ..errors import DatabaseUnavailableError


@dataclass
class Database:
    path: Path

    def connect(self, *, readonly: bool = False) -> sqlite3.Connection:
        mode = "ro" if readonly else "rw"
        uri = f"file:{quote(str(Path(self.path).resolve()))}?mode={mode}"
        try:
            # isolation_level=None: transactions are opened explicitly with BEGIN.
            con = sqlite3.connect(uri, uri=True, isolation_level=None)
        except sqlite3.Error as e:
            raise DatabaseUnavailableError(f"Unable to open database: {e}") from e
        try:
            con.row_factory = sqlite3.Row
            apply_pragmas(con, readonly=readonly)
            # Force a schema read so corrupt files fail here, not mid-request.
            con.execute("SELECT count(*) FROM sqlite_master;").close()
        except sqlite3.Error as e:
            con.close()
            raise DatabaseUnavailableError(f"Unable to open database: {e}") from e
        return con

    @contextmanager
    def session(self, *, readonly: bool = False) -> Iterator[sqlite3.Connection]:
        con = self.connect(readonly=readonly)
        try:
            yield con
        finally:
            con.close()


@contextmanager
def transaction(con: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    con.execute("BEGIN TRANSACTION;").close()
    try:
        yield con
        con.execute("COMMIT;").close()
    except BaseException:
        # A failing COMMIT may already have ended the transaction.
        if con.in_transaction:
            con.execute("ROLLBACK;").close()
        raise


def apply_pragmas(con: sqlite3.Connection, *, readonly: bool = False) -> None:
    con.execute("PRAGMA foreign_keys=ON;").close()
    if readonly:
        con.execute("PRAGMA query_only=ON;").close()


def fetch_row(row: sqlite3.Row | None) -> dict[str, Any] | None:
    if row is None:
        return None
    return {k: _jsonify_cell(row[k]) for k in row.keys()}


def fetch_rows(rows) -> list[dict[str, Any]]:
    return [fetch_row(r) for r in rows]


def _jsonify_cell(v: Any) -> Any:
    # SQLite returns bytes for blobs; convert to repr for JSON-ability.
    if isinstance(v, (bytes, bytearray)):
        return f"<{len(v)} bytes>"
    return v
