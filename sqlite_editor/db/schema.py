# sqlite_editor/db/schema.py
from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass
from typing import Any, Sequence

from ..errors import ColumnNotFoundError, TableNotFoundError


@dataclass(frozen=True)
class ColumnDescriptor:
    cid: int
    name: str
    type: str
    not_null: bool
    default: Any
    pk: int

    @property
    def is_pk(self) -> bool:
        return self.pk > 0

    def as_pragma_row(self) -> dict[str, Any]:
        return {
            "cid": self.cid,
            "name": self.name,
            "type": self.type,
            "notnull": int(self.not_null),
            "dflt_value": self.default,
            "pk": self.pk,
        }


def quote_ident(name: str) -> str:
    """Quote a table/column name for interpolation; values are always bound."""
    return '"' + str(name).replace('"', '""') + '"'


def list_tables(con: sqlite3.Connection) -> list[str]:
    return [
        r[0]
        for r in con.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name;"
        ).fetchall()
    ]


def table_exists(con: sqlite3.Connection, name: str) -> bool:
    row = con.execute(
        "SELECT 1 FROM sqlite_master WHERE type='table' AND name = ? LIMIT 1;", (name,)
    ).fetchone()
    return row is not None


def require_table(con: sqlite3.Connection, name: str) -> None:
    if not table_exists(con, name):
        raise TableNotFoundError()


def describe_table(con: sqlite3.Connection, name: str) -> list[ColumnDescriptor]:
    """Introspect the live schema; never cached so DDL is always reflected."""
    return [
        ColumnDescriptor(
            cid=int(r["cid"]),
            name=r["name"],
            type=r["type"] or "",
            not_null=bool(r["notnull"]),
            default=r["dflt_value"],
            pk=int(r["pk"]),
        )
        for r in con.execute(f"PRAGMA table_info({quote_ident(name)});").fetchall()
    ]


def require_columns(columns: Sequence[ColumnDescriptor], names: Sequence[str], *, label: str = "Column") -> None:
    known = {c.name for c in columns}
    for n in names:
        if n not in known:
            raise ColumnNotFoundError(f"{label} '{n}' not found")


def primary_key(columns: Sequence[ColumnDescriptor]) -> list[ColumnDescriptor]:
    return sorted((c for c in columns if c.is_pk), key=lambda c: c.pk)


def is_autoincrement(con: sqlite3.Connection, table: str, column: str) -> bool:
    row = con.execute(
        "SELECT sql FROM sqlite_master WHERE type='table' AND name = ?;", (table,)
    ).fetchone()
    if not row or not row[0]:
        return False
    pattern = re.compile(
        r"[\"'`\[]?" + re.escape(column) + r"[\"'`\]]?\s+INTEGER\s+PRIMARY\s+KEY\s+AUTOINCREMENT",
        re.IGNORECASE,
    )
    return pattern.search(row[0]) is not None


def is_rowid_alias(columns: Sequence[ColumnDescriptor]) -> bool:
    pk = primary_key(columns)
    return len(pk) == 1 and pk[0].type.upper() == "INTEGER"
