# sqlite_editor/db/mutations.py
from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from ..errors import (
    ConflictError,
    InternalError,
    InvalidInputError,
    MissingRequiredFieldError,
    RowNotFoundError,
    UnprocessableEntityError,
)
from ..logging import timeit
from .client import Database, fetch_row, transaction
from .schema import (
    ColumnDescriptor,
    describe_table,
    is_autoincrement,
    is_rowid_alias,
    primary_key,
    quote_ident,
    require_columns,
    require_table,
)

log = logging.getLogger(__name__)

_MISSING = object()
_SCALARS = (str, int, float, bool, type(None))
_INT64 = (-(2**63), 2**63 - 1)


def check_value(value: Any, what: str) -> Any:
    if not isinstance(value, _SCALARS):
        raise InvalidInputError(f"{what} must be a string, number, boolean or null")
    if isinstance(value, int) and not _INT64[0] <= value <= _INT64[1]:
        raise InvalidInputError(f"{what} is outside the 64-bit integer range")
    return value


@dataclass(frozen=True)
class RowIdentifier:
    """Column/value equality predicates that target the row(s) to mutate."""

    pairs: tuple[tuple[str, Any], ...]
    composite: bool = False

    @classmethod
    def parse(cls, raw: Any) -> "RowIdentifier":
        if not isinstance(raw, Mapping):
            raise InvalidInputError("Valid row identifier is required")

        composite = raw.get("compositeIdentifier")
        if composite is not None:
            if not isinstance(composite, list) or not composite:
                raise InvalidInputError("Composite identifier must be a non-empty array")
            pairs = []
            for item in composite:
                if (
                    not isinstance(item, Mapping)
                    or not isinstance(item.get("column"), str)
                    or not item["column"]
                    or "value" not in item
                ):
                    raise InvalidInputError("Each composite identifier entry needs a column and a value")
                pairs.append((item["column"], check_value(item["value"], "Identifier value")))
            return cls(pairs=tuple(pairs), composite=True)

        column = raw.get("column")
        value = raw.get("value", _MISSING)
        if not isinstance(column, str) or not column or value is _MISSING:
            raise InvalidInputError("Valid row identifier is required")
        return cls(pairs=((column, check_value(value, "Identifier value")),))

    @property
    def columns(self) -> list[str]:
        return [c for c, _ in self.pairs]

    def where(self) -> tuple[str, list[Any]]:
        clause = " AND ".join(f"{quote_ident(c)} = ?" for c, _ in self.pairs)
        return clause, [v for _, v in self.pairs]

    def validate(self, columns: Sequence[ColumnDescriptor]) -> None:
        require_columns(columns, self.columns, label="Identifier column")


def check_row_data(row_data: Any) -> Mapping[str, Any]:
    if not isinstance(row_data, Mapping) or not row_data:
        raise InvalidInputError("Row data is required and must be a non-empty object")
    return row_data


def map_constraint_error(e: sqlite3.Error) -> Exception:
    msg = str(e)
    if "UNIQUE constraint failed" in msg:
        return ConflictError(msg)
    if "FOREIGN KEY constraint failed" in msg or "CHECK constraint failed" in msg:
        return UnprocessableEntityError(msg)
    return InternalError(msg)


def _count_matching(con: sqlite3.Connection, table: str, ident: RowIdentifier) -> int:
    clause, params = ident.where()
    row = con.execute(
        f"SELECT COUNT(*) AS count FROM {quote_ident(table)} WHERE {clause}", params
    ).fetchone()
    return int(row["count"])


def required_columns(con: sqlite3.Connection, table: str, columns: Sequence[ColumnDescriptor]) -> list[str]:
    return [
        c.name
        for c in columns
        if c.not_null
        and c.default is None
        and not (c.is_pk and (is_autoincrement(con, table, c.name) or is_rowid_alias(columns)))
    ]


@timeit
def insert_row(db: Database, table: str, row_data: Any) -> dict[str, Any] | None:
    check_row_data(row_data)

    with db.session() as con:
        require_table(con, table)
        columns = describe_table(con, table)

        for name in required_columns(con, table, columns):
            if name not in row_data:
                raise MissingRequiredFieldError(f"Missing required value for column '{name}'")

        known = {c.name for c in columns}
        names = [n for n in row_data if n in known]
        if not names:
            raise InvalidInputError("No valid columns were provided")
        values = [check_value(row_data[n], f"Value for column '{n}'") for n in names]

        sql = (
            f"INSERT INTO {quote_ident(table)} ({', '.join(quote_ident(n) for n in names)}) "
            f"VALUES ({', '.join('?' for _ in names)})"
        )
        try:
            with transaction(con):
                cur = con.execute(sql, values)
                last_id = cur.lastrowid
                cur.close()
                new_row = _reselect(con, table, columns, dict(zip(names, values)), last_id)
        except sqlite3.Error as e:
            log.warning("insert into %s failed: %s", table, e)
            raise map_constraint_error(e) from e

    log.info("inserted row into %s rowid=%s", table, last_id)
    return new_row


def _reselect(
    con: sqlite3.Connection,
    table: str,
    columns: Sequence[ColumnDescriptor],
    inserted: Mapping[str, Any],
    last_id: int | None,
) -> dict[str, Any] | None:
    pk = primary_key(columns)
    qt = quote_ident(table)

    if pk and all(c.name in inserted for c in pk):
        clause = " AND ".join(f"{quote_ident(c.name)} = ?" for c in pk)
        row = con.execute(f"SELECT * FROM {qt} WHERE {clause}", [inserted[c.name] for c in pk]).fetchone()
        return fetch_row(row)
    if pk and is_rowid_alias(columns) and last_id is not None:
        row = con.execute(f"SELECT * FROM {qt} WHERE {quote_ident(pk[0].name)} = ?", (last_id,)).fetchone()
        return fetch_row(row)

    # Best effort: tables without a usable key cannot be reselected uniquely.
    clause = " AND ".join(f"{quote_ident(n)} IS ?" for n in inserted)
    try:
        row = con.execute(
            f"SELECT * FROM {qt} WHERE {clause} ORDER BY rowid DESC LIMIT 1", list(inserted.values())
        ).fetchone()
    except sqlite3.OperationalError:
        # WITHOUT ROWID tables have no rowid to order by.
        row = con.execute(f"SELECT * FROM {qt} WHERE {clause} LIMIT 1", list(inserted.values())).fetchone()
    return fetch_row(row)


@timeit
def update_cell(db: Database, table: str, ident: RowIdentifier, column: str, new_value: Any) -> int:
    check_value(new_value, "New value")
    with db.session() as con:
        require_table(con, table)
        columns = describe_table(con, table)
        require_columns(columns, [column])
        if any(c.is_pk for c in columns if c.name == column):
            raise InvalidInputError(f"Primary key column '{column}' cannot be edited")
        ident.validate(columns)

        clause, params = ident.where()
        try:
            with transaction(con):
                if _count_matching(con, table, ident) == 0:
                    raise RowNotFoundError()
                cur = con.execute(
                    f"UPDATE {quote_ident(table)} SET {quote_ident(column)} = ? WHERE {clause}",
                    [new_value, *params],
                )
                affected = cur.rowcount
                cur.close()
        except sqlite3.Error as e:
            log.warning("update of %s.%s failed: %s", table, column, e)
            raise map_constraint_error(e) from e

    log.info("updated %s.%s affected_rows=%d", table, column, affected)
    return affected


@timeit
def delete_rows(db: Database, table: str, ident: RowIdentifier) -> int:
    with db.session() as con:
        require_table(con, table)
        columns = describe_table(con, table)
        ident.validate(columns)

        clause, params = ident.where()
        try:
            with transaction(con):
                if _count_matching(con, table, ident) == 0:
                    raise RowNotFoundError()
                cur = con.execute(f"DELETE FROM {quote_ident(table)} WHERE {clause}", params)
                affected = cur.rowcount
                cur.close()
        except sqlite3.Error as e:
            log.warning("delete from %s failed: %s", table, e)
            raise map_constraint_error(e) from e

    log.info("deleted from %s affected_rows=%d", table, affected)
    return affected
