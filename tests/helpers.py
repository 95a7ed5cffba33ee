from __future__ import annotations

import sqlite3
from pathlib import Path

from sqlite_editor.db.client import Database


def make_sqlite_bytes(path: Path, script: str = "CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT);") -> bytes:
    con = sqlite3.connect(path)
    try:
        con.executescript(script)
        con.commit()
    finally:
        con.close()
    return path.read_bytes()


def query(db: Database, sql: str, params=()) -> list[tuple]:
    con = sqlite3.connect(db.path)
    try:
        return [tuple(r) for r in con.execute(sql, params).fetchall()]
    finally:
        con.close()


def execute_script(db: Database, script: str) -> None:
    con = sqlite3.connect(db.path)
    try:
        con.executescript(script)
        con.commit()
    finally:
        con.close()
