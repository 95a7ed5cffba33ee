from __future__ import annotations

from pathlib import Path

import pytest
from starlette.testclient import TestClient

from sqlite_editor.app import build_app
from sqlite_editor.config import Config
from sqlite_editor.db.client import Database
from sqlite_editor.db.init import create_sample_database
from sqlite_editor.sessions import DirectorySessionStore


@pytest.fixture
def session_dir(tmp_path: Path) -> Path:
    d = tmp_path / "sessions"
    d.mkdir()
    return d


@pytest.fixture
def cfg(session_dir: Path) -> Config:
    return Config(
        HOST="127.0.0.1",
        PORT=8000,
        SESSION_DIR=session_dir,
        MAX_UPLOAD_BYTES=1024 * 1024,
        LOG_LEVEL="debug",
        COOKIE_SECURE=False,
    )


@pytest.fixture
def store(session_dir: Path) -> DirectorySessionStore:
    return DirectorySessionStore(session_dir)


@pytest.fixture
def client(cfg: Config, store: DirectorySessionStore):
    with TestClient(build_app(cfg, store)) as c:
        yield c


@pytest.fixture
def session_id(store: DirectorySessionStore) -> str:
    """A session seeded with the sample users/products database."""
    sid, path = store.create()
    create_sample_database(path)
    return sid


@pytest.fixture
def db(store: DirectorySessionStore, session_id: str) -> Database:
    return Database(store.resolve(session_id))
