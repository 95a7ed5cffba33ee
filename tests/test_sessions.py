from __future__ import annotations

import pytest
from starlette.requests import Request

from sqlite_editor.errors import InvalidUploadError, MissingSessionError, SessionNotFoundError
from sqlite_editor.sessions import (
    DirectorySessionStore,
    safe_filename,
    session_component,
    session_id_from_request,
)


def _request(query: str = "", cookie: str | None = None) -> Request:
    headers = []
    if cookie is not None:
        headers.append((b"cookie", cookie.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "query_string": query.encode(), "headers": headers})


def test_query_param_wins_over_cookie():
    assert session_id_from_request(_request("sessionId=abc", "sessionId=def")) == "abc"


def test_cookie_fallback():
    assert session_id_from_request(_request(cookie="sessionId=def")) == "def"


def test_missing_session():
    with pytest.raises(MissingSessionError):
        session_id_from_request(_request())
    with pytest.raises(MissingSessionError):
        session_id_from_request(_request("sessionId="))


@pytest.mark.parametrize(
    "name, expected",
    [
        ("abc.db", "abc"),
        ("abc_shop.db", "abc"),
        ("abc", "abc"),
        (".hidden", None),
        ("_x", None),
    ],
)
def test_session_component(name, expected):
    assert session_component(name) == expected


def test_resolve_is_exact_not_prefix(store):
    (store.root / "abc.db").write_bytes(b"")
    (store.root / "abcdef_shop.db").write_bytes(b"")
    assert store.resolve("abc").name == "abc.db"
    assert store.resolve("abcdef").name == "abcdef_shop.db"
    with pytest.raises(SessionNotFoundError):
        store.resolve("ab")


def test_resolve_unknown_session(store):
    with pytest.raises(SessionNotFoundError):
        store.resolve("nope")


def test_resolve_does_not_escape_root(store, tmp_path):
    (tmp_path / "outside.db").write_bytes(b"")
    with pytest.raises(SessionNotFoundError):
        store.resolve("../outside")


def test_create_names_file_after_session(store):
    sid, path = store.create()
    assert path.parent == store.root
    assert path.name == f"{sid}.db"
    assert not path.exists()


def test_save_replaces_previous_upload(store):
    first = store.save("s1", "old.sqlite", b"one")
    second = store.save("s1", "new.db", b"two")
    assert not first.exists()
    assert second.read_bytes() == b"two"
    assert store.resolve("s1") == second
    assert store.original_filename(second) == "new.db"


def test_save_rejects_path_like_session(store):
    with pytest.raises(InvalidUploadError):
        store.save("../evil", "x.db", b"")


def test_original_filename_absent_for_created_db(store):
    sid, path = store.create()
    path.write_bytes(b"")
    assert store.original_filename(path) is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("shop.db", "shop.db"),
        ("../../etc/passwd.db", "passwd.db"),
        ("C:\\Users\\me\\my data.sqlite", "my-data.sqlite"),
        ("...", "database.db"),
    ],
)
def test_safe_filename(raw, expected):
    assert safe_filename(raw) == expected


def test_store_creates_root(tmp_path):
    root = tmp_path / "a" / "b"
    DirectorySessionStore(root)
    assert root.is_dir()


def test_remove_deletes_every_session_file(store):
    (store.root / "s2.db").write_bytes(b"")
    (store.root / "s2_extra.db").write_bytes(b"")
    (store.root / "s3.db").write_bytes(b"")
    store.remove("s2")
    assert sorted(p.name for p in store.root.iterdir()) == ["s3.db"]
