# sqlite_editor/sessions.py
"""
Session resolution and the on-disk session store.

A session is an opaque UUID token that maps to exactly one SQLite file inside
the store's directory. Files are named ``<sessionId>.db`` for databases created
server-side and ``<sessionId>_<originalName>`` for uploads, so the original
upload name can be recovered at export time.
"""
from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from starlette.requests import Request

from .config import SESSION_COOKIE
from .errors import InvalidUploadError, MissingSessionError, SessionNotFoundError

log = logging.getLogger(__name__)

_session_part_re = re.compile(r"^([^_./\\]+)")
_unsafe_name_re = re.compile(r"[^A-Za-z0-9._-]+")


def session_id_from_request(request: Request) -> str:
    """Explicit query parameter wins over the cookie."""
    sid = request.query_params.get(SESSION_COOKIE)
    if not sid:
        sid = request.cookies.get(SESSION_COOKIE)
    if not sid:
        raise MissingSessionError()
    return sid


def new_session_id() -> str:
    return str(uuid.uuid4())


def session_component(filename: str) -> str | None:
    m = _session_part_re.match(filename)
    return m.group(1) if m else None


def safe_filename(name: str) -> str:
    # Keep only the basename and a conservative character set.
    base = Path(name.replace("\\", "/")).name
    cleaned = _unsafe_name_re.sub("-", base).strip(".-")
    return cleaned or "database.db"


class SessionStore(Protocol):
    def create(self) -> tuple[str, Path]: ...

    def resolve(self, session_id: str) -> Path: ...

    def save(self, session_id: str, filename: str, data: bytes) -> Path: ...

    def remove(self, session_id: str) -> None: ...

    def original_filename(self, path: Path) -> Optional[str]: ...


@dataclass
class DirectorySessionStore:
    root: Path

    def __post_init__(self) -> None:
        self.root = Path(self.root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _files_for(self, session_id: str) -> list[Path]:
        return [
            p
            for p in sorted(self.root.iterdir())
            if p.is_file() and session_component(p.name) == session_id
        ]

    def create(self) -> tuple[str, Path]:
        sid = new_session_id()
        return sid, self.root / f"{sid}.db"

    def resolve(self, session_id: str) -> Path:
        matches = self._files_for(session_id)
        if not matches:
            raise SessionNotFoundError()
        if len(matches) > 1:
            log.warning("session=%s has %d files, using %s", session_id, len(matches), matches[0].name)
        return matches[0]

    def save(self, session_id: str, filename: str, data: bytes) -> Path:
        if session_component(session_id) != session_id:
            raise InvalidUploadError("Invalid session ID")
        self.remove(session_id)
        path = self.root / f"{session_id}_{safe_filename(filename)}"
        path.write_bytes(data)
        log.info("session=%s stored upload as %s (%d bytes)", session_id, path.name, len(data))
        return path

    def remove(self, session_id: str) -> None:
        for p in self._files_for(session_id):
            p.unlink()

    def original_filename(self, path: Path) -> Optional[str]:
        _, sep, rest = path.name.partition("_")
        return rest if sep and rest else None
