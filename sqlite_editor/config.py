# sqlite_editor/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv, find_dotenv

# Fixed protocol limits; not configurable.
MAX_SELECT_ROWS = 1000
DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 50
MAX_PAGE_LIMIT = 100
ALLOWED_UPLOAD_EXTENSIONS = (".sqlite", ".db")
SESSION_COOKIE = "sessionId"


def _as_bool(v: str | None, default: bool) -> bool:
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    HOST: str
    PORT: int
    SESSION_DIR: Path
    MAX_UPLOAD_BYTES: int
    LOG_LEVEL: str
    COOKIE_SECURE: bool

    def validate(self) -> None:
        if not 0 < self.PORT < 65536:
            raise ValueError(f"PORT must be between 1 and 65535, got {self.PORT}.")
        if self.MAX_UPLOAD_BYTES <= 0:
            raise ValueError("MAX_UPLOAD_BYTES must be positive.")
        self.SESSION_DIR.mkdir(parents=True, exist_ok=True)


def load_config() -> Config:
    load_dotenv(find_dotenv(usecwd=True))

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    session_dir = Path(os.getenv("SESSION_DIR", "tmp"))
    max_upload = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
    log_level = os.getenv("LOG_LEVEL", "info")
    cookie_secure = _as_bool(os.getenv("COOKIE_SECURE"), False)

    cfg = Config(
        HOST=host,
        PORT=port,
        SESSION_DIR=session_dir,
        MAX_UPLOAD_BYTES=max_upload,
        LOG_LEVEL=log_level,
        COOKIE_SECURE=cookie_secure,
    )
    cfg.validate()
    return cfg
