# sqlite_editor/surface/common.py
from __future__ import annotations

import json
from typing import Any

from starlette.requests import Request

from ..db.client import Database
from ..errors import InvalidInputError
from ..sessions import SessionStore, session_id_from_request


async def json_body(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidInputError("Request body must be valid JSON") from e
    if not isinstance(body, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return body


def require_str(body: dict[str, Any], key: str, message: str) -> str:
    value = body.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidInputError(message)
    return value


def database_for(request: Request, store: SessionStore) -> Database:
    return Database(store.resolve(session_id_from_request(request)))
