# sqlite_editor/logging.py
from __future__ import annotations

import contextvars
import functools
import logging
import re
import time
import uuid

_request_id = contextvars.ContextVar("request_id", default="-")
_incoming_id_re = re.compile(r"^[A-Za-z0-9-]{1,64}$")


class RequestContext(logging.Filter):
    def filter(self, record):
        record.request_id = _request_id.get("-")
        return True


def setup_logging(level: str = "info") -> None:
    lvl = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s %(levelname)s %(request_id)s %(name)s :: %(message)s",
    )
    for h in logging.getLogger().handlers:
        h.addFilter(RequestContext())


def new_request_id(incoming: str | None = None) -> str:
    """Use a well-formed caller-supplied id, else mint a short random one."""
    if incoming and _incoming_id_re.match(incoming):
        rid = incoming
    else:
        rid = uuid.uuid4().hex[:12]
    _request_id.set(rid)
    return rid


def current_request_id() -> str:
    return _request_id.get("-")


def timeit(fn):
    @functools.wraps(fn)
    def _wrap(*args, **kwargs):
        t0 = time.perf_counter()
        try:
            return fn(*args, **kwargs)
        finally:
            dt = (time.perf_counter() - t0) * 1000
            logging.getLogger(fn.__module__).debug(
                "duration_ms=%0.2f fn=%s", dt, fn.__name__
            )
    return _wrap
