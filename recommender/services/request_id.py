"""
Correlation id propagation for outbound requests.

The inbound layer binds its request id with ``request_context``; the upstream
client forwards it as the ``X-Request-Id`` header. Tasks created inside the
context inherit it.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

from loguru import logger

X_REQUEST_ID = "X-Request-Id"

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def new_request_id() -> str:
    return str(uuid.uuid4())


def current_request_id() -> str:
    """The bound request id, or a freshly generated one when none is bound."""
    return _request_id.get() or new_request_id()


@contextmanager
def request_context(request_id: str | None = None) -> Iterator[str]:
    """Bind a request id (generated if not given) for the enclosed block."""
    request_id = request_id or new_request_id()
    token = _request_id.set(request_id)
    try:
        with logger.contextualize(request_id=request_id):
            yield request_id
    finally:
        _request_id.reset(token)
