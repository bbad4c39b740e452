# bookme/core/request_context.py
"""
Per-request correlation id for log records.

``TimingMiddleware`` binds the id for the lifetime of a request; every log
record emitted while it is bound carries it as ``record.request_id`` so
``LOG_FORMAT`` in ``bookme.main`` can print it. Records emitted outside a
request (startup, migrations) show ``NO_REQUEST_ID``.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
import logging
from typing import Iterator, Optional

NO_REQUEST_ID = "-"

_bound_request_id: ContextVar[Optional[str]] = ContextVar("bookme_request_id", default=None)


def current_request_id() -> Optional[str]:
    return _bound_request_id.get()


@contextmanager
def bound_request_id(request_id: str) -> Iterator[str]:
    """Bind ``request_id`` for the enclosed block, restoring the previous id on exit."""
    token = _bound_request_id.set(request_id)
    try:
        yield request_id
    finally:
        _bound_request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Stamp records with the bound request id unless the caller passed one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = current_request_id() or NO_REQUEST_ID
        return True


def attach_request_id_filter(logger: Optional[logging.Logger] = None) -> None:
    """Install ``RequestIdFilter`` once on each handler of ``logger`` (root by default)."""
    target = logger or logging.getLogger()
    for handler in target.handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())
