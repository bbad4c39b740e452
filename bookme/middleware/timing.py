# bookme/middleware/timing.py
"""
Request timing middleware: request ids, timing header, HTTP metrics.
"""

from collections.abc import Awaitable, Callable
import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.constants import UNTIMED_PATHS
from ..core.request_context import bound_request_id
from ..core.ulid_helper import generate_ulid
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class TimingMiddleware(BaseHTTPMiddleware):
    """
    Assign a request id, measure processing time and record HTTP metrics.

    An incoming ``X-Request-ID`` is reused so ids can follow a request
    across services; otherwise a fresh ULID is minted.
    """

    def __init__(self, app, slow_request_threshold_ms: float = 500.0):
        super().__init__(app)
        self.slow_request_threshold_ms = slow_request_threshold_ms

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_ulid()
        request.state.request_id = request_id
        with bound_request_id(request_id):
            if request.url.path in UNTIMED_PATHS:
                response = await call_next(request)
                response.headers[REQUEST_ID_HEADER] = request_id
                return response

            method = request.method
            prometheus_metrics.track_http_request_start(method)
            start_time = time.perf_counter()
            status_code = 500
            try:
                response = await call_next(request)
                status_code = response.status_code
            finally:
                elapsed = time.perf_counter() - start_time
                prometheus_metrics.track_http_request_end(method)
                prometheus_metrics.record_http_request(
                    method, self._endpoint_label(request), elapsed, status_code
                )

            process_time = elapsed * 1000
            response.headers["X-Process-Time"] = f"{process_time:.2f}ms"
            response.headers[REQUEST_ID_HEADER] = request_id

            if process_time > self.slow_request_threshold_ms:
                logger.warning(
                    f"Slow request: {request.method} {request.url.path} took {process_time:.2f}ms"
                )
            return response

    @staticmethod
    def _endpoint_label(request: Request) -> str:
        # Route template keeps label cardinality bounded
        route = request.scope.get("route")
        return getattr(route, "path", None) or "unmatched"
