from typing_extensions import override
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
from starlette.requests import Request
from starlette.responses import Response
from typing import Callable
from collections.abc import Awaitable

from app.core.logging import get_logger


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Reads or mints a request id, exposes it on `request.state.correlation_id`,
    echoes it back in the response and writes one access log line.
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name: str = header_name

    @override
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        corr_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.correlation_id = corr_id

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers[self.header_name] = corr_id
        get_logger("app.access", request).info(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response
