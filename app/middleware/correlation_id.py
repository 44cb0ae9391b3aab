"""
Correlation ID middleware: tags every request with an ID and times it
"""

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import config
from app.core.logger import logger
from app.utils.correlation_id import create_correlation_id, set_correlation_id

SLOW_REQUEST_MS = 1000


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    - Takes the correlation ID from the request header (or generates one)
    - Stores it in context so every log line of the request carries it
    - Echoes it in the response headers
    - Logs the request duration
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(config.correlation_id_header) or create_correlation_id()
        set_correlation_id(correlation_id)
        request.state.correlation_id = correlation_id

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - started) * 1000)

        response.headers[config.correlation_id_header] = correlation_id

        logger.performance(
            f"{request.method} {request.url.path}",
            duration_ms,
            threshold_ms=SLOW_REQUEST_MS,
            metadata={"event": "http_request", "status_code": response.status_code},
        )
        return response
