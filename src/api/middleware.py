import logging
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its status code and duration"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_ip = request.client.host if request.client else "-"

        response = await call_next(request)

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"{client_ip} {request.method} {request.url.path} "
            f"{response.status_code} {duration_ms}ms"
        )
        return response
