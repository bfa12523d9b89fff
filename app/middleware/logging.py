import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("access")

class LoggingMiddleware(BaseHTTPMiddleware):
    """One access line per request; 5xx responses are logged as warnings"""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        client = request.client.host if request.client else "unknown"

        response = await call_next(request)

        elapsed = time.perf_counter() - started
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{client} {request.method} {request.url.path} "
            f"-> {response.status_code} in {elapsed:.4f}s"
        )
        response.headers["X-Process-Time"] = f"{elapsed:.6f}"
        return response
