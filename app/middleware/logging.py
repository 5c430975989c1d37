import time
import uuid
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("access")

class LoggingMiddleware(BaseHTTPMiddleware):
    """Access log line per request, tagged with the request id"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex
        request.state.request_id = request_id

        logger.info(
            f"🌐 {request.method} {request.url.path} - request_id={request_id} - "
            f"Client: {request.client.host if request.client else 'unknown'}"
        )

        response = await call_next(request)

        process_time = time.time() - start_time
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            f"{'✅' if level == logging.INFO else '⚠️'} {request.method} {request.url.path} - "
            f"request_id={request_id} - Status: {response.status_code} - "
            f"Time: {process_time:.4f}s"
        )

        response.headers["X-Request-Id"] = request_id
        response.headers["X-Process-Time"] = str(process_time)
        return response
