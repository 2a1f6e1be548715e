# sample/adapters/api/middleware.py
import uuid

import structlog
from fastapi import Request

REQUEST_ID_HEADER = "X-Request-ID"


async def bind_request_context(request: Request, call_next):
    """Binds a request id into the structlog context for the whole request."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )
    try:
        response = await call_next(request)
    finally:
        structlog.contextvars.clear_contextvars()

    response.headers[REQUEST_ID_HEADER] = request_id
    return response
