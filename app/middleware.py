"""
Per-request tracing: every log line emitted while a request is handled
carries its request id, and the id is echoed back to the caller.
"""
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from structlog.contextvars import bound_contextvars

from app.logging_config import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128


def resolve_request_id(request: Request) -> str:
    """Reuse the caller's id when it is sane, otherwise mint one."""
    incoming = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH:
        return incoming
    return uuid.uuid4().hex


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


async def request_id_middleware(request: Request, call_next: Callable) -> Response:
    request_id = resolve_request_id(request)
    request.state.request_id = request_id
    started = time.perf_counter()

    with bound_contextvars(request_id=request_id, method=request.method, path=request.url.path):
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("request_failed", duration_ms=_elapsed_ms(started))
            raise

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "request_completed",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
            client_host=request.client.host if request.client else None,
        )

    response.headers[REQUEST_ID_HEADER] = request_id
    return response
