"""
Request Context Middleware.

Every request gets an ID (X-Request-ID, generated when absent), a frontend
tag taken from X-Frontend-ID and a timing header (X-Response-Time). The ID
and frontend are bound to the structlog context so every record the notes
service writes while handling the request carries them.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notekeeper.backend.core.logging import FRONTENDS, get_logger

logger = get_logger(__name__)

KNOWN_FRONTENDS = FRONTENDS


def resolve_frontend(header: str | None) -> str:
    """Lower-cased X-Frontend-ID if it names a known client, else ``unknown``."""
    frontend = (header or "").strip().lower()
    return frontend if frontend in KNOWN_FRONTENDS else "unknown"


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds request ID and frontend, times the request, logs its outcome."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        frontend = resolve_frontend(request.headers.get("X-Frontend-ID"))
        start = time.perf_counter()

        request.state.request_id = request_id
        request.state.frontend = frontend

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            # The exception handlers build the response
            logger.error(
                "Request failed with exception",
                extra={"duration_ms": _elapsed_ms(start), "error_type": type(exc).__name__},
            )
            raise
        else:
            duration_ms = _elapsed_ms(start)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"

            # Note changes at info, reads at debug
            log = logger.debug if request.method == "GET" else logger.info
            log(
                "Request completed",
                extra={"status_code": response.status_code, "duration_ms": duration_ms},
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()
