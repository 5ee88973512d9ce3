import logging
import time
from contextvars import ContextVar

from sqlalchemy import event
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

# SQL statements executed while serving the current request.
query_count_var: ContextVar[int] = ContextVar("query_count", default=0)


def install_query_counter(engine) -> None:
    """Count every statement *engine* executes into ``query_count_var``."""

    @event.listens_for(engine.sync_engine, "before_cursor_execute")
    def _count_query(conn, cursor, statement, parameters, context, executemany):
        query_count_var.set(query_count_var.get() + 1)


def _diagnostic_headers(started: float) -> tuple[float, int, list[tuple[bytes, bytes]]]:
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
    queries = query_count_var.get()
    headers = [
        (b"x-response-time-ms", str(elapsed_ms).encode()),
        (b"x-query-count", str(queries).encode()),
    ]
    return elapsed_ms, queries, headers


class TimingMiddleware:
    """
    Adds ``X-Response-Time-Ms`` and ``X-Query-Count`` to HTTP responses and
    logs one debug line per request.

    Written as plain ASGI: the counter ContextVar is set and read in the
    same task as the endpoint, which ``BaseHTTPMiddleware`` would break.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        query_count_var.set(0)
        started = time.perf_counter()

        async def send_with_timing(message: Message) -> None:
            if message["type"] == "http.response.start":
                elapsed_ms, queries, extra = _diagnostic_headers(started)
                message["headers"] = [*message.get("headers", []), *extra]
                logger.debug(
                    "%s %s -> %s in %sms (%d queries)",
                    scope["method"], scope["path"], message["status"], elapsed_ms, queries,
                )
            await send(message)

        await self.app(scope, receive, send_with_timing)
