"""Request-scoped id: set by the request-log middleware, stamped onto every log record."""
import logging
from contextvars import ContextVar

# "-" outside a request (startup, shutdown, background work)
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    """Adds record.request_id so handlers can format %(request_id)s."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get()
        return True
