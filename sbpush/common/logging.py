"""Structured JSON logging with publish context fields."""

import logging
import sys
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter

from sbpush.common.config import PushSettings


service_name_ctx: ContextVar[str] = ContextVar("service_name", default="sb-push")
correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")
destination_ctx: ContextVar[str] = ContextVar("destination", default="")


class ContextFilter(logging.Filter):
    """Inject service and message identifiers into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = service_name_ctx.get()
        record.correlation_id = correlation_id_ctx.get()
        record.destination = destination_ctx.get()
        return True


def configure_logging(settings: PushSettings) -> None:
    """Configure root logger once per process.

    Logs go to stderr so stdout only carries the send confirmation.
    """

    service_name_ctx.set(settings.service_name)
    handler = logging.StreamHandler(sys.stderr)
    context_filter = ContextFilter()
    handler.addFilter(context_filter)
    formatter = JsonFormatter(
        "%(asctime)s %(levelname)s %(service_name)s %(correlation_id)s %(destination)s %(message)s"
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(settings.log_level)
    root.addFilter(context_filter)


logger = logging.getLogger("sbpush")
