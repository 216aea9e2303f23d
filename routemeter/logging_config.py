"""Structured logging: level from settings, key=value format, request id on every line."""
import logging
import sys
import time

from routemeter.request_context import RequestIdFilter
from routemeter.settings import settings


def configure_logging() -> None:
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s request_id=%(request_id)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
        handlers=[handler],
    )
    # Timestamps in UTC to match the trailing Z in datefmt
    logging.Formatter.converter = time.gmtime
