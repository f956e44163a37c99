"""Package logging setup."""
import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from s3facade.config import get_log_level

LOGGER_NAME = "s3facade"

_operation_ctx: contextvars.ContextVar[str] = contextvars.ContextVar("operation", default="-")

_logger = logging.getLogger(LOGGER_NAME)


class OperationFilter(logging.Filter):
    """Attach the running storage operation to all log records for correlation."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.operation = _operation_ctx.get()
        return True


@contextmanager
def operation_scope(name: str) -> Iterator[None]:
    """Tag every log record emitted inside the block with ``name``."""
    token = _operation_ctx.set(name)
    try:
        yield
    finally:
        _operation_ctx.reset(token)


def current_operation() -> str:
    return _operation_ctx.get()


def setup_logger(level: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the package logger once and set its level."""
    if not _logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s op=%(operation)s %(message)s")
        handler.setFormatter(formatter)
        handler.addFilter(OperationFilter())
        _logger.addHandler(handler)
    _logger.setLevel(level or get_log_level())
    _logger.propagate = False  # keep records out of the root logger
    return _logger


def get_logger() -> logging.Logger:
    return _logger
