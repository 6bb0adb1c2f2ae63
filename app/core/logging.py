import logging
import sys
from typing import Final
from collections.abc import Mapping
from logging import LoggerAdapter, LogRecord
from typing_extensions import override
from fastapi import Request

_LOG_FORMAT: Final[str] = (
    "%(asctime)s %(levelname)s %(name)s :: %(message)s [req=%(request_id)s]"
)


class RequestLogFilter(logging.Filter):
    """
    Ensures every record has a request_id key.
    """

    @override
    def filter(self, record: LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        return True


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Configure root/uvicorn loggers with a single stdout handler.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestLogFilter())
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.setLevel(level)
        lg.addHandler(handler)
        lg.propagate = False

    # Quiet the provider SDK's transport chatter
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

def get_logger(
    name: str,
    request: Request | None = None
) -> LoggerAdapter[logging.Logger]:
    """
    Attach request context (request_id).
    Usage: logger = get_logger(__name__, request)
    """
    extra: Mapping[str, str] = {}
    if request is not None:
        extra = {"request_id": getattr(request.state, "correlation_id", "-")}
    return LoggerAdapter(logging.getLogger(name), extra)
