import logging
import sys
from contextvars import ContextVar
from typing import Iterable, Optional, Union

from pythonjsonlogger import jsonlogger

# set per request by the HTTP middleware; None outside a request
TRACE_ID_CTX: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)

# client libraries that log every upstream request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


class ConsoleContextFilter(logging.Filter):
    """Stamps each record with the request trace id and the service name."""

    def __init__(self, service: str):
        super().__init__()
        self.service = service

    def filter(self, record):
        record.trace_id = TRACE_ID_CTX.get(None)
        record.service = self.service
        return True


def setup_logging(level: Union[int, str] = logging.INFO, service: str = "fleet-console", quiet: Iterable[str] = NOISY_LOGGERS):
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s %(service)s %(trace_id)s"))
    handler.addFilter(ConsoleContextFilter(service))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]
    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
