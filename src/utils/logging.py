import logging
import sys
import contextvars
from contextlib import contextmanager
from typing import Iterator, Optional

import uuid_utils as uuid
from colorlog import ColoredFormatter

# -------------------------------------------------
# Async-safe correlation ID (ECID)
# -------------------------------------------------
ecid_var = contextvars.ContextVar("ecid", default="-")


class ECIDFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.ecid = ecid_var.get()
        return True


@contextmanager
def ecid_scope(ecid: Optional[str] = None) -> Iterator[str]:
    """Bind a correlation id for one tool call; the previous id is restored on exit."""
    token = ecid_var.set(ecid or uuid.uuid7().hex[:12])
    try:
        yield ecid_var.get()
    finally:
        ecid_var.reset(token)


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure colored terminal logging with ECID support.
    Safe to call multiple times.
    """

    root = logging.getLogger()
    root.setLevel(level)

    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        handler.addFilter(ECIDFilter())
        handler.setFormatter(
            ColoredFormatter(
                "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s "
                "%(light_black)secid=%(ecid)s%(reset)s %(name)s:%(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
                log_colors={
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "bold_red",
                },
            )
        )
        root.addHandler(handler)

    # store writes run through asyncio.to_thread
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logger = logging.getLogger("TemplateTools")
    logger.setLevel(level)
    return logger
