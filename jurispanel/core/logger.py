"""
Shared application logger
"""
import logging
import sys

from jurispanel.core.config import settings

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
    root.setLevel((level or settings.LOG_LEVEL).upper())


configure_logging()

logger = logging.getLogger("jurispanel")
