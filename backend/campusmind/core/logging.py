"""
Logging Configuration

One stdout handler on the root logger. Modules log through
get_logger(__name__), so a provider failure reads as
"... | WARNING  | campusmind.services.sources.libgen | libgen: ...".
"""
import logging
import sys
from typing import Iterable

from campusmind.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP clients and the HTML parser log every request or guess at DEBUG/INFO
QUIET_LOGGERS = ("httpx", "httpcore", "urllib3", "charset_normalizer")


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: str = "INFO", quiet: Iterable[str] = QUIET_LOGGERS) -> None:
    """
    Configure the root logger.

    Args:
        level: Level name; unknown names fall back to INFO
        quiet: Third-party loggers held at WARNING regardless of level
    """
    log_level = _resolve_level(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(log_level)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


setup_logging(settings.LOG_LEVEL)
