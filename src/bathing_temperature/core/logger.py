"""
Logging set-up for the bathing temperature integration.

Operators read the console; the optional log file keeps DEBUG detail such as
skipped forecast values. Records about one bathing site or one sink are
tagged through SiteLogger so a run over many sites stays readable.
"""

import logging
import os
import time
from pathlib import Path
from typing import Any, Dict, MutableMapping, Optional, Tuple


CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-7s [%(module)s:%(lineno)d] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def setup_logger(
    name: str = "bathing_temperature",
    log_file: Optional[str] = None,
    log_level: Optional[str] = None
) -> logging.Logger:
    """
    Configure the application logger.

    Args:
        name: Logger name
        log_file: Detailed log file. If None, LOG_FILE is used; when neither
                  is set only the console is written to
        log_level: Console level name. If None, LOG_LEVEL or INFO

    Returns:
        Configured logger instance
    """
    level_name = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    if log_file is None:
        log_file = os.getenv("LOG_FILE", "")

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if log_file else console_level)
    logger.propagate = False

    # Reconfiguring replaces the previous handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger


class SiteLogger(logging.LoggerAdapter):
    """Prefix messages with the bathing site and, for publishers, the sink."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        tags = " ".join(f"{key}={value}" for key, value in self.extra.items() if value)
        return f"[{tags}] {msg}", kwargs


def site_logger(logger: logging.Logger, nuts_code: str, sink: Optional[str] = None) -> SiteLogger:
    """Logger tagging every record with a location code (and sink)."""
    return SiteLogger(logger, {"site": nuts_code, "sink": sink})


class LoggerContext:
    """Time one phase of a run and log its outcome with the counts recorded during it."""

    def __init__(self, logger: logging.Logger, operation: str):
        self.logger = logger
        self.operation = operation
        self.counts: Dict[str, int] = {}
        self._started = 0.0

    def record(self, **counts: int) -> None:
        """Attach counts (e.g. locations=3) to the completion message."""
        self.counts.update(counts)

    def __enter__(self):
        self._started = time.monotonic()
        self.logger.info(f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.monotonic() - self._started

        if exc_type is not None:
            self.logger.error(
                f"{self.operation} failed after {elapsed:.2f}s: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb)
            )
            return False

        details = ", ".join(f"{key}={value}" for key, value in self.counts.items())
        suffix = f" ({details})" if details else ""
        self.logger.info(f"Finished {self.operation} in {elapsed:.2f}s{suffix}")
        return False
