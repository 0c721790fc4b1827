"""Logging configuration for subextract."""

import logging
import sys
from pathlib import Path
from typing import List, Optional

RUN_LOG_FORMAT = "%(asctime)s: %(message)s"
RUN_LOG_DATEFMT = "%H:%M:%S"


def setup_logging(
    level: str = "INFO", log_file: Optional[Path] = None, verbose: bool = False
) -> logging.Logger:
    """Set up logging configuration."""

    # Suppress noisy third-party library logs
    logging.getLogger("ppocr").setLevel(logging.WARNING)
    logging.getLogger("paddleocr").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)

    # Create logger
    logger = logging.getLogger("subextract")
    logger.setLevel(getattr(logging, level.upper()))

    # Clear existing handlers
    logger.handlers.clear()

    # Create formatter
    if verbose:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = logging.Formatter("%(levelname)s: %(message)s")

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler if specified
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "subextract") -> logging.Logger:
    """Get logger instance."""
    return logging.getLogger(name)


class RunLogCollector(logging.Handler):
    """Keep the human-readable log trail of a single extraction run.

    Each record is stamped with the wall-clock time at emission. Use as a
    context manager to attach it to the ``subextract`` logger for the
    duration of a run::

        with RunLogCollector() as trail:
            ...
        trail.lines
    """

    def __init__(self, logger_name: str = "subextract", level: int = logging.INFO):
        super().__init__(level)
        self.lines: List[str] = []
        self._logger = logging.getLogger(logger_name)
        self._previous_level: Optional[int] = None
        self.setFormatter(logging.Formatter(RUN_LOG_FORMAT, datefmt=RUN_LOG_DATEFMT))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.lines.append(self.format(record))
        except Exception:
            self.handleError(record)

    def __enter__(self) -> "RunLogCollector":
        self._previous_level = self._logger.level
        # Records below the collector level must still reach the handler
        if self._logger.getEffectiveLevel() > self.level:
            self._logger.setLevel(self.level)
        self._logger.addHandler(self)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._logger.removeHandler(self)
        if self._previous_level is not None:
            self._logger.setLevel(self._previous_level)
