"""droidship structured logging system."""

from __future__ import annotations

import os
import sys
from typing import Any, Sequence

from loguru import logger

from ..utils.helpers import format_command
from .config import config


class Logger:
    """Structured logging system for droidship."""

    def __init__(self, name: str = "droidship") -> None:
        """Initialize and configure a *Loguru* logger instance."""
        self.name = name
        self._console_handler: int | None = None
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Configure the logger with proper formatting and handlers."""
        # Remove default handler
        logger.remove()

        self._add_console_handler(config.log_level)

        if not config.log_dir:
            return

        os.makedirs(config.log_dir, exist_ok=True)

        # ------------------------------------------------------------------
        # File handlers
        # ------------------------------------------------------------------
        file_format = (
            "{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | "
            "{name}:{function}:{line} | {message}"
        )

        logger.add(
            os.path.join(config.log_dir, "droidship_{time:YYYY-MM-DD}.log"),
            format=file_format,
            level="DEBUG",
            rotation="1 day",
            retention="30 days",
            compression="zip",
        )

        # Separate error log
        logger.add(
            os.path.join(config.log_dir, "errors_{time:YYYY-MM-DD}.log"),
            format=file_format,
            level="ERROR",
            rotation="1 day",
            retention="90 days",
            compression="zip",
        )

    def _add_console_handler(self, level: str) -> None:
        console_format = (
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level:<8}</level> | "
            "<level>{message}</level>"
        )

        # stderr keeps stdout free for the logcat stream
        self._console_handler = logger.add(
            sys.stderr,
            format=console_format,
            level=level,
            colorize=True,
        )

    def set_verbosity(self, verbosity: int) -> None:
        """Re-level the console handler from a ``-v`` count.

        0 keeps the configured level, 1 enables DEBUG, 2 or more enables TRACE.
        """
        if verbosity <= 0:
            level = config.log_level
        elif verbosity == 1:
            level = "DEBUG"
        else:
            level = "TRACE"

        if self._console_handler is not None:
            logger.remove(self._console_handler)
        self._add_console_handler(level)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        logger.info(f"[{self.name}] {message}", **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        logger.debug(f"[{self.name}] {message}", **kwargs)

    def trace(self, message: str, **kwargs: Any) -> None:
        """Log trace message."""
        logger.trace(f"[{self.name}] {message}", **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        logger.warning(f"[{self.name}] {message}", **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        logger.error(f"[{self.name}] {message}", **kwargs)

    def success(self, message: str, **kwargs: Any) -> None:
        """Log success message."""
        logger.success(f"[{self.name}] {message}", **kwargs)

    def log_command(self, argv: Sequence[str]) -> None:
        """Echo a command line before it runs, secrets masked."""
        self.info(f"$ {format_command(argv)}")

    def log_deploy_step(self, step: str, details: dict[str, Any] | None = None) -> None:
        """Log deployment step with details."""
        message = f"DEPLOY STEP: {step}"
        if details:
            message += f" | Details: {details}"
        self.debug(message)


# Global logger instance
log = Logger()
