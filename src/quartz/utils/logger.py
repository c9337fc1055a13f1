"""Logging configuration for Quartz."""

import logging
from pathlib import Path
from typing import Optional
from rich.logging import RichHandler
from rich.console import Console
from rich.traceback import install

# Console for rich output
console = Console()

LOGGER_NAME = "quartz"


class Logger:
    """Centralized logging for Quartz."""

    _instance: Optional['Logger'] = None
    _logger: logging.Logger = logging.getLogger(LOGGER_NAME)
    _debug_mode: bool = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def setup_logger(cls, debug: bool = False, log_file: Optional[Path] = None):
        """Setup the logger with appropriate handlers."""
        cls()
        cls._debug_mode = debug

        if debug:
            install(show_locals=True)

        cls._logger.setLevel(logging.DEBUG if debug else logging.INFO)
        cls._logger.handlers.clear()

        # Console handler with rich formatting
        console_handler = RichHandler(
            console=console,
            show_time=debug,
            show_path=debug,
            rich_tracebacks=True,
            tracebacks_show_locals=debug
        )
        console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
        cls._logger.addHandler(console_handler)

        # File handler if log_file specified
        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            file_handler.setFormatter(formatter)
            cls._logger.addHandler(file_handler)

    @classmethod
    def is_debug(cls) -> bool:
        return cls._debug_mode

    @classmethod
    def debug(cls, message: str, *args, **kwargs):
        """Log debug message."""
        cls._logger.debug(message, *args, **kwargs)

    @classmethod
    def info(cls, message: str, *args, **kwargs):
        """Log info message."""
        cls._logger.info(message, *args, **kwargs)

    @classmethod
    def warning(cls, message: str, *args, **kwargs):
        """Log warning message."""
        cls._logger.warning(message, *args, **kwargs)

    @classmethod
    def error(cls, message: str, *args, **kwargs):
        """Log error message."""
        cls._logger.error(message, *args, **kwargs)

    @classmethod
    def success(cls, message: str):
        """Log success message (using rich)."""
        console.print(f"✅ {message}", style="green")

    @classmethod
    def fail(cls, message: str):
        """Log failure message (using rich)."""
        console.print(f"❌ {message}", style="red")
