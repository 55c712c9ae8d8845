"""
Logging infrastructure for PHP Switcher.

Every message goes to the console, colour-tagged by severity, and to an
append-only log file whose lines carry an ``[INFO]``/``[WARNING]``/
``[ERROR]`` tag.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
CONSOLE_FORMAT = "[%(levelname)s] %(message)s"


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[1;33m", # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        """Format the whole line in the level colour."""
        color = self.COLORS.get(record.levelname, "")
        return f"{color}{super().format(record)}{self.RESET}"


class SwitcherLogger:
    """Logging manager for PHP Switcher."""

    def __init__(self):
        self._loggers: Dict[str, logging.Logger] = {}
        self._handlers: list = []

    def setup_logging(
        self,
        level: Union[str, int] = logging.INFO,
        console_level: Union[str, int] = logging.INFO,
        log_file: Optional[Path] = None,
        enable_rich: bool = True,
    ) -> None:
        """
        Setup logging configuration.

        Calling it again replaces the handlers installed by the previous
        call, so one process can be configured more than once.

        Args:
            level: File logging level
            console_level: Console logging level
            log_file: Path to the append-only log file (optional)
            enable_rich: Use Rich for console output
        """
        if isinstance(level, str):
            level = getattr(logging, level.upper())
        if isinstance(console_level, str):
            console_level = getattr(logging, console_level.upper())

        root_logger = logging.getLogger()
        for handler in self._handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self._handlers = []
        root_logger.setLevel(min(level, console_level))

        if enable_rich:
            console_handler = RichHandler(
                console=Console(stderr=True),
                show_time=False,
                show_path=False,
                markup=False,
            )
        else:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT))
        console_handler.setLevel(console_level)
        root_logger.addHandler(console_handler)
        self._handlers.append(console_handler)

        if log_file:
            try:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            except OSError as e:
                self.get_logger(__name__).warning(
                    f"Cannot write log file {log_file}: {e}. Logging to console only."
                )
            else:
                file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
                file_handler.setLevel(level)
                root_logger.addHandler(file_handler)
                self._handlers.append(file_handler)

        for logger_name in ("httpx", "httpcore"):
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    def get_logger(self, name: str) -> logging.Logger:
        """
        Get or create a logger instance.

        Args:
            name: Logger name

        Returns:
            Logger instance
        """
        if name not in self._loggers:
            self._loggers[name] = logging.getLogger(name)

        return self._loggers[name]


# Global logger instance
_logger_manager = SwitcherLogger()

# Convenience functions
setup_logging = _logger_manager.setup_logging
get_logger = _logger_manager.get_logger
