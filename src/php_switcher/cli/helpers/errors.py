"""
Error handling utilities for CLI commands.
"""

import functools
import sys

from rich.console import Console

from php_switcher.core.exceptions import PHPSwitcherError
from php_switcher.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


def handle_errors(func):
    """Decorator turning hard failures into a logged error and exit status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            sys.exit(1)
        except PHPSwitcherError as e:
            logger.error(e.message)
            for line in e.detail_lines():
                logger.debug(line)
            logger.debug("Error details", exc_info=True)
            sys.exit(e.exit_code)

    return wrapper
