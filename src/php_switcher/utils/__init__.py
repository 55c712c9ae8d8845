"""Utility modules for PHP Switcher."""

from php_switcher.utils.logging import get_logger, setup_logging
from php_switcher.utils.config import Config, load_config
from php_switcher.utils.validators import (
    validate_version, find_missing_tools, has_root_privileges
)

__all__ = [
    "get_logger",
    "setup_logging",
    "Config",
    "load_config",
    "validate_version",
    "find_missing_tools",
    "has_root_privileges",
]
