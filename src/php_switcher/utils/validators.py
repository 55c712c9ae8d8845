"""
Validation utilities for PHP Switcher.

Provides the version identifier check and host requirement checks.
"""

import os
import shutil
from typing import List, Sequence

from php_switcher.core.exceptions import ValidationError
from php_switcher.core.models import VERSION_PATTERN, PhpVersion
from php_switcher.utils.logging import get_logger

logger = get_logger(__name__)


def validate_version(version: str) -> PhpVersion:
    """
    Validate a PHP version identifier.

    Args:
        version: Version string such as "8.2"

    Returns:
        Validated version

    Raises:
        ValidationError: If the string is not ``<digits>.<digits>``
    """
    if version is None or not VERSION_PATTERN.fullmatch(version):
        raise ValidationError(
            f"Invalid version format '{version or ''}'. Expected something like '7.4' or '8.1'."
        )
    return PhpVersion(value=version)


def find_missing_tools(tools: Sequence[str]) -> List[str]:
    """
    Check which host tools are absent from PATH.

    Args:
        tools: Executable names

    Returns:
        List of missing executables
    """
    missing = []
    for tool in tools:
        if not shutil.which(tool):
            missing.append(tool)
            logger.debug(f"Missing required tool: {tool}")
    return missing


def has_root_privileges() -> bool:
    """Check whether the process runs with an effective uid of 0."""
    return os.geteuid() == 0
