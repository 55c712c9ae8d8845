"""
Exception classes for PHP Switcher.

Defines the exception hierarchy for the hard failures that abort a
command. Soft failures are never raised; they travel as
``OperationResult`` values instead.
"""

from typing import Any, Dict, List, Optional


class PHPSwitcherError(Exception):
    """
    A failure that aborts the current php-switcher command.

    The CLI logs ``message`` as an error and exits with ``exit_code``.
    ``details`` carries context for the debug log, such as the missing
    host tools or both checksums of a corrupt download.
    """

    exit_code = 1

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def detail_lines(self) -> List[str]:
        """``key: value`` lines for the log, skipping empty values."""
        lines = []
        for key, value in self.details.items():
            if value is None or value == [] or value == "":
                continue
            if isinstance(value, (list, tuple)):
                value = " ".join(str(item) for item in value)
            lines.append(f"{key}: {value}")
        return lines


class ConfigError(PHPSwitcherError):
    """Configuration-related errors."""
    pass


class ValidationError(PHPSwitcherError):
    """Malformed version identifier or other invalid input."""
    pass


class PrerequisiteError(PHPSwitcherError):
    """Required host tool missing or insufficient privileges."""
    pass


class NetworkError(PHPSwitcherError):
    """Network unreachable before package installation."""
    pass


class OperationError(PHPSwitcherError):
    """Hard failure of an external operation."""
    pass


class ChecksumError(OperationError):
    """Downloaded artifact does not match its published checksum."""

    def __init__(
        self,
        message: str,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
        error_code: Optional[str] = None,
    ):
        """
        Initialize ChecksumError.

        Args:
            message: Error message
            expected: Published checksum
            actual: Checksum of the downloaded file
            error_code: Optional error code
        """
        super().__init__(
            message,
            error_code,
            {"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual
