"""Core PHP Switcher functionality."""

from php_switcher.core.exceptions import (
    ChecksumError,
    ConfigError,
    NetworkError,
    OperationError,
    PHPSwitcherError,
    PrerequisiteError,
    ValidationError,
)
from php_switcher.core.models import (
    Confirmation,
    InstallReport,
    OperationResult,
    Outcome,
    PhpVersion,
    SwitchResult,
    SwitchState,
)

__all__ = [
    "PHPSwitcherError",
    "ConfigError",
    "ValidationError",
    "PrerequisiteError",
    "NetworkError",
    "OperationError",
    "ChecksumError",
    "Confirmation",
    "InstallReport",
    "OperationResult",
    "Outcome",
    "PhpVersion",
    "SwitchResult",
    "SwitchState",
]
