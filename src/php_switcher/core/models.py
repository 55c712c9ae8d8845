"""
Data models for PHP Switcher.

Defines Pydantic models for version identifiers, operation outcomes and
the reports produced by the install, switch and uninstall workflows.
"""

import re
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

VERSION_PATTERN = re.compile(r"[0-9]+\.[0-9]+")


class PhpVersion(BaseModel):
    """A validated ``<major>.<minor>`` PHP version identifier."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(description="Version string, e.g. '8.2'")

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str) -> str:
        """Validate version format."""
        if not VERSION_PATTERN.fullmatch(v):
            raise ValueError(f"Invalid version format '{v}'")
        return v

    @property
    def major(self) -> int:
        return int(self.value.split(".")[0])

    @property
    def minor(self) -> int:
        return int(self.value.split(".")[1])

    def __str__(self) -> str:
        return self.value


class Outcome(str, Enum):
    """Outcome of a single external operation."""

    SUCCESS = "success"
    SOFT_FAILURE = "soft_failure"  # Logged, workflow continues
    HARD_FAILURE = "hard_failure"  # Aborts the current command


class OperationResult(BaseModel):
    """Tagged result attached to every external call."""

    action: str = Field(description="Human readable description of the action")
    outcome: Outcome = Field(description="Operation outcome")
    strategy: Optional[str] = Field(default=None, description="Mechanism that performed the action")
    dry_run: bool = Field(default=False, description="Action was only described")
    message: Optional[str] = Field(default=None, description="Error detail")

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.SUCCESS

    def __str__(self) -> str:
        return f"{self.action}: {self.outcome.value}"


class InstallReport(BaseModel):
    """Summary of a package installation run."""

    version: str = Field(description="Target PHP version")
    installed: List[str] = Field(default_factory=list, description="Packages installed")
    failed: List[str] = Field(default_factory=list, description="Packages that failed")
    planned: List[str] = Field(default_factory=list, description="Packages described in dry-run")

    def record(self, package: str, result: OperationResult) -> None:
        """File a package under installed, failed or planned."""
        if result.dry_run:
            self.planned.append(package)
        elif result.ok:
            self.installed.append(package)
        else:
            self.failed.append(package)


class Confirmation(str, Enum):
    """Tri-state answer to an interactive yes/no prompt."""

    CONFIRMED = "confirmed"
    DECLINED = "declined"
    INVALID = "invalid"


class SwitchState(str, Enum):
    """States of the version switch workflow."""

    REQUESTED = "requested"
    CONFIRMED = "confirmed"
    FPM_ENSURED = "fpm_ensured"
    OLD_SERVICES_DISABLED = "old_services_disabled"
    APACHE_CONF_ENABLED = "apache_conf_enabled"
    FPM_RESTARTED = "fpm_restarted"
    ALTERNATIVES_SWITCHED = "alternatives_switched"
    DONE = "done"
    CANCELLED = "cancelled"
    ABORTED = "aborted"


class SwitchResult(BaseModel):
    """Result of a version switch."""

    version: str = Field(description="Target PHP version")
    state: SwitchState = Field(default=SwitchState.REQUESTED, description="Final state")
    history: List[SwitchState] = Field(
        default_factory=lambda: [SwitchState.REQUESTED],
        description="States visited in order",
    )
    soft_failures: List[OperationResult] = Field(default_factory=list, description="Non-fatal failures")
    error: Optional[str] = Field(default=None, description="Reason for an abort")
    active_version: Optional[str] = Field(default=None, description="CLI version after the switch")

    def advance(self, state: SwitchState) -> None:
        """Move to the next state."""
        self.state = state
        self.history.append(state)

    def record(self, result: OperationResult) -> None:
        """Keep track of soft failures."""
        if not result.ok:
            self.soft_failures.append(result)

    @property
    def succeeded(self) -> bool:
        return self.state in (SwitchState.DONE, SwitchState.CANCELLED)


class UninstallResult(BaseModel):
    """Result of a version uninstall."""

    version: str = Field(description="Target PHP version")
    confirmation: Confirmation = Field(description="Operator answer")
    purge: Optional[OperationResult] = Field(default=None, description="Purge outcome")

    @property
    def succeeded(self) -> bool:
        return self.confirmation != Confirmation.INVALID
