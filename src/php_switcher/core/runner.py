"""
Command execution.

Thin wrapper around ``subprocess.run`` that honours dry-run mode for
mutating commands and sends command output to the log file.
"""

import os
import subprocess
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from php_switcher.core.commands import Command
from php_switcher.utils.config import Config
from php_switcher.utils.logging import get_logger

logger = get_logger(__name__)

COMMAND_NOT_FOUND = 127


class CommandResult(BaseModel):
    """Outcome of running a single command."""

    command: Command
    returncode: int = Field(description="Process exit status")
    stdout: str = Field(default="", description="Captured standard output")
    stderr: str = Field(default="", description="Captured standard error")
    dry_run: bool = Field(default=False, description="Command was only described")

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs commands synchronously, one at a time."""

    def __init__(self, config: Config):
        self.dry_run = config.dry_run

    def run(self, command: Command, cwd: Optional[Path] = None) -> CommandResult:
        """
        Run a command, or describe it when dry-run applies.

        Read-only commands always run. A missing executable is reported as
        exit status 127, the way a shell would.

        Args:
            command: Command to execute
            cwd: Optional working directory

        Returns:
            Command result
        """
        if command.mutating and self.dry_run:
            logger.warning(f"Dry-run: would run '{command}'")
            return CommandResult(command=command, returncode=0, dry_run=True)

        logger.debug(f"Running: {command}")
        env = None
        if command.env:
            env = dict(os.environ)
            env.update(command.env)

        try:
            completed = subprocess.run(
                command.argv,
                capture_output=True,
                encoding="utf-8",
                errors="replace",  # apt/dpkg may print in the host locale
                env=env,
                cwd=str(cwd) if cwd else None,
            )
        except FileNotFoundError as e:
            logger.debug(f"{command.argv[0]} not found: {e}")
            return CommandResult(command=command, returncode=COMMAND_NOT_FOUND, stderr=str(e))
        except OSError as e:
            logger.debug(f"Failed to execute {command}: {e}")
            return CommandResult(command=command, returncode=COMMAND_NOT_FOUND, stderr=str(e))

        if completed.stdout:
            logger.debug(completed.stdout.rstrip())
        if completed.stderr:
            logger.debug(completed.stderr.rstrip())

        return CommandResult(
            command=command,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
