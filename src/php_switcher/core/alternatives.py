"""
Alternatives registry switching for the PHP command-line tools.
"""

from pathlib import Path
from typing import List

from php_switcher.core import commands
from php_switcher.core.commands import CliTool
from php_switcher.core.models import OperationResult, Outcome, PhpVersion
from php_switcher.core.runner import CommandRunner
from php_switcher.utils.config import Config
from php_switcher.utils.logging import get_logger

logger = get_logger(__name__)


class AlternativesSwitcher:
    """Repoint update-alternatives links to a given PHP version."""

    def __init__(self, config: Config, runner: CommandRunner):
        self.binary_dir = config.php.binary_dir
        self.runner = runner

    def set_alternative(self, tool: CliTool, target: Path) -> OperationResult:
        """Point the alternative for ``tool`` at ``target``; failure is soft."""
        description = f"set alternative for {tool.value} to {target}"

        result = self.runner.run(commands.set_alternative(tool, target))
        if result.dry_run:
            return OperationResult(action=description, outcome=Outcome.SUCCESS, dry_run=True)
        if result.ok:
            logger.info(f"Set alternative for {tool.value} to {target}")
            return OperationResult(action=description, outcome=Outcome.SUCCESS)

        message = f"Failed to set alternative for {tool.value}"
        logger.warning(message)
        return OperationResult(action=description, outcome=Outcome.SOFT_FAILURE, message=message)

    def switch_all(self, version: PhpVersion) -> List[OperationResult]:
        """
        Repoint every CLI tool whose binary exists for ``version``.

        Not every version ships every tool, so absent binaries are
        skipped without a warning.

        Args:
            version: Target version

        Returns:
            One result per tool that was attempted
        """
        results = []
        for tool in CliTool:
            target = commands.tool_binary(self.binary_dir, tool, version)
            if not target.is_file():
                logger.debug(f"Skipping {tool.value}: {target} not present")
                continue
            results.append(self.set_alternative(tool, target))
        return results

    def list_alternatives(self, tool: CliTool = CliTool.PHP) -> List[str]:
        """Registered targets for ``tool``; empty when none are registered."""
        result = self.runner.run(commands.list_alternatives(tool))
        if not result.ok:
            return []
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]
