"""
Apache configuration fragments.

Enables and disables the per-version PHP-FPM fragments under
``conf-available``. A timestamped copy of a fragment is written next to
it before every change.
"""

import shutil
import time
from pathlib import Path
from typing import Optional

from php_switcher.core import commands
from php_switcher.core.models import OperationResult, Outcome
from php_switcher.core.runner import CommandRunner
from php_switcher.utils.config import Config
from php_switcher.utils.logging import get_logger

logger = get_logger(__name__)


class ApacheConfigurator:
    """Manage Apache configuration fragments with a2enconf/a2disconf."""

    def __init__(self, config: Config, runner: CommandRunner):
        self.dry_run = config.dry_run
        self.conf_dir = Path(config.apache.conf_available_dir)
        self.runner = runner

    def conf_path(self, name: str) -> Path:
        return self.conf_dir / f"{name}.conf"

    def has_conf(self, name: str) -> bool:
        return self.conf_path(name).is_file()

    def backup_conf(self, name: str) -> Optional[Path]:
        """
        Copy a fragment to ``<fragment>.bak_<unix time>``.

        Args:
            name: Fragment name without the ``.conf`` suffix

        Returns:
            Path of the backup, or None when the fragment does not exist
        """
        conf_path = self.conf_path(name)
        if not conf_path.is_file():
            return None

        backup_path = conf_path.with_name(f"{conf_path.name}.bak_{int(time.time())}")
        if self.dry_run:
            logger.warning(f"Dry-run: would have backed up {conf_path} to {backup_path}")
            return backup_path

        shutil.copy2(conf_path, backup_path)
        logger.info(f"Backed up {conf_path} to {backup_path}")
        return backup_path

    def enable_conf(self, name: str) -> OperationResult:
        return self._toggle(name, enable=True)

    def disable_conf(self, name: str) -> OperationResult:
        return self._toggle(name, enable=False)

    def _toggle(self, name: str, enable: bool) -> OperationResult:
        verb = "enable" if enable else "disable"
        description = f"{verb} Apache configuration {name}"

        try:
            self.backup_conf(name)
        except OSError as e:
            logger.warning(f"Failed to back up Apache configuration {name}: {e}")

        command = commands.enable_apache_conf(name) if enable else commands.disable_apache_conf(name)
        result = self.runner.run(command)
        if result.ok:
            return OperationResult(action=description, outcome=Outcome.SUCCESS, dry_run=result.dry_run)

        message = f"Failed to {verb} Apache configuration for {name}."
        logger.warning(message)
        return OperationResult(action=description, outcome=Outcome.SOFT_FAILURE, message=message)
