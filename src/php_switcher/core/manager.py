"""
PHP version manager.

Facade that wires every component to one ``Config`` and exposes the
operations behind the CLI subcommands.
"""

from typing import Dict, List, Optional

from php_switcher.core.alternatives import AlternativesSwitcher
from php_switcher.core.apache import ApacheConfigurator
from php_switcher.core.diagnostics import Diagnostics
from php_switcher.core.models import (
    Confirmation,
    InstallReport,
    SwitchResult,
    UninstallResult,
)
from php_switcher.core.packages import HttpClientFactory, PackageInstaller
from php_switcher.core.preflight import PreflightChecker
from php_switcher.core.prompts import ConfirmationPrompt
from php_switcher.core.runner import CommandRunner
from php_switcher.core.services import ServiceOrchestrator
from php_switcher.core.switcher import VersionSwitcher
from php_switcher.utils.config import Config
from php_switcher.utils.logging import get_logger
from php_switcher.utils.validators import validate_version

logger = get_logger(__name__)


class PHPVersionManager:
    """Install, switch and inspect PHP versions on the host."""

    def __init__(
        self,
        config: Config,
        runner: Optional[CommandRunner] = None,
        prompt: Optional[ConfirmationPrompt] = None,
        client_factory: Optional[HttpClientFactory] = None,
    ):
        """
        Initialize the manager.

        Args:
            config: Configuration shared by every component
            runner: Command runner, defaults to a subprocess runner
            prompt: Confirmation prompt, defaults to the console
            client_factory: Factory for HTTP clients used by the installer
        """
        self.config = config
        self.runner = runner or CommandRunner(config)
        self.prompt = prompt or ConfirmationPrompt()

        self.preflight = PreflightChecker(config)
        self.installer = PackageInstaller(config, self.runner, client_factory)
        self.services = ServiceOrchestrator(config, self.runner)
        self.apache = ApacheConfigurator(config, self.runner)
        self.alternatives = AlternativesSwitcher(config, self.runner)
        self.diagnostics = Diagnostics(self.runner, self.alternatives)
        self.switcher = VersionSwitcher(
            config,
            self.installer,
            self.services,
            self.apache,
            self.alternatives,
            self.diagnostics,
            self.prompt,
        )

    def check_prerequisites(self) -> None:
        self.preflight.run()

    def install(self, version: str) -> InstallReport:
        return self.installer.install(validate_version(version))

    def switch(self, version: str) -> SwitchResult:
        return self.switcher.switch(validate_version(version))

    def uninstall(self, version: str) -> UninstallResult:
        """Purge a version after interactive confirmation."""
        php_version = validate_version(version)

        answer = self.prompt.ask(
            f"Are you sure you want to remove PHP {php_version} packages? This is destructive."
        )
        result = UninstallResult(version=str(php_version), confirmation=answer)
        if answer == Confirmation.DECLINED:
            logger.info("Uninstallation cancelled.")
            return result
        if answer == Confirmation.INVALID:
            logger.warning("Invalid input. Operation cancelled.")
            return result

        logger.info(f"Proceeding with PHP {php_version} uninstallation...")
        result.purge = self.installer.purge(php_version)
        return result

    def list_versions(self) -> List[str]:
        return self.diagnostics.list_versions()

    def current_version(self) -> Optional[str]:
        return self.diagnostics.current_version()

    def version_banner(self) -> Optional[str]:
        return self.diagnostics.version_banner()

    def check_extensions(self) -> Dict[str, bool]:
        return self.diagnostics.check_required_extensions()
