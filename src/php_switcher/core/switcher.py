"""
Version switch workflow.

Makes a PHP version the active one for both the CLI and PHP-FPM:

    requested -> confirmed -> fpm_ensured -> old_services_disabled
      -> apache_conf_enabled -> fpm_restarted -> alternatives_switched -> done

with ``cancelled`` when the operator declines and ``aborted`` on garbled
confirmation input or when the target's FPM package cannot be installed
or enabled.

There is no rollback. A switch that stops half way leaves the host in
whatever state the completed steps produced; running the same switch
again converges, because every step checks the current state first.
"""

from typing import List

from php_switcher.core import commands
from php_switcher.core.alternatives import AlternativesSwitcher
from php_switcher.core.apache import ApacheConfigurator
from php_switcher.core.diagnostics import Diagnostics
from php_switcher.core.exceptions import OperationError
from php_switcher.core.models import Confirmation, PhpVersion, SwitchResult, SwitchState
from php_switcher.core.packages import PackageInstaller
from php_switcher.core.prompts import ConfirmationPrompt
from php_switcher.core.services import ServiceOrchestrator
from php_switcher.utils.config import Config
from php_switcher.utils.logging import get_logger

logger = get_logger(__name__)


class VersionSwitcher:
    """Orchestrates a switch to a given PHP version."""

    def __init__(
        self,
        config: Config,
        installer: PackageInstaller,
        services: ServiceOrchestrator,
        apache: ApacheConfigurator,
        alternatives: AlternativesSwitcher,
        diagnostics: Diagnostics,
        prompt: ConfirmationPrompt,
    ):
        self.supported_versions = list(config.php.supported_versions)
        self.web_server = config.services.web_server
        self.socket_dir = config.php.fpm_socket_dir
        self.installer = installer
        self.services = services
        self.apache = apache
        self.alternatives = alternatives
        self.diagnostics = diagnostics
        self.prompt = prompt

    def other_versions(self, version: PhpVersion) -> List[PhpVersion]:
        """Supported versions other than ``version``."""
        return [PhpVersion(value=v) for v in self.supported_versions if v != version.value]

    def switch(self, version: PhpVersion) -> SwitchResult:
        """
        Run the switch workflow.

        Args:
            version: Validated target version

        Returns:
            Result carrying the final state
        """
        result = SwitchResult(version=str(version))

        answer = self.prompt.ask(f"You are about to switch to PHP {version}. Continue?")
        if answer == Confirmation.DECLINED:
            logger.info("Switch cancelled.")
            result.advance(SwitchState.CANCELLED)
            return result
        if answer == Confirmation.INVALID:
            logger.warning("Invalid input. Operation cancelled.")
            result.error = "Invalid confirmation input"
            result.advance(SwitchState.ABORTED)
            return result

        logger.info(f"Switching to PHP {version}...")
        result.advance(SwitchState.CONFIRMED)

        try:
            self._ensure_fpm(version)
        except OperationError as e:
            logger.error(e.message)
            result.error = e.message
            result.advance(SwitchState.ABORTED)
            return result
        result.advance(SwitchState.FPM_ENSURED)

        self._disable_old_services(version, result)
        result.advance(SwitchState.OLD_SERVICES_DISABLED)

        self._enable_apache_conf(version, result)
        result.advance(SwitchState.APACHE_CONF_ENABLED)

        result.record(self.services.restart(commands.fpm_service(version)))
        result.advance(SwitchState.FPM_RESTARTED)

        for outcome in self.alternatives.switch_all(version):
            result.record(outcome)
        result.advance(SwitchState.ALTERNATIVES_SWITCHED)

        logger.info(f"Switched to PHP {version} (CLI).")
        banner = self.diagnostics.version_banner()
        if banner:
            logger.info(f"Current PHP version (CLI): {banner}")
        result.active_version = self.diagnostics.current_version()

        if result.soft_failures:
            logger.warning(
                f"{len(result.soft_failures)} step(s) failed: "
                + "; ".join(failure.action for failure in result.soft_failures)
            )
        logger.warning(
            "NOTE: If your web server is configured to use PHP-FPM (via sockets), "
            "ensure your server config points to:"
        )
        logger.warning(
            f"      {self.socket_dir}/php{version}-fpm.sock (or equivalent). "
            "Then reload/restart your web server for changes."
        )
        result.advance(SwitchState.DONE)
        return result

    def _ensure_fpm(self, version: PhpVersion) -> None:
        """Install and enable the target's FPM; both are mandatory."""
        package = commands.fpm_package(version)
        service = commands.fpm_service(version)

        if self.installer.is_installed(package):
            logger.info(f"{package} is already installed.")
        else:
            logger.warning(f"{package} is not installed. Installing...")
            if not self.installer.install_package(package).ok:
                raise OperationError(f"Failed to install {package}.")
            logger.info(f"{package} installed successfully.")

        if not self.services.enable(service).ok:
            raise OperationError(f"Failed to enable {service} service.")

    def _disable_old_services(self, version: PhpVersion, result: SwitchResult) -> None:
        for old_version in self.other_versions(version):
            service = commands.fpm_service(old_version)
            if not self.services.unit_exists(service):
                continue

            logger.info(f"Disabling old FPM service: {service}...")
            result.record(self.services.stop(service))
            result.record(self.services.disable(service))

            conf_name = commands.fpm_conf_name(old_version)
            if self.apache.has_conf(conf_name):
                result.record(self.apache.disable_conf(conf_name))

    def _enable_apache_conf(self, version: PhpVersion, result: SwitchResult) -> None:
        conf_name = commands.fpm_conf_name(version)
        if not self.apache.has_conf(conf_name):
            return

        logger.info(f"Enabling {conf_name}.conf...")
        result.record(self.apache.enable_conf(conf_name))
        result.record(self.services.reload(self.web_server))
