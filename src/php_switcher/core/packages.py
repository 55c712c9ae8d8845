"""
Package installation for PHP versions.

Installs a PHP version with the extension set Laravel-class frameworks
need, the Apache module when Apache is present, and Composer. Each
package is attempted independently: extension availability varies by
version and distribution release, so a failed package is recorded and
skipped instead of aborting the run.
"""

import hashlib
import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Optional

import httpx

from php_switcher.core import commands
from php_switcher.core.commands import ExtensionToken
from php_switcher.core.exceptions import ChecksumError, NetworkError
from php_switcher.core.models import InstallReport, OperationResult, Outcome, PhpVersion
from php_switcher.core.runner import CommandRunner
from php_switcher.utils.config import Config
from php_switcher.utils.logging import get_logger

logger = get_logger(__name__)

HttpClientFactory = Callable[[], httpx.Client]


class ComposerInstaller:
    """Download, verify and install the Composer binary."""

    def __init__(
        self,
        config: Config,
        runner: CommandRunner,
        client_factory: Optional[HttpClientFactory] = None,
    ):
        self.dry_run = config.dry_run
        self.settings = config.composer
        self.runner = runner
        self.client_factory = client_factory or (
            lambda: httpx.Client(timeout=self.settings.download_timeout, follow_redirects=True)
        )

    def is_installed(self) -> bool:
        return shutil.which("composer") is not None or Path(self.settings.install_path).is_file()

    def install(self) -> Optional[OperationResult]:
        """
        Install Composer unless it is already present.

        Returns:
            None when Composer was already installed, otherwise the result

        Raises:
            ChecksumError: If the installer does not match its signature
        """
        if self.is_installed():
            logger.info("Composer is already installed.")
            return None

        description = "install composer"
        logger.warning("Installing Composer...")
        if self.dry_run:
            logger.warning("Dry-run: would download and install composer.")
            return OperationResult(action=description, outcome=Outcome.SUCCESS, dry_run=True)

        with tempfile.TemporaryDirectory(prefix="composer-") as workdir:
            installer = Path(workdir) / "composer-setup.php"
            try:
                with self.client_factory() as client:
                    signature = client.get(self.settings.signature_url)
                    signature.raise_for_status()
                    download = client.get(self.settings.installer_url)
                    download.raise_for_status()
            except httpx.HTTPError as e:
                return self._failed(description, f"Failed to download the Composer installer: {e}")

            installer.write_bytes(download.content)
            expected = signature.text.strip()
            actual = hashlib.sha384(installer.read_bytes()).hexdigest()
            if expected != actual:
                installer.unlink()
                logger.error("Composer installer corrupt. Aborting.")
                raise ChecksumError(
                    "Composer installer checksum mismatch",
                    expected=expected,
                    actual=actual,
                )

            result = self.runner.run(commands.run_composer_setup(installer), cwd=Path(workdir))
            if not result.ok:
                return self._failed(description, "Composer installer failed")

            target = Path(self.settings.install_path)
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.move(str(Path(workdir) / "composer.phar"), str(target))
                os.chmod(target, 0o755)
            except OSError as e:
                return self._failed(description, f"Failed to move composer.phar to {target}: {e}")

        logger.info(f"Composer installed to {target}")
        return OperationResult(action=description, outcome=Outcome.SUCCESS)

    def _failed(self, description: str, message: str) -> OperationResult:
        logger.error(message)
        return OperationResult(action=description, outcome=Outcome.SOFT_FAILURE, message=message)


class PackageInstaller:
    """Install and purge PHP packages through apt."""

    def __init__(
        self,
        config: Config,
        runner: CommandRunner,
        client_factory: Optional[HttpClientFactory] = None,
        composer: Optional[ComposerInstaller] = None,
    ):
        self.dry_run = config.dry_run
        self.settings = config.packages
        self.apache_package = config.apache.package
        self.runner = runner
        self.client_factory = client_factory or (
            lambda: httpx.Client(timeout=self.settings.network_timeout, follow_redirects=True)
        )
        self.composer = composer or ComposerInstaller(config, runner, client_factory)

    def check_network(self) -> None:
        """
        Probe a well-known host.

        Raises:
            NetworkError: If the host cannot be reached
        """
        try:
            with self.client_factory() as client:
                client.head(self.settings.network_probe_url)
        except httpx.HTTPError as e:
            logger.error("No internet connection detected. Please check your network.")
            raise NetworkError(f"Cannot reach {self.settings.network_probe_url}: {e}")

    def is_installed(self, package: str) -> bool:
        result = self.runner.run(commands.package_status(package))
        return result.ok and "install ok installed" in result.stdout

    def install_package(self, package: str) -> OperationResult:
        """Install a single package; failure is reported, not raised."""
        description = f"install {package}"
        if not self.dry_run:
            logger.info(f"Installing {package}...")

        result = self.runner.run(commands.apt_install(package))
        if result.ok:
            return OperationResult(action=description, outcome=Outcome.SUCCESS, dry_run=result.dry_run)
        return OperationResult(
            action=description,
            outcome=Outcome.SOFT_FAILURE,
            message=f"apt-get exited with status {result.returncode}",
        )

    def ensure_repository(self) -> None:
        """Register the upstream PHP repository and refresh package indexes."""
        if shutil.which("add-apt-repository") is None:
            logger.warning(f"Installing {self.settings.repository_helper}...")
            if not self.install_package(self.settings.repository_helper).ok:
                logger.error(f"Failed to install {self.settings.repository_helper}")

        if not self.runner.run(commands.add_repository(self.settings.repository)).ok:
            logger.error(f"Failed to add {self.settings.repository}")
        if not self.runner.run(commands.apt_update()).ok:
            logger.error("Failed to update packages")

    def install(self, version: PhpVersion) -> InstallReport:
        """
        Install a PHP version with its extensions and Composer.

        Args:
            version: Validated target version

        Returns:
            Installation report

        Raises:
            NetworkError: If the network is unreachable
            ChecksumError: If the Composer installer fails verification
        """
        self.check_network()

        logger.info(f"Installing PHP {version} and Laravel required extensions...")
        self.ensure_repository()

        report = InstallReport(version=str(version))
        for token in ExtensionToken:
            package = commands.extension_package(version, token)
            result = self.install_package(package)
            report.record(package, result)
            if not result.ok:
                logger.warning(f"Skipping unavailable or failed extension: {package}")

        if self.is_installed(self.apache_package):
            package = commands.apache_module_package(version)
            if not self.dry_run:
                logger.info(f"Detected Apache. Installing {package}...")
            result = self.install_package(package)
            report.record(package, result)
            if not result.ok:
                logger.error(f"Failed to install {package}")

        composer_result = self.composer.install()
        if composer_result is not None and not composer_result.dry_run:
            report.record("composer", composer_result)

        logger.info(f"PHP {version} installation attempt completed.")
        if report.installed:
            logger.info(f"Installed successfully: {' '.join(report.installed)}")
        if report.failed:
            logger.warning(f"Failed to install: {' '.join(report.failed)}")
        logger.info(
            f"PHP {version} and Laravel requirements installation finished (check logs for details)."
        )
        return report

    def purge(self, version: PhpVersion) -> OperationResult:
        """Purge every ``php<version>*`` package, then autoremove."""
        description = f"purge php{version}*"
        logger.warning(f"Uninstalling PHP {version}...")

        result = self.runner.run(commands.apt_purge_version(version))
        if result.ok:
            outcome = OperationResult(action=description, outcome=Outcome.SUCCESS, dry_run=result.dry_run)
        else:
            message = f"Failed to uninstall some components of PHP {version}"
            logger.error(message)
            outcome = OperationResult(action=description, outcome=Outcome.SOFT_FAILURE, message=message)

        if not self.runner.run(commands.apt_autoremove()).ok:
            logger.warning("apt-get autoremove failed")

        logger.info(f"PHP {version} uninstalled successfully (check logs for details).")
        return outcome
