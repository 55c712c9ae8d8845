"""
Service orchestration.

Controls PHP-FPM and web server units through an ordered list of
control mechanisms: systemd first, then the SysV ``service`` wrapper,
then ``update-rc.d`` for boot-time enablement. The first mechanism that
succeeds wins; if every mechanism fails the call is a soft failure.
"""

import shutil
from pathlib import Path
from typing import FrozenSet, List, Optional

from php_switcher.core import commands
from php_switcher.core.commands import Command, ServiceAction
from php_switcher.core.models import OperationResult, Outcome
from php_switcher.core.runner import CommandRunner
from php_switcher.utils.config import Config
from php_switcher.utils.logging import get_logger

logger = get_logger(__name__)

PAST_TENSE = {
    ServiceAction.START: "started",
    ServiceAction.STOP: "stopped",
    ServiceAction.RESTART: "restarted",
    ServiceAction.RELOAD: "reloaded",
    ServiceAction.ENABLE: "enabled",
    ServiceAction.DISABLE: "disabled",
}


class ServiceControlStrategy:
    """A mechanism able to perform some service actions."""

    name: str = ""
    executable: str = ""
    actions: FrozenSet[ServiceAction] = frozenset()

    def supports(self, action: ServiceAction) -> bool:
        return action in self.actions

    def available(self) -> bool:
        return shutil.which(self.executable) is not None

    def command(self, action: ServiceAction, service: str) -> Command:
        raise NotImplementedError


class SystemctlStrategy(ServiceControlStrategy):
    name = "systemctl"
    executable = "systemctl"
    actions = frozenset(ServiceAction)

    def command(self, action: ServiceAction, service: str) -> Command:
        return commands.systemctl(action, service)


class SysVServiceStrategy(ServiceControlStrategy):
    name = "service"
    executable = "service"
    actions = frozenset({
        ServiceAction.START, ServiceAction.STOP, ServiceAction.RESTART, ServiceAction.RELOAD,
    })

    def command(self, action: ServiceAction, service: str) -> Command:
        return commands.sysv_service(action, service)


class UpdateRcdStrategy(ServiceControlStrategy):
    name = "update-rc.d"
    executable = "update-rc.d"
    actions = frozenset({ServiceAction.ENABLE, ServiceAction.DISABLE})

    def command(self, action: ServiceAction, service: str) -> Command:
        return commands.update_rc_d(action, service)


def default_strategies() -> List[ServiceControlStrategy]:
    return [SystemctlStrategy(), SysVServiceStrategy(), UpdateRcdStrategy()]


class ServiceOrchestrator:
    """Start, stop, enable, disable, restart and reload service units."""

    def __init__(
        self,
        config: Config,
        runner: CommandRunner,
        strategies: Optional[List[ServiceControlStrategy]] = None,
    ):
        self.dry_run = config.dry_run
        self.unit_dirs = [Path(d) for d in config.services.unit_dirs]
        self.runner = runner
        self.strategies = strategies if strategies is not None else default_strategies()

    def start(self, service: str) -> OperationResult:
        return self._execute(ServiceAction.START, service)

    def stop(self, service: str) -> OperationResult:
        return self._execute(ServiceAction.STOP, service)

    def restart(self, service: str) -> OperationResult:
        return self._execute(ServiceAction.RESTART, service)

    def reload(self, service: str) -> OperationResult:
        return self._execute(ServiceAction.RELOAD, service)

    def enable(self, service: str) -> OperationResult:
        return self._execute(ServiceAction.ENABLE, service)

    def disable(self, service: str) -> OperationResult:
        return self._execute(ServiceAction.DISABLE, service)

    def _execute(self, action: ServiceAction, service: str) -> OperationResult:
        """Try each strategy in order until one succeeds."""
        description = f"{action.value} {service}"

        if self.dry_run:
            logger.warning(f"Dry-run: would {description}")
            return OperationResult(action=description, outcome=Outcome.SUCCESS, dry_run=True)

        tried = []
        for strategy in self.strategies:
            if not strategy.supports(action):
                continue
            if not strategy.available():
                logger.warning(f"{strategy.name} not found; trying next mechanism...")
                continue

            tried.append(strategy.name)
            result = self.runner.run(strategy.command(action, service))
            if result.ok:
                logger.info(
                    f"Service {service} {PAST_TENSE[action]} successfully using {strategy.name}"
                )
                return OperationResult(
                    action=description, outcome=Outcome.SUCCESS, strategy=strategy.name
                )
            logger.warning(f"{strategy.name} failed to {description}, trying next mechanism...")

        if tried:
            message = f"Failed to {description} with {' and '.join(tried)}"
        else:
            message = f"Failed to {description}: no service control mechanism available"
        logger.error(message)
        return OperationResult(action=description, outcome=Outcome.SOFT_FAILURE, message=message)

    def unit_exists(self, service: str) -> bool:
        """
        Check whether a service unit exists on the host.

        Any one of the service manager listing or a unit file in one of
        the unit directories is enough, so a unit the service manager has
        not picked up yet is still found.

        Args:
            service: Unit name without the ``.service`` suffix

        Returns:
            True if any signal reports the unit
        """
        unit = f"{service}.service"

        listing = self.runner.run(commands.list_service_units())
        if listing.ok and any(unit in line.split() for line in listing.stdout.splitlines()):
            return True

        return any((unit_dir / unit).is_file() for unit_dir in self.unit_dirs)
