"""
Test doubles for PHP Switcher.

Nothing here touches the real host: commands go through a recording
runner, HTTP goes through ``httpx.MockTransport`` and every host path
lives under a temporary directory.
"""

from pathlib import Path
from typing import Callable, List, Optional

import httpx

from php_switcher.core.commands import CliTool, Command
from php_switcher.core.runner import CommandResult, CommandRunner
from php_switcher.utils.config import Config


class FakeRunner(CommandRunner):
    """Command runner that records commands instead of executing them."""

    def __init__(self, config: Config):
        super().__init__(config)
        self.responses: List[tuple] = []
        self.executed: List[Command] = []
        self.described: List[Command] = []

    def respond(
        self,
        *prefix: str,
        returncode: int = 0,
        stdout: str = "",
        effect: Optional[Callable[[Command, Optional[Path]], None]] = None,
    ) -> None:
        """Register a canned response for commands starting with ``prefix``.

        Later registrations take precedence.
        """
        self.responses.insert(0, (list(prefix), returncode, stdout, effect))

    def run(self, command: Command, cwd: Optional[Path] = None) -> CommandResult:
        if command.mutating and self.dry_run:
            self.described.append(command)
            return CommandResult(command=command, returncode=0, dry_run=True)

        self.executed.append(command)
        for prefix, returncode, stdout, effect in self.responses:
            if command.argv[:len(prefix)] == prefix:
                if effect:
                    effect(command, cwd)
                return CommandResult(command=command, returncode=returncode, stdout=stdout)
        return CommandResult(command=command, returncode=0)

    @property
    def argvs(self) -> List[List[str]]:
        return [command.argv for command in self.executed]

    @property
    def mutations(self) -> List[List[str]]:
        return [command.argv for command in self.executed if command.mutating]


class HostLayout:
    """Files a Debian host would have, rooted in a temporary directory."""

    def __init__(self, root: Path):
        self.bin_dir = root / "usr" / "bin"
        self.lib_units = root / "lib" / "systemd" / "system"
        self.etc_units = root / "etc" / "systemd" / "system"
        self.conf_dir = root / "etc" / "apache2" / "conf-available"
        self.composer_path = root / "usr" / "local" / "bin" / "composer"
        for directory in (self.bin_dir, self.lib_units, self.etc_units, self.conf_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def add_binaries(self, version: str, tools=tuple(CliTool)) -> None:
        for tool in tools:
            (self.bin_dir / f"{tool.value}{version}").write_text("#!/bin/sh\n")

    def add_unit(self, service: str, etc: bool = False) -> None:
        unit_dir = self.etc_units if etc else self.lib_units
        (unit_dir / f"{service}.service").write_text("[Unit]\n")

    def add_conf(self, name: str) -> Path:
        path = self.conf_dir / f"{name}.conf"
        path.write_text(f"# {name}\n")
        return path

    def config(self, **overrides) -> Config:
        data = {
            "logging": {"file": None},
            "php": {"binary_dir": str(self.bin_dir)},
            "services": {"unit_dirs": [str(self.lib_units), str(self.etc_units)]},
            "apache": {"conf_available_dir": str(self.conf_dir)},
            "composer": {"install_path": str(self.composer_path)},
        }
        data.update(overrides)
        return Config(**data)


def http_factory(handler: Callable[[httpx.Request], httpx.Response]):
    """HTTP client factory serving every request from ``handler``."""
    return lambda: httpx.Client(transport=httpx.MockTransport(handler))


def offline(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Network is unreachable", request=request)


def online(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200)
