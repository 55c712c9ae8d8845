"""
Typed command builders.

Every external command is assembled here as an argv list from a
validated ``PhpVersion`` and the fixed token enums below, never from
free-form strings, and is executed without a shell.
"""

import shlex
from enum import Enum
from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, Field

from php_switcher.core.models import PhpVersion

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


class ExtensionToken(str, Enum):
    """Extension package suffixes installed with every PHP version."""

    CLI = "cli"
    COMMON = "common"
    FPM = "fpm"
    MYSQL = "mysql"
    ZIP = "zip"
    GD = "gd"
    MBSTRING = "mbstring"
    CURL = "curl"
    XML = "xml"
    BCMATH = "bcmath"
    SOAP = "soap"
    INTL = "intl"
    READLINE = "readline"
    LDAP = "ldap"
    MSGPACK = "msgpack"
    IGBINARY = "igbinary"
    REDIS = "redis"
    XDEBUG = "xdebug"
    MEMCACHED = "memcached"


class CliTool(str, Enum):
    """Command-line tools registered in the alternatives system."""

    PHP = "php"
    PHAR = "phar"
    PHAR_PHAR = "phar.phar"
    PHP_CONFIG = "php-config"
    PHPIZE = "phpize"


class ServiceAction(str, Enum):
    """Actions understood by the service orchestrator."""

    START = "start"
    STOP = "stop"
    RESTART = "restart"
    RELOAD = "reload"
    ENABLE = "enable"
    DISABLE = "disable"


class Command(BaseModel):
    """An argv to execute, never passed through a shell."""

    argv: List[str] = Field(description="Program and arguments")
    mutating: bool = Field(default=True, description="Changes host state")
    env: Dict[str, str] = Field(default_factory=dict, description="Extra environment variables")

    def __str__(self) -> str:
        return " ".join(shlex.quote(part) for part in self.argv)


# Names

def extension_package(version: PhpVersion, token: ExtensionToken) -> str:
    return f"php{version}-{token.value}"


def fpm_package(version: PhpVersion) -> str:
    return extension_package(version, ExtensionToken.FPM)


def apache_module_package(version: PhpVersion) -> str:
    return f"libapache2-mod-php{version}"


def fpm_service(version: PhpVersion) -> str:
    return f"php{version}-fpm"


def fpm_conf_name(version: PhpVersion) -> str:
    return f"php{version}-fpm"


def tool_binary(binary_dir: str, tool: CliTool, version: PhpVersion) -> Path:
    return Path(binary_dir) / f"{tool.value}{version}"


# Package management

def apt_install(package: str) -> Command:
    return Command(argv=["apt-get", "install", "-y", package], env=APT_ENV)


def apt_update() -> Command:
    return Command(argv=["apt-get", "update"], env=APT_ENV)


def apt_purge_version(version: PhpVersion) -> Command:
    # apt expands the pattern itself
    return Command(argv=["apt-get", "purge", "-y", f"php{version}*"], env=APT_ENV)


def apt_autoremove() -> Command:
    return Command(argv=["apt-get", "autoremove", "-y"], env=APT_ENV)


def add_repository(repository: str) -> Command:
    return Command(argv=["add-apt-repository", "-y", repository], env=APT_ENV)


def package_status(package: str) -> Command:
    return Command(argv=["dpkg-query", "-W", "-f=${Status}", package], mutating=False)


# Services

def systemctl(action: ServiceAction, service: str) -> Command:
    return Command(argv=["systemctl", action.value, service])


def sysv_service(action: ServiceAction, service: str) -> Command:
    return Command(argv=["service", service, action.value])


def update_rc_d(action: ServiceAction, service: str) -> Command:
    return Command(argv=["update-rc.d", service, action.value])


def list_service_units() -> Command:
    return Command(
        argv=["systemctl", "list-units", "--type=service", "--all", "--no-legend", "--plain"],
        mutating=False,
    )


# Apache

def enable_apache_conf(name: str) -> Command:
    return Command(argv=["a2enconf", name])


def disable_apache_conf(name: str) -> Command:
    return Command(argv=["a2disconf", name])


# Alternatives

def set_alternative(tool: CliTool, target: Path) -> Command:
    return Command(argv=["update-alternatives", "--set", tool.value, str(target)])


def list_alternatives(tool: CliTool) -> Command:
    return Command(argv=["update-alternatives", "--list", tool.value], mutating=False)


# PHP interpreter queries

def php_version_banner() -> Command:
    return Command(argv=["php", "-v"], mutating=False)


def php_modules() -> Command:
    return Command(argv=["php", "-m"], mutating=False)


def run_composer_setup(installer: Path) -> Command:
    return Command(argv=["php", str(installer), "--quiet"])
