"""
Configuration management for PHP Switcher.

Provides hierarchical configuration loading with validation using Pydantic.
Supports TOML configuration files and environment variable overrides.
The resulting ``Config`` object is passed explicitly to every component.
"""

import os
from pathlib import Path
from typing import Any, List, Optional, Union

import pydantic
import toml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from php_switcher.core.exceptions import ConfigError
from php_switcher.core.models import VERSION_PATTERN
from php_switcher.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SUPPORTED_VERSIONS = ["7.2", "7.3", "7.4", "8.0", "8.1", "8.2", "8.3"]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="File logging level")
    console_level: str = Field(default="INFO", description="Console logging level")
    file: Optional[str] = Field(default="/var/log/php-switcher.log", description="Log file path")
    enable_rich: bool = Field(default=True, description="Enable Rich console output")

    @field_validator("level", "console_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()


class PhpConfig(BaseModel):
    """PHP runtime layout on the host."""

    supported_versions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SUPPORTED_VERSIONS),
        description="Versions whose FPM services are disabled when switching away",
    )
    binary_dir: str = Field(default="/usr/bin", description="Directory holding versioned PHP binaries")
    fpm_socket_dir: str = Field(default="/run/php", description="Directory holding FPM sockets")

    @field_validator("supported_versions")
    @classmethod
    def validate_supported_versions(cls, v: List[str]) -> List[str]:
        """Validate every supported version."""
        for version in v:
            if not VERSION_PATTERN.fullmatch(version):
                raise ValueError(f"Invalid supported version: {version}")
        return v


class PackagesConfig(BaseModel):
    """Package repository configuration."""

    repository: str = Field(default="ppa:ondrej/php", description="Upstream PHP repository")
    repository_helper: str = Field(
        default="software-properties-common",
        description="Package providing add-apt-repository",
    )
    network_probe_url: str = Field(default="https://google.com", description="URL probed before installing")
    network_timeout: float = Field(default=10.0, description="Network probe timeout in seconds")


class ComposerConfig(BaseModel):
    """Composer dependency manager configuration."""

    installer_url: str = Field(default="https://getcomposer.org/installer", description="Installer download URL")
    signature_url: str = Field(
        default="https://composer.github.io/installer.sig",
        description="Published SHA-384 signature of the installer",
    )
    install_path: str = Field(default="/usr/local/bin/composer", description="Final location of the binary")
    download_timeout: float = Field(default=60.0, description="Download timeout in seconds")


class ServicesConfig(BaseModel):
    """Service manager configuration."""

    unit_dirs: List[str] = Field(
        default_factory=lambda: ["/lib/systemd/system", "/etc/systemd/system"],
        description="Directories searched for systemd unit files",
    )
    web_server: str = Field(default="apache2", description="Web server service name")


class ApacheConfig(BaseModel):
    """Apache integration configuration."""

    conf_available_dir: str = Field(
        default="/etc/apache2/conf-available",
        description="Directory holding configuration fragments",
    )
    package: str = Field(default="apache2", description="Package whose presence means Apache is installed")


class Config(BaseSettings):
    """Main configuration class."""

    # Core settings
    dry_run: bool = Field(default=False, description="Describe mutating actions without running them")
    debug: bool = Field(default=False, description="Enable debug mode")
    required_tools: List[str] = Field(
        default_factory=lambda: [
            "apt-get", "dpkg", "dpkg-query", "systemctl", "service", "update-alternatives",
        ],
        description="Host tools that must be on PATH",
    )

    # Component configurations
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    php: PhpConfig = Field(default_factory=PhpConfig)
    packages: PackagesConfig = Field(default_factory=PackagesConfig)
    composer: ComposerConfig = Field(default_factory=ComposerConfig)
    services: ServicesConfig = Field(default_factory=ServicesConfig)
    apache: ApacheConfig = Field(default_factory=ApacheConfig)

    model_config = {
        "env_prefix": "PHP_SWITCHER_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }

    def get_log_file(self) -> Optional[Path]:
        """Get log file path."""
        if self.logging.file:
            return Path(os.path.expanduser(self.logging.file))
        return None


class ConfigManager:
    """Configuration manager with hierarchical loading."""

    DEFAULT_FILES = [
        "/etc/php-switcher/config.toml",
        "~/.config/php-switcher/config.toml",
        "./.php-switcher.toml",
    ]

    def load_config(
        self,
        config_files: Optional[List[Union[str, Path]]] = None,
        **overrides: Any,
    ) -> Config:
        """
        Load configuration from multiple sources.

        Later files win over earlier ones, and explicit overrides win
        over every file.

        Args:
            config_files: List of configuration files to load
            **overrides: Configuration overrides

        Returns:
            Loaded configuration

        Raises:
            ConfigError: If a file cannot be parsed or a value is invalid
        """
        if config_files is None:
            config_files = self.DEFAULT_FILES

        config_data = {}

        for config_file in config_files:
            file_path = Path(os.path.expanduser(str(config_file)))
            if not file_path.exists():
                continue
            try:
                file_data = toml.load(file_path)
            except (toml.TomlDecodeError, OSError) as e:
                raise ConfigError(f"Failed to load config from {file_path}: {e}")
            _merge(config_data, file_data)
            logger.debug(f"Loaded configuration from {file_path}")

        config_data.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return Config(**config_data)
        except pydantic.ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}")


def _merge(target: dict, source: dict) -> None:
    """Merge nested TOML tables section by section."""
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge(target[key], value)
        else:
            target[key] = value


# Global configuration manager
_config_manager = ConfigManager()

# Convenience functions
load_config = _config_manager.load_config
