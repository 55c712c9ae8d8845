"""
Test utility modules of PHP Switcher.

Test configuration, logging, and validation utilities.
"""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pydantic
import pytest

from php_switcher.core.exceptions import ConfigError, PrerequisiteError, ValidationError
from php_switcher.core.preflight import PreflightChecker
from php_switcher.utils import logging as switcher_logging
from php_switcher.utils.config import Config, ConfigManager
from php_switcher.utils.logging import get_logger, setup_logging
from php_switcher.utils.validators import find_missing_tools, has_root_privileges, validate_version


@pytest.fixture
def restore_logging():
    """Remove handlers installed by setup_logging after the test."""
    yield
    root_logger = logging.getLogger()
    for handler in switcher_logging._logger_manager._handlers:
        root_logger.removeHandler(handler)
        handler.close()
    switcher_logging._logger_manager._handlers = []


class TestValidators:
    """Test validation utilities."""

    @pytest.mark.parametrize("version", ["7.4", "8.3", "10.0", "5.6"])
    def test_validate_version_accepts(self, version):
        assert validate_version(version).value == version

    @pytest.mark.parametrize("version", ["8", "php8.2", "8.2.1", "", "8.2\n", " 8.2", "8.x", "8.2;rm"])
    def test_validate_version_rejects(self, version):
        with pytest.raises(ValidationError) as exc_info:
            validate_version(version)
        assert "Expected something like '7.4' or '8.1'" in exc_info.value.message

    def test_validate_version_none(self):
        with pytest.raises(ValidationError):
            validate_version(None)

    def test_version_parts(self):
        version = validate_version("8.12")
        assert version.major == 8
        assert version.minor == 12
        assert str(version) == "8.12"

    def test_find_missing_tools(self, path_tools):
        path_tools.discard("dpkg")
        assert find_missing_tools(["apt-get", "dpkg", "systemctl"]) == ["dpkg"]

    def test_find_missing_tools_all_present(self, path_tools):
        assert find_missing_tools(["apt-get", "systemctl"]) == []

    def test_has_root_privileges(self):
        with patch("os.geteuid", return_value=0):
            assert has_root_privileges() is True
        with patch("os.geteuid", return_value=1000):
            assert has_root_privileges() is False


class TestPreflight:
    """Test preflight checks."""

    def test_missing_tool(self, config, path_tools, caplog):
        path_tools.discard("update-alternatives")

        with pytest.raises(PrerequisiteError) as exc_info:
            PreflightChecker(config).run()

        assert exc_info.value.details == {"missing": ["update-alternatives"]}
        assert "update-alternatives not found" in caplog.text

    def test_not_root(self, config, path_tools):
        with patch("php_switcher.core.preflight.has_root_privileges", return_value=False):
            with pytest.raises(PrerequisiteError) as exc_info:
                PreflightChecker(config).run()
        assert exc_info.value.message == "Please run this tool as root or via sudo."

    def test_all_present_as_root(self, config, path_tools):
        with patch("php_switcher.core.preflight.has_root_privileges", return_value=True):
            PreflightChecker(config).run()


class TestConfig:
    """Test configuration management."""

    def test_config_defaults(self):
        config = Config()

        assert config.dry_run is False
        assert config.debug is False
        assert config.logging.file == "/var/log/php-switcher.log"
        assert config.php.supported_versions == ["7.2", "7.3", "7.4", "8.0", "8.1", "8.2", "8.3"]
        assert config.packages.repository == "ppa:ondrej/php"
        assert config.services.web_server == "apache2"
        assert "update-alternatives" in config.required_tools

    def test_config_environment_override(self):
        with patch.dict(os.environ, {
            "PHP_SWITCHER_DRY_RUN": "true",
            "PHP_SWITCHER_PHP__BINARY_DIR": "/opt/php/bin",
        }):
            config = Config()
        assert config.dry_run is True
        assert config.php.binary_dir == "/opt/php/bin"

    def test_invalid_supported_version(self):
        with pytest.raises(pydantic.ValidationError):
            Config(php={"supported_versions": ["8"]})

    def test_invalid_log_level(self):
        with pytest.raises(pydantic.ValidationError):
            Config(logging={"level": "LOUD"})

    def test_get_log_file(self):
        assert Config(logging={"file": None}).get_log_file() is None
        assert Config(logging={"file": "/tmp/switch.log"}).get_log_file() == Path("/tmp/switch.log")

    def test_load_toml_files(self, tmp_path):
        system = tmp_path / "system.toml"
        system.write_text(
            '[php]\nsupported_versions = ["7.4", "8.1"]\nbinary_dir = "/opt/bin"\n'
        )
        local = tmp_path / "local.toml"
        local.write_text('[php]\nbinary_dir = "/srv/bin"\n\n[services]\nweb_server = "httpd"\n')

        config = ConfigManager().load_config([system, local, tmp_path / "missing.toml"])

        assert config.php.supported_versions == ["7.4", "8.1"]
        assert config.php.binary_dir == "/srv/bin"
        assert config.services.web_server == "httpd"

    def test_overrides_win_and_none_ignored(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("dry_run = false\ndebug = true\n")

        config = ConfigManager().load_config([config_file], dry_run=True, debug=None)

        assert config.dry_run is True
        assert config.debug is True

    def test_malformed_toml(self, tmp_path):
        config_file = tmp_path / "broken.toml"
        config_file.write_text("[php\nbinary_dir = ")

        with pytest.raises(ConfigError):
            ConfigManager().load_config([config_file])

    def test_invalid_value(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text('[php]\nsupported_versions = ["eight"]\n')

        with pytest.raises(ConfigError):
            ConfigManager().load_config([config_file])


class TestLogging:
    """Test logging setup."""

    def test_get_logger(self):
        logger = get_logger("php_switcher.test")
        assert logger.name == "php_switcher.test"
        assert get_logger("php_switcher.test") is logger

    def test_file_lines_are_tagged(self, tmp_path, restore_logging):
        log_file = tmp_path / "logs" / "php-switcher.log"
        setup_logging(log_file=log_file, enable_rich=False)

        logger = get_logger("php_switcher.test")
        logger.info("Switching to PHP 8.2...")
        logger.warning("Skipping unavailable or failed extension: php8.2-xdebug")
        logger.error("Failed to enable php8.2-fpm service.")
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = log_file.read_text().splitlines()
        assert lines[-3].endswith("[INFO] Switching to PHP 8.2...")
        assert lines[-2].endswith("[WARNING] Skipping unavailable or failed extension: php8.2-xdebug")
        assert lines[-1].endswith("[ERROR] Failed to enable php8.2-fpm service.")

    def test_file_is_appended(self, tmp_path, restore_logging):
        log_file = tmp_path / "php-switcher.log"
        log_file.write_text("previous run\n")

        setup_logging(log_file=log_file, enable_rich=False)
        get_logger("php_switcher.test").info("next run")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text()
        assert content.startswith("previous run\n")
        assert "[INFO] next run" in content

    def test_unwritable_log_file(self, tmp_path, restore_logging, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        setup_logging(log_file=blocker / "php-switcher.log", enable_rich=False)

        assert len(switcher_logging._logger_manager._handlers) == 1
        assert "Logging to console only" in caplog.text

    def test_setup_twice_replaces_handlers(self, tmp_path, restore_logging):
        setup_logging(log_file=tmp_path / "a.log", enable_rich=False)
        setup_logging(log_file=tmp_path / "b.log", enable_rich=True)

        assert len(switcher_logging._logger_manager._handlers) == 2
