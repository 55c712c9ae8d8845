"""
Pytest configuration and fixtures for PHP Switcher testing.
"""

import logging
from unittest.mock import patch

import pytest

from tests.helpers import FakeRunner, HostLayout

DEFAULT_TOOLS = {
    "apt-get", "dpkg", "dpkg-query", "systemctl", "service", "update-rc.d",
    "update-alternatives", "add-apt-repository", "composer", "php",
}


@pytest.fixture
def host(tmp_path):
    """Temporary host file layout."""
    return HostLayout(tmp_path)


@pytest.fixture
def config(host):
    return host.config()


@pytest.fixture
def dry_run_config(host):
    return host.config(dry_run=True)


@pytest.fixture
def runner(config):
    return FakeRunner(config)


@pytest.fixture
def path_tools():
    """Executables visible on PATH; tests may add or remove names."""
    available = set(DEFAULT_TOOLS)
    with patch("shutil.which", side_effect=lambda name: f"/usr/bin/{name}" if name in available else None):
        yield available


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


@pytest.fixture(autouse=True)
def capture_info(caplog):
    """Record INFO messages so tests can assert on progress logging."""
    caplog.set_level(logging.INFO)
