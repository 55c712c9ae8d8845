"""
Test service orchestration, Apache fragments and alternatives switching.
"""

from php_switcher.core.alternatives import AlternativesSwitcher
from php_switcher.core.apache import ApacheConfigurator
from php_switcher.core.commands import CliTool
from php_switcher.core.models import Outcome, PhpVersion
from php_switcher.core.services import ServiceOrchestrator
from tests.helpers import FakeRunner

LISTING = """\
apache2.service      loaded active running The Apache HTTP Server
php8.1-fpm.service   loaded active running The PHP 8.1 FastCGI Process Manager
"""


class TestServiceOrchestrator:
    """Test the ordered service control mechanisms."""

    def test_systemctl_first(self, config, runner, path_tools, caplog):
        services = ServiceOrchestrator(config, runner)

        result = services.restart("php8.2-fpm")

        assert result.ok
        assert result.strategy == "systemctl"
        assert runner.argvs == [["systemctl", "restart", "php8.2-fpm"]]
        assert "Service php8.2-fpm restarted successfully using systemctl" in caplog.text

    def test_falls_back_to_service(self, config, runner, path_tools, caplog):
        runner.respond("systemctl", returncode=1)
        services = ServiceOrchestrator(config, runner)

        result = services.restart("php8.2-fpm")

        assert result.strategy == "service"
        assert runner.argvs == [
            ["systemctl", "restart", "php8.2-fpm"],
            ["service", "php8.2-fpm", "restart"],
        ]
        assert "systemctl failed to restart php8.2-fpm, trying next mechanism..." in caplog.text

    def test_skips_absent_mechanism(self, config, runner, path_tools):
        path_tools.discard("systemctl")
        services = ServiceOrchestrator(config, runner)

        result = services.stop("php8.1-fpm")

        assert result.strategy == "service"
        assert runner.argvs == [["service", "php8.1-fpm", "stop"]]

    def test_all_mechanisms_fail_is_soft(self, config, runner, path_tools, caplog):
        runner.respond("systemctl", returncode=1)
        runner.respond("service", returncode=1)
        services = ServiceOrchestrator(config, runner)

        result = services.reload("apache2")

        assert result.outcome == Outcome.SOFT_FAILURE
        assert result.message == "Failed to reload apache2 with systemctl and service"
        assert "Failed to reload apache2" in caplog.text

    def test_no_mechanism_available(self, config, runner, path_tools):
        path_tools.clear()
        services = ServiceOrchestrator(config, runner)

        result = services.start("php8.2-fpm")

        assert result.outcome == Outcome.SOFT_FAILURE
        assert runner.executed == []

    def test_enable_falls_back_to_update_rc_d(self, config, runner, path_tools):
        runner.respond("systemctl", returncode=1)
        services = ServiceOrchestrator(config, runner)

        result = services.enable("php8.2-fpm")

        assert result.strategy == "update-rc.d"
        assert runner.argvs == [
            ["systemctl", "enable", "php8.2-fpm"],
            ["update-rc.d", "php8.2-fpm", "enable"],
        ]

    def test_dry_run_runs_nothing(self, dry_run_config, path_tools):
        runner = FakeRunner(dry_run_config)
        services = ServiceOrchestrator(dry_run_config, runner)

        result = services.disable("php8.1-fpm")

        assert result.ok and result.dry_run
        assert runner.executed == []
        assert runner.described == []


class TestUnitExists:
    """Test service unit detection."""

    def test_found_in_listing(self, config, runner):
        runner.respond("systemctl", "list-units", stdout=LISTING)
        assert ServiceOrchestrator(config, runner).unit_exists("php8.1-fpm")

    def test_listing_needs_exact_unit(self, config, runner):
        runner.respond("systemctl", "list-units", stdout=LISTING)
        assert not ServiceOrchestrator(config, runner).unit_exists("php8.1")

    def test_found_in_unit_file(self, host, config, runner):
        host.add_unit("php7.4-fpm", etc=True)
        assert ServiceOrchestrator(config, runner).unit_exists("php7.4-fpm")

    def test_found_when_listing_fails(self, host, config, runner):
        runner.respond("systemctl", "list-units", returncode=1)
        host.add_unit("php8.0-fpm")
        assert ServiceOrchestrator(config, runner).unit_exists("php8.0-fpm")

    def test_absent(self, config, runner):
        runner.respond("systemctl", "list-units", stdout=LISTING)
        assert not ServiceOrchestrator(config, runner).unit_exists("php7.2-fpm")


class TestApacheConfigurator:
    """Test Apache fragment management."""

    def test_enable_backs_up_first(self, host, config, runner):
        conf = host.add_conf("php8.2-fpm")
        apache = ApacheConfigurator(config, runner)

        result = apache.enable_conf("php8.2-fpm")

        assert result.ok
        assert runner.argvs == [["a2enconf", "php8.2-fpm"]]
        backups = list(host.conf_dir.glob("php8.2-fpm.conf.bak_*"))
        assert len(backups) == 1
        assert backups[0].read_text() == conf.read_text()

    def test_disable_failure_is_soft(self, host, config, runner, caplog):
        host.add_conf("php8.1-fpm")
        runner.respond("a2disconf", returncode=1)
        apache = ApacheConfigurator(config, runner)

        result = apache.disable_conf("php8.1-fpm")

        assert result.outcome == Outcome.SOFT_FAILURE
        assert "Failed to disable Apache configuration for php8.1-fpm." in caplog.text

    def test_missing_fragment(self, config, runner):
        apache = ApacheConfigurator(config, runner)
        assert not apache.has_conf("php8.2-fpm")
        assert apache.backup_conf("php8.2-fpm") is None

    def test_dry_run_writes_no_backup(self, host, dry_run_config):
        host.add_conf("php8.2-fpm")
        runner = FakeRunner(dry_run_config)
        apache = ApacheConfigurator(dry_run_config, runner)

        result = apache.enable_conf("php8.2-fpm")

        assert result.ok and result.dry_run
        assert list(host.conf_dir.glob("*.bak_*")) == []
        assert [c.argv for c in runner.described] == [["a2enconf", "php8.2-fpm"]]


class TestAlternativesSwitcher:
    """Test alternatives switching."""

    def test_switch_all_present_tools(self, host, config, runner):
        host.add_binaries("8.2", tools=[CliTool.PHP, CliTool.PHPIZE])
        alternatives = AlternativesSwitcher(config, runner)

        results = alternatives.switch_all(PhpVersion(value="8.2"))

        assert all(r.ok for r in results)
        assert runner.argvs == [
            ["update-alternatives", "--set", "php", str(host.bin_dir / "php8.2")],
            ["update-alternatives", "--set", "phpize", str(host.bin_dir / "phpize8.2")],
        ]

    def test_failure_is_soft(self, host, config, runner):
        host.add_binaries("8.2")
        runner.respond("update-alternatives", "--set", "phar", returncode=2)
        alternatives = AlternativesSwitcher(config, runner)

        results = alternatives.switch_all(PhpVersion(value="8.2"))

        assert len(results) == 5
        assert [r.outcome for r in results].count(Outcome.SOFT_FAILURE) == 1
