"""
Main CLI interface for PHP Switcher.

Provides the command-line interface using Click with Rich output:
install, switch and uninstall PHP versions, and inspect the active one.
"""

import sys
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape

from php_switcher import __version__
from php_switcher.cli.helpers import (
    handle_errors,
    show_extension_report,
    show_install_report,
    show_versions,
)
from php_switcher.core.manager import PHPVersionManager
from php_switcher.utils.config import Config, ConfigManager, load_config
from php_switcher.utils.logging import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)

DRY_RUN_FLAG = "--dry-run"

EXAMPLES = """\b
Examples:
  php-switcher install 7.4            Install PHP 7.4 with all required extensions
  php-switcher switch 8.1             Switch the system to PHP 8.1
  php-switcher --dry-run install 8.2  Show what installing PHP 8.2 would do

\b
Note: intended for Debian/Ubuntu-based systems with apt/dpkg.
"""


class CLIContext:
    """Builds the manager used by the subcommands."""

    def create_manager(self, config: Config) -> PHPVersionManager:
        return PHPVersionManager(config)


cli_context = CLIContext()


class SwitcherGroup(click.Group):
    """Command group accepting --dry-run anywhere and rejecting unknown tokens with status 1."""

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        if DRY_RUN_FLAG in args:
            args = [DRY_RUN_FLAG] + [arg for arg in args if arg != DRY_RUN_FLAG]
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            _reject_usage(ctx, e)

    def resolve_command(self, ctx: click.Context, args: List[str]):
        cmd_name = args[0] if args else None
        if cmd_name is not None and self.get_command(ctx, cmd_name) is None:
            _reject_token(ctx, cmd_name)
        return super().resolve_command(ctx, args)

    def invoke(self, ctx: click.Context):
        # Subcommand arguments are parsed here, after the group callback
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            _reject_usage(ctx, e)


def _reject_token(ctx: click.Context, token: str) -> None:
    console.print(
        f"[red]\\[ERROR] Invalid option '{escape(token)}'. Use 'help' for usage instructions.[/red]"
    )
    ctx.exit(1)


def _reject_usage(ctx: click.Context, error: click.UsageError) -> None:
    if isinstance(error, click.NoSuchOption):
        _reject_token(ctx, error.option_name)
    console.print(
        f"[red]\\[ERROR] {escape(error.format_message())} Use 'help' for usage instructions.[/red]"
    )
    ctx.exit(1)


@click.group(cls=SwitcherGroup, invoke_without_command=True, epilog=EXAMPLES)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Display what actions would be performed, without changing the system"
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug logging"
)
@click.option(
    "--config", "config_file",
    type=click.Path(exists=True, file_okay=True, dir_okay=False),
    help="Additional TOML configuration file"
)
@click.version_option(version=__version__, prog_name="PHP Switcher")
@click.pass_context
@handle_errors
def cli(ctx: click.Context, dry_run: bool, debug: bool, config_file: Optional[str]):
    """
    PHP version switcher for Laravel.

    Install, switch and remove PHP versions on Debian/Ubuntu, keeping the
    CLI alternatives, PHP-FPM services and Apache configuration in step.
    """
    config_files = list(ConfigManager.DEFAULT_FILES)
    if config_file:
        config_files.append(config_file)
    config = load_config(
        config_files,
        dry_run=True if dry_run else None,
        debug=True if debug else None,
    )

    setup_logging(
        level="DEBUG" if config.debug else config.logging.level,
        console_level="DEBUG" if config.debug else config.logging.console_level,
        log_file=config.get_log_file(),
        enable_rich=config.logging.enable_rich,
    )
    if config.dry_run:
        logger.warning("Dry-run mode: no changes will be made to the system")

    manager = cli_context.create_manager(config)
    manager.check_prerequisites()
    ctx.obj = manager

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("version", required=False, default="")
@click.pass_obj
@handle_errors
def install(manager: PHPVersionManager, version: str):
    """Install PHP version with Laravel extensions."""
    report = manager.install(version)
    show_install_report(report)


@cli.command()
@click.argument("version", required=False, default="")
@click.pass_obj
@handle_errors
def switch(manager: PHPVersionManager, version: str):
    """Switch to specified PHP version (CLI + mod-PHP/FPM)."""
    result = manager.switch(version)

    if result.active_version:
        console.print(f"Active PHP version (CLI): [cyan]{result.active_version}[/cyan]")
    if not result.succeeded:
        sys.exit(1)


@cli.command()
@click.argument("version", required=False, default="")
@click.pass_obj
@handle_errors
def uninstall(manager: PHPVersionManager, version: str):
    """Uninstall specified PHP version."""
    result = manager.uninstall(version)

    if not result.succeeded:
        sys.exit(1)


@cli.command("list")
@click.pass_obj
@handle_errors
def list_cmd(manager: PHPVersionManager):
    """List installed PHP versions."""
    logger.info("Available PHP versions (via update-alternatives):")
    show_versions(manager.list_versions())


@cli.command()
@click.pass_obj
@handle_errors
def current(manager: PHPVersionManager):
    """Show current PHP version (CLI)."""
    logger.info("Current PHP version (CLI):")
    banner = manager.version_banner()
    if banner:
        console.print(banner)
    else:
        console.print("[yellow]PHP CLI not found[/yellow]")


@cli.command()
@click.pass_obj
@handle_errors
def check(manager: PHPVersionManager):
    """Check PHP configuration for Laravel."""
    logger.info("PHP Configuration for Laravel:")
    show_extension_report(manager.check_extensions(), manager.version_banner())


@cli.command("help")
@click.pass_context
def help_cmd(ctx: click.Context):
    """Show this help message."""
    click.echo(ctx.parent.get_help())


def main():
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
