"""
Display helper functions for CLI commands.
"""

from typing import Dict, List, Optional

from rich.console import Console
from rich.table import Table

from php_switcher.core.models import InstallReport

console = Console()


def show_versions(versions: List[str]) -> None:
    """Print the PHP binaries registered in the alternatives system."""
    if not versions:
        console.print("[yellow]No PHP versions found in alternatives system[/yellow]")
        return
    for version in versions:
        console.print(f"  {version}")


def show_extension_report(report: Dict[str, bool], banner: Optional[str]) -> None:
    """Render the required extension check as a table."""
    console.print(f"PHP Version: [cyan]{banner or 'unknown'}[/cyan]")

    table = Table(
        title="Required extensions",
        show_header=True,
        header_style="bold cyan",
        title_style="bold cyan",
    )
    table.add_column("Extension", style="white", width=14)
    table.add_column("Status", width=14)

    for extension, present in report.items():
        status = "[green]✓ Loaded[/green]" if present else "[red]✗ Missing![/red]"
        table.add_row(extension, status)

    console.print("")
    console.print(table)

    missing = [name for name, present in report.items() if not present]
    if missing:
        console.print(f"[red]{len(missing)} required extension(s) missing[/red]")
    else:
        console.print("[green]All required extensions are loaded[/green]")


def show_install_report(report: InstallReport) -> None:
    """Print a one-line summary per package list."""
    if report.planned:
        console.print(f"[yellow]Dry-run: {len(report.planned)} package(s) would be installed[/yellow]")
    if report.installed:
        console.print(f"[green]✓ Installed ({len(report.installed)}):[/green] {' '.join(report.installed)}")
    if report.failed:
        console.print(f"[red]✗ Failed ({len(report.failed)}):[/red] {' '.join(report.failed)}")
