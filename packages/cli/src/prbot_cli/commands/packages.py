"""packages command: show the packages discovered in a checkout."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from prbot_core.packages import DEFAULT_PATTERNS, list_packages

console = Console()


@click.command("packages")
@click.option("--workdir", default=None, help="Local checkout of the repository. Overrides config file.")
@click.pass_context
def packages_cmd(ctx, workdir: str | None):
    """List the packages the changelog check knows about."""
    config = ctx.obj["config"]
    workdir = workdir or config.get("workdir", ".")
    packages = list_packages(
        workdir,
        config.get("package_patterns", DEFAULT_PATTERNS),
        config.get("changelog_name", "CHANGELOG.md"),
    )
    if not packages:
        console.print("[yellow]No packages found.[/yellow]")
        return

    table = Table(title=f"Packages in {workdir}", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold")
    table.add_column("Path")
    table.add_column("Changelog")

    for pkg in packages:
        has_changelog = (Path(workdir) / pkg.changelog_path).is_file()
        table.add_row(
            pkg.name,
            pkg.path,
            pkg.changelog_path if has_changelog else "[dim]none[/dim]",
        )

    console.print(table)
