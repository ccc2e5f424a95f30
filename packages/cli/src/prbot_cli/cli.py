"""CLI entry point for prbot.

Commands:
  review     run the reviewer checks on a pull request and post one review
  reconcile  supersede all but the latest prbot review on a pull request
  packages   list the packages prbot discovers in a checkout
"""

from __future__ import annotations

import importlib.metadata

import click

from prbot_cli.commands.packages import packages_cmd
from prbot_cli.commands.reconcile import reconcile_cmd
from prbot_cli.commands.review import review_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("prbot"),
    prog_name="prbot",
)
@click.option(
    "--config",
    "config_path",
    default=".prbot.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRBOT_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Automated pull request reviewer."""
    from prbot_core.config import load_config
    from prbot_cli.auth import resolve_github_token
    from prbot_cli.logging_config import configure_logging

    configure_logging(verbose)
    ctx.ensure_object(dict)

    config = load_config(config_path)

    # Resolve token early so all subcommands share the same resolution.
    token = resolve_github_token()
    if token:
        config["github_token"] = token

    ctx.obj["config"] = config


main.add_command(review_cmd)
main.add_command(reconcile_cmd)
main.add_command(packages_cmd)
