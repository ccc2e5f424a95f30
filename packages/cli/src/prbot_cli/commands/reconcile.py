"""reconcile command: supersede every prbot review except the latest."""

from __future__ import annotations

import click
from rich.console import Console

from prbot_cli.commands.review import require_token
from prbot_core.exceptions import ReviewError
from prbot_core.reviewer import reconcile_pull_request

console = Console()


@click.command("reconcile")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.pass_context
def reconcile_cmd(ctx, repo: str, pr_number: int):
    """Mark earlier prbot reviews as superseded by the latest one."""
    config = ctx.obj["config"]
    require_token(config)

    try:
        report = reconcile_pull_request(repo=repo, pr_number=pr_number, config=config)
    except ReviewError as e:
        raise click.ClickException(str(e)) from e

    if report is None:
        return
    console.print(
        f"Invalidated {len(report.invalidated)} review(s), "
        f"deleted {len(report.deleted_comments)} comment(s)."
    )
    if not report.ok:
        for failure in report.failures:
            console.print(f"[red]{failure}[/red]")
        ctx.exit(1)
