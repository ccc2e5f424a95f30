"""review command: run the reviewer checks on a pull request."""

from __future__ import annotations

import click
from rich.console import Console

from prbot_core.exceptions import ReviewError
from prbot_core.reviewer import run_review

console = Console()


def require_token(config: dict) -> str:
    token = config.get("github_token")
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN (or GH_TOKEN) or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )
    return token


@click.command("review")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option("--workdir", default=None, help="Local checkout of the repository. Overrides config file.")
@click.option("--remote", default=None, help="Git remote to fetch the PR commits from. Overrides config file.")
@click.option(
    "--dry-run",
    "-n",
    "dry_run",
    is_flag=True,
    help="Print the review instead of posting it to GitHub.",
)
@click.pass_context
def review_cmd(ctx, repo: str, pr_number: int, workdir: str | None, remote: str | None, dry_run: bool):
    """Review a pull request and post the findings as a single review.

    Earlier prbot reviews on the same pull request are edited to point at
    the new one. A pull request with no findings gets no review.
    """
    config = dict(ctx.obj["config"])
    for key, value in {"workdir": workdir, "remote": remote}.items():
        if value is not None:
            config[key] = value
    require_token(config)

    try:
        summary = run_review(repo=repo, pr_number=pr_number, config=config, dry_run=dry_run)
    except ReviewError as e:
        raise click.ClickException(str(e)) from e

    if summary is None:
        return

    for failure in summary.check_failures:
        console.print(f"[red]Check failed:[/red] {failure}")
    report = summary.reconciliation
    if report is not None and not report.ok:
        console.print(
            f"[yellow]{len(report.failures)} past review update(s) failed. "
            f"Run `prbot reconcile --repo {repo} --pr {pr_number}` to retry.[/yellow]"
        )
