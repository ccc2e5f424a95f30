"""Core PR review orchestration."""

from __future__ import annotations

import functools
import logging
from concurrent.futures import ThreadPoolExecutor

from rich.console import Console

from prbot_core.aggregate import build_review_body, get_review_comments, get_review_event
from prbot_core.exceptions import CheckFailure, GitError, LookupFailure, SubmissionFailure, SyncFailure
from prbot_core.gh.pull_request import (
    PLATFORM_ERRORS,
    create_review,
    get_authenticated_login,
    get_github,
    get_pull,
    get_pull_request_ref,
    get_repo,
    list_reviews,
)
from prbot_core.git import Git
from prbot_core.packages import DEFAULT_PATTERNS
from prbot_core.reconcile import ReconciliationReport, invalidate_past_reviews
from prbot_core.reviewers.base import Reviewer, reviewer_name
from prbot_core.reviewers.changelogs import check_missing_changelogs
from prbot_core.types import ReviewComment, ReviewInput, ReviewOutput, ReviewSummary

console = Console()
logger = logging.getLogger(__name__)


def default_reviewers(config: dict) -> list[Reviewer]:
    """The fixed list of checks every review runs, bound to the loaded config."""
    return [
        functools.partial(
            check_missing_changelogs,
            patterns=tuple(config.get("package_patterns") or DEFAULT_PATTERNS),
            changelog_name=config.get("changelog_name", "CHANGELOG.md"),
        ),
    ]


def run_reviewers(
    reviewers: list[Reviewer], review_input: ReviewInput, max_workers: int = 4
) -> tuple[list[ReviewOutput], list[CheckFailure]]:
    """Run all reviewers concurrently; return their outputs in registration order.

    A reviewer that raises counts as having found nothing. Its error is logged
    and returned alongside the outputs.
    """
    if not reviewers:
        return [], []

    outputs: list[ReviewOutput] = []
    failures: list[CheckFailure] = []
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(reviewers)))) as executor:
        futures = [executor.submit(reviewer, review_input) for reviewer in reviewers]
        for reviewer, future in zip(reviewers, futures):
            name = reviewer_name(reviewer)
            try:
                output = future.result()
            except Exception as e:
                logger.exception("Reviewer %s failed", name)
                failures.append(CheckFailure(name, e))
                continue
            if output is not None:
                logger.debug("Reviewer %s reported %s", name, output.status.name)
                outputs.append(output)
    return outputs, failures


def print_dry_run(body: str, event: str, comments: list[ReviewComment]) -> None:
    """Print the review that would be submitted without posting it."""
    console.print(f"\n[bold]Dry run: {event} review with {len(comments)} comment(s) (not posted)[/bold]\n")
    console.print(body, markup=False)
    for c in comments:
        console.print(f"[bold cyan]{c.path}[/bold cyan]  position [bold]{c.position}[/bold]")
        console.print(f"  {c.body}", markup=False)


def _lookup(repo: str, pr_number: int, config: dict, repo_obj=None, gh=None):
    gh = gh if gh is not None else get_github(config.get("github_token"))
    try:
        this_repo = repo_obj if repo_obj is not None else get_repo(repo, gh=gh)
        this_pr = get_pull(this_repo, pr_number)
    except PLATFORM_ERRORS as e:
        raise LookupFailure(f"PR #{pr_number} in {repo}", str(e)) from e
    try:
        login = get_authenticated_login(gh)
    except PLATFORM_ERRORS as e:
        raise LookupFailure("the authenticated user", str(e)) from e
    return this_pr, login


def run_review(
    repo: str,
    pr_number: int,
    config: dict,
    repo_obj=None,
    gh=None,
    git: Git | None = None,
    reviewers: list[Reviewer] | None = None,
    dry_run: bool = False,
) -> ReviewSummary | None:
    """Review a pull request and post the result as a single review.

    Returns None when no reviewer had anything to report; nothing is written
    to GitHub in that case. Lookup, sync and submission errors are raised;
    reviewer and reconciliation errors are collected on the summary.
    """
    this_pr, login = _lookup(repo, pr_number, config, repo_obj=repo_obj, gh=gh)
    pr_ref = get_pull_request_ref(this_pr)

    git = git if git is not None else Git(config.get("workdir", "."), timeout=config.get("git_timeout", 120))
    remote = config.get("remote", "origin")
    try:
        console.print(f"👾 Fetching base commit: [yellow bold]{pr_ref.base_sha}[/yellow bold]")
        git.fetch(remote, pr_ref.base_sha)
        console.print(f"👾 Fetching head commit: [yellow bold]{pr_ref.head_sha}[/yellow bold]")
        git.fetch(remote, pr_ref.head_sha)

        # Diff against the common ancestor so commits landed on the base branch
        # after the PR was opened do not show up as part of the PR.
        merge_base_sha = git.merge_base(pr_ref.base_sha, pr_ref.head_sha)
        console.print(f"👀 Found common ancestor: [yellow bold]{merge_base_sha}[/yellow bold]")
        diff = git.diff(merge_base_sha, pr_ref.head_sha)
    except GitError as e:
        raise SyncFailure(str(e)) from e

    review_input = ReviewInput(
        pull_request=pr_ref,
        merge_base_sha=merge_base_sha,
        diff=tuple(diff),
        repo=repo,
        workdir=git.workdir,
    )

    console.print(f"🕵️  Reviewing {len(diff)} changed file(s)")
    if reviewers is None:
        reviewers = default_reviewers(config)
    outputs, check_failures = run_reviewers(reviewers, review_input, config.get("max_workers", 4))

    if not outputs:
        console.print("[green]🥳 There is nothing to nitpick![/green]")
        return None

    try:
        past_reviews = list_reviews(this_pr, login)
    except PLATFORM_ERRORS as e:
        raise LookupFailure(f"past reviews on PR #{pr_number}", str(e)) from e

    body = build_review_body(outputs, pr_ref.head_sha, config.get("bot_name", "prbot"))
    event = get_review_event(outputs)
    comments = get_review_comments(outputs)

    summary = ReviewSummary(
        repo=repo,
        pr_number=pr_number,
        head_sha=pr_ref.head_sha,
        merge_base_sha=merge_base_sha,
        event=event,
        body=body,
        comments=comments,
        check_failures=check_failures,
    )

    if dry_run:
        print_dry_run(body, event, comments)
        summary.dry_run = True
        return summary

    try:
        review = create_review(this_pr, body, event, comments)
    except PLATFORM_ERRORS as e:
        raise SubmissionFailure(f"Could not create a review on PR #{pr_number}: {e}") from e
    summary.review_id = review.id
    summary.review_url = review.html_url
    console.print(f"📝 Created new pull request review with ID: [magenta]{review.id}[/magenta]")

    # The new review stands on its own; a failure past this point is only logged.
    try:
        summary.reconciliation = invalidate_past_reviews(
            this_pr, past_reviews, review.html_url, dismiss=config.get("dismiss_stale_reviews", False)
        )
    except Exception:
        logger.exception("Could not invalidate past reviews on PR #%d", pr_number)

    console.print(f"[green]🥳 Successfully submitted the review:[/green] [blue]{review.html_url}[/blue]")
    return summary


def reconcile_pull_request(
    repo: str, pr_number: int, config: dict, repo_obj=None, gh=None
) -> ReconciliationReport | None:
    """Supersede every bot review on the PR except the latest one.

    Recovers from a run whose reconciliation step did not finish.
    """
    this_pr, login = _lookup(repo, pr_number, config, repo_obj=repo_obj, gh=gh)
    try:
        reviews = list_reviews(this_pr, login)
    except PLATFORM_ERRORS as e:
        raise LookupFailure(f"past reviews on PR #{pr_number}", str(e)) from e

    if len(reviews) < 2:
        console.print("[yellow]No past reviews to reconcile.[/yellow]")
        return None

    latest, past_reviews = reviews[-1], reviews[:-1]
    return invalidate_past_reviews(
        this_pr, past_reviews, latest.html_url, dismiss=config.get("dismiss_stale_reviews", False)
    )
