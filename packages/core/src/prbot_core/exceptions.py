"""Error taxonomy for a review run.

LookupFailure, SyncFailure and SubmissionFailure stop the run. CheckFailure
and ReconciliationFailure are never raised out of the run; they are collected
on the returned summary so the caller can report them.
"""

from __future__ import annotations


class ReviewError(Exception):
    """Base exception for all review run errors."""


class LookupFailure(ReviewError):
    """The pull request or the authenticated account could not be fetched."""

    def __init__(self, what: str, detail: str = "") -> None:
        self.what = what
        message = f"Could not look up {what}"
        super().__init__(f"{message}: {detail}" if detail else message)


class SyncFailure(ReviewError):
    """Fetching commits, finding the merge base or diffing failed."""


class SubmissionFailure(ReviewError):
    """The new review could not be created."""


class GitError(Exception):
    """A git command exited with a non-zero status or timed out."""

    def __init__(self, args: list[str], returncode: int | None, stderr: str = "") -> None:
        self.command = args
        self.returncode = returncode
        self.stderr = stderr
        status = "timed out" if returncode is None else f"exited {returncode}"
        super().__init__(f"git {' '.join(args)} {status}: {stderr.strip()}".rstrip(": "))


class CheckFailure(ReviewError):
    """A reviewer check raised. Recorded, never raised out of run_review."""

    def __init__(self, reviewer: str, error: BaseException) -> None:
        self.reviewer = reviewer
        self.error = error
        super().__init__(f"{reviewer} failed: {error}")


class ReconciliationFailure(ReviewError):
    """A past review could not be edited or dismissed, or a comment could not be deleted."""

    def __init__(self, action: str, target_id: int, error: BaseException) -> None:
        self.action = action
        self.target_id = target_id
        self.error = error
        super().__init__(f"Could not {action} {target_id}: {error}")
