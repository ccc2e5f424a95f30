"""Data passed between the orchestrator, the reviewer checks and the aggregator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prbot_core.exceptions import CheckFailure
    from prbot_core.reconcile import ReconciliationReport


class ReviewStatus(IntEnum):
    SUCCESS = 1
    WARN = 2
    ERROR = 3


class ReviewEvent:
    COMMENT = "COMMENT"
    APPROVE = "APPROVE"
    REQUEST_CHANGES = "REQUEST_CHANGES"


@dataclass(frozen=True)
class PullRequestRef:
    number: int
    base_sha: str
    head_sha: str
    title: str = ""
    html_url: str = ""


@dataclass(frozen=True)
class Hunk:
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int


@dataclass
class FileDiff:
    """A single changed file in a ``git diff``.

    ``path`` is the new path, or the old one for deleted files. ``positions``
    maps new-file line numbers to the GitHub diff position a review comment
    must use to land on that line.
    """

    path: str
    old_path: str | None = None
    status: str = "modified"  # "added" | "deleted" | "modified" | "renamed"
    hunks: list[Hunk] = field(default_factory=list)
    patch: str = ""
    positions: dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ReviewInput:
    """Everything a reviewer check gets to look at. Shared read-only by all checks."""

    pull_request: PullRequestRef
    merge_base_sha: str
    diff: tuple[FileDiff, ...]
    repo: str = ""
    workdir: str = "."

    @property
    def changed_paths(self) -> frozenset[str]:
        return frozenset(file_diff.path for file_diff in self.diff)

    @property
    def touched_paths(self) -> frozenset[str]:
        """New paths plus the old location of every renamed or deleted file."""
        paths = set(self.changed_paths)
        paths.update(file_diff.old_path for file_diff in self.diff if file_diff.old_path)
        return frozenset(paths)


@dataclass
class ReviewComment:
    path: str
    position: int
    body: str

    def to_dict(self) -> dict:
        return {"path": self.path, "position": self.position, "body": self.body}


@dataclass
class ReviewOutput:
    """A finding reported by a reviewer check.

    Outputs without a title or body still count towards the review event and
    still contribute their inline comments; they just get no body section.
    """

    status: ReviewStatus
    title: str | None = None
    body: str | None = None
    comments: list[ReviewComment] = field(default_factory=list)


@dataclass
class ReviewSummary:
    """Result returned by run_review."""

    repo: str
    pr_number: int
    head_sha: str
    merge_base_sha: str
    event: str
    body: str
    comments: list[ReviewComment] = field(default_factory=list)
    review_id: int | None = None
    review_url: str | None = None
    dry_run: bool = False
    check_failures: list[CheckFailure] = field(default_factory=list)
    reconciliation: ReconciliationReport | None = None
