"""Marks earlier bot reviews as superseded once a new review is posted."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rich.console import Console

from prbot_core.aggregate import build_superseded_body
from prbot_core.exceptions import ReconciliationFailure
from prbot_core.gh.pull_request import (
    PLATFORM_ERRORS,
    delete_review_comment,
    dismiss_review,
    list_review_comments,
    update_review,
)

console = Console()
logger = logging.getLogger(__name__)

DISMISS_MESSAGE = "Dismissing my own review"


@dataclass
class ReconciliationReport:
    invalidated: list[int] = field(default_factory=list)
    dismissed: list[int] = field(default_factory=list)
    deleted_comments: list[int] = field(default_factory=list)
    failures: list[ReconciliationFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def _record(report: ReconciliationReport, action: str, target_id: int, error: Exception) -> None:
    failure = ReconciliationFailure(action, target_id, error)
    logger.warning("%s", failure)
    report.failures.append(failure)


def invalidate_past_reviews(pr, past_reviews: list, new_review_url: str, dismiss: bool = False) -> ReconciliationReport:
    """Point every past review at the new one and clear comments off the latest past review.

    Each edit, dismissal and deletion fails on its own; one failure never stops
    the rest. GitHub keeps edit history, so the old bodies are not preserved.
    """
    report = ReconciliationReport()
    notice = build_superseded_body(new_review_url)

    for past_review in past_reviews:
        console.print(f"💥 Invalidating past review with ID: [magenta]{past_review.id}[/magenta]")
        try:
            update_review(pr, past_review.id, notice)
        except PLATFORM_ERRORS as e:
            # Pending reviews cannot be edited.
            _record(report, "edit review", past_review.id, e)
        else:
            report.invalidated.append(past_review.id)

        if dismiss and getattr(past_review, "state", None) == "CHANGES_REQUESTED":
            try:
                dismiss_review(past_review, DISMISS_MESSAGE)
            except PLATFORM_ERRORS as e:
                _record(report, "dismiss review", past_review.id, e)
            else:
                report.dismissed.append(past_review.id)

    # Only the last review is cleaned up to keep the number of API calls bounded.
    if past_reviews:
        last_review = past_reviews[-1]
        try:
            comments = list_review_comments(pr, last_review.id)
        except PLATFORM_ERRORS as e:
            _record(report, "list comments of review", last_review.id, e)
            comments = []
        for comment in comments:
            try:
                delete_review_comment(comment)
            except PLATFORM_ERRORS as e:
                _record(report, "delete comment", comment.id, e)
            else:
                report.deleted_comments.append(comment.id)

    return report
