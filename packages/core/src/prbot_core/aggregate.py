"""Turns reviewer outputs into the event, body and inline comments of one review."""

from __future__ import annotations

from prbot_core.types import ReviewComment, ReviewEvent, ReviewOutput, ReviewStatus

GREETING = "Hi there! 👋 I've found some issues in your pull request that should be addressed 👇"

_STATUS_PREFIX = {
    ReviewStatus.SUCCESS: "✅ Success",
    ReviewStatus.WARN: "⚠️ Warning",
    ReviewStatus.ERROR: "❌ Error",
}


def prefix_for_status(status: ReviewStatus) -> str:
    return _STATUS_PREFIX[ReviewStatus(status)]


def get_review_event(outputs: list[ReviewOutput]) -> str:
    """Request changes if any check errored, comment otherwise.

    Never APPROVE: a person still has to look at the changes.
    """
    if any(output.status >= ReviewStatus.ERROR for output in outputs):
        return ReviewEvent.REQUEST_CHANGES
    return ReviewEvent.COMMENT


def get_review_comments(outputs: list[ReviewOutput]) -> list[ReviewComment]:
    comments: list[ReviewComment] = []
    for output in outputs:
        comments.extend(output.comments or [])
    return comments


def _render_section(output: ReviewOutput) -> str:
    return (
        "<details>\n"
        f"  <summary><strong>{prefix_for_status(output.status)}</strong>: {output.title}</summary>\n"
        "\n"
        "\\\n"
        f"{output.body}\n"
        "</details>"
    )


def build_review_body(outputs: list[ReviewOutput], head_sha: str, bot_name: str = "prbot") -> str:
    """Build the review body; outputs without a title or body get no section."""
    sections = [_render_section(output) for output in outputs if output.title and output.body]
    return f"{GREETING}\n\n" + "\n".join(sections) + f"\n\n*Generated by {bot_name} 🤖 against {head_sha}*\n"


def build_superseded_body(new_review_url: str) -> str:
    return f"*The review previously left here is no longer valid, jump to the latest one 👉 {new_review_url}*"
