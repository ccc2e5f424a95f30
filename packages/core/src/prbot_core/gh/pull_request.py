from __future__ import annotations

from github import Github, GithubException
from requests.exceptions import RequestException

from prbot_core.types import PullRequestRef, ReviewComment

# API errors plus transport failures (refused connections, timeouts) that
# PyGithub lets escape from requests unwrapped.
PLATFORM_ERRORS = (GithubException, RequestException)


def get_github(token: str | None) -> Github:
    return Github(token)


def get_repo(repo_name: str, token: str | None = None, gh: Github | None = None):
    return (gh or get_github(token)).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_pull_request_ref(pr) -> PullRequestRef:
    return PullRequestRef(
        number=pr.number,
        base_sha=pr.base.sha,
        head_sha=pr.head.sha,
        title=pr.title or "",
        html_url=pr.html_url or "",
    )


def get_authenticated_login(gh: Github) -> str:
    """Return the login of the account the token belongs to."""
    return gh.get_user().login


def list_reviews(pr, login: str | None = None) -> list:
    """Return the PR's reviews in submission order, optionally only those by ``login``."""
    reviews = list(pr.get_reviews())
    if login is None:
        return reviews
    return [r for r in reviews if r.user is not None and r.user.login == login]


def create_review(pr, body: str, event: str, comments: list[ReviewComment]):
    return pr.create_review(body=body, event=event, comments=[c.to_dict() for c in comments])


def update_review(pr, review_id: int, body: str) -> None:
    """Replace the body of a submitted review."""
    # PyGithub has no wrapper for PUT /pulls/{n}/reviews/{id}.
    pr._requester.requestJsonAndCheck("PUT", f"{pr.url}/reviews/{review_id}", input={"body": body})


def dismiss_review(review, message: str) -> None:
    review.dismiss(message)


def list_review_comments(pr, review_id: int) -> list:
    return list(pr.get_single_review_comments(review_id))


def delete_review_comment(comment) -> None:
    comment.delete()
