"""Tests for GitHub pull request helper functions."""

from unittest.mock import MagicMock

from prbot_core.gh.pull_request import (
    create_review,
    delete_review_comment,
    get_authenticated_login,
    get_pull_request_ref,
    list_review_comments,
    list_reviews,
    update_review,
)
from prbot_core.types import PullRequestRef, ReviewComment


def _review(login):
    r = MagicMock()
    r.user.login = login
    return r


class TestListReviews:
    def test_keeps_submission_order_and_filters_author(self):
        mine_1, other, mine_2 = _review("bot"), _review("human"), _review("bot")
        pr = MagicMock()
        pr.get_reviews.return_value = [mine_1, other, mine_2]
        assert list_reviews(pr, "bot") == [mine_1, mine_2]

    def test_without_login_returns_all(self):
        reviews = [_review("bot"), _review("human")]
        pr = MagicMock()
        pr.get_reviews.return_value = reviews
        assert list_reviews(pr) == reviews

    def test_skips_reviews_from_deleted_accounts(self):
        ghost = MagicMock()
        ghost.user = None
        pr = MagicMock()
        pr.get_reviews.return_value = [ghost]
        assert list_reviews(pr, "bot") == []


def test_get_pull_request_ref():
    pr = MagicMock()
    pr.number = 3
    pr.base.sha = "b" * 40
    pr.head.sha = "h" * 40
    pr.title = None
    pr.html_url = "https://github.com/o/r/pull/3"
    assert get_pull_request_ref(pr) == PullRequestRef(
        number=3, base_sha="b" * 40, head_sha="h" * 40, title="", html_url="https://github.com/o/r/pull/3"
    )


def test_get_authenticated_login():
    gh = MagicMock()
    gh.get_user.return_value.login = "bot"
    assert get_authenticated_login(gh) == "bot"


def test_create_review_sends_comment_dicts():
    pr = MagicMock()
    create_review(pr, "body", "COMMENT", [ReviewComment("a.py", 2, "nit")])
    pr.create_review.assert_called_once_with(
        body="body", event="COMMENT", comments=[{"path": "a.py", "position": 2, "body": "nit"}]
    )


def test_update_review_puts_new_body():
    pr = MagicMock()
    pr.url = "https://api.github.com/repos/o/r/pulls/3"
    update_review(pr, 42, "superseded")
    pr._requester.requestJsonAndCheck.assert_called_once_with(
        "PUT", "https://api.github.com/repos/o/r/pulls/3/reviews/42", input={"body": "superseded"}
    )


def test_list_review_comments_and_delete():
    comment = MagicMock()
    pr = MagicMock()
    pr.get_single_review_comments.return_value = [comment]
    assert list_review_comments(pr, 42) == [comment]
    pr.get_single_review_comments.assert_called_once_with(42)
    delete_review_comment(comment)
    comment.delete.assert_called_once()
