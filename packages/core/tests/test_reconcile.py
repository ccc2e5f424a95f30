"""Tests for superseding past reviews."""

from unittest.mock import MagicMock

import requests
from github import GithubException

from prbot_core.aggregate import build_superseded_body
from prbot_core.reconcile import invalidate_past_reviews

NEW_URL = "https://github.com/owner/repo/pull/7#pullrequestreview-100"
PR_URL = "https://api.github.com/repos/owner/repo/pulls/7"


def _review(review_id, state="COMMENTED"):
    r = MagicMock()
    r.id = review_id
    r.state = state
    return r


def _comment(comment_id):
    c = MagicMock()
    c.id = comment_id
    return c


def _make_pr(comments_by_review=None):
    pr = MagicMock()
    pr.url = PR_URL
    comments_by_review = comments_by_review or {}
    pr.get_single_review_comments.side_effect = lambda review_id: comments_by_review.get(review_id, [])
    return pr


def _edited_ids(pr):
    return [c.args[1].rsplit("/", 1)[-1] for c in pr._requester.requestJsonAndCheck.call_args_list]


class TestInvalidatePastReviews:
    def test_every_past_review_gets_superseded_notice(self):
        pr = _make_pr()
        reviews = [_review(1), _review(2), _review(3)]

        report = invalidate_past_reviews(pr, reviews, NEW_URL)

        assert report.invalidated == [1, 2, 3]
        assert _edited_ids(pr) == ["1", "2", "3"]
        for call in pr._requester.requestJsonAndCheck.call_args_list:
            assert call.args[0] == "PUT"
            assert call.kwargs["input"] == {"body": build_superseded_body(NEW_URL)}

    def test_only_last_review_loses_its_comments(self):
        first = [_comment(11), _comment(12)]
        second = [_comment(21)]
        third = [_comment(31), _comment(32)]
        pr = _make_pr({1: first, 2: second, 3: third})

        report = invalidate_past_reviews(pr, [_review(1), _review(2), _review(3)], NEW_URL)

        pr.get_single_review_comments.assert_called_once_with(3)
        for c in third:
            c.delete.assert_called_once()
        for c in first + second:
            c.delete.assert_not_called()
        assert report.deleted_comments == [31, 32]

    def test_no_past_reviews_is_a_no_op(self):
        pr = _make_pr()
        report = invalidate_past_reviews(pr, [], NEW_URL)
        pr._requester.requestJsonAndCheck.assert_not_called()
        pr.get_single_review_comments.assert_not_called()
        assert report.ok

    def test_edit_failure_does_not_stop_the_loop(self):
        pr = _make_pr()
        pr._requester.requestJsonAndCheck.side_effect = [GithubException(422, "pending review"), None, None]

        report = invalidate_past_reviews(pr, [_review(1), _review(2), _review(3)], NEW_URL)

        assert report.invalidated == [2, 3]
        assert len(report.failures) == 1
        assert report.failures[0].target_id == 1
        assert not report.ok

    def test_comment_delete_failure_is_isolated(self):
        broken = _comment(31)
        broken.delete.side_effect = GithubException(404, "Not Found")
        fine = _comment(32)
        pr = _make_pr({1: [broken, fine]})

        report = invalidate_past_reviews(pr, [_review(1)], NEW_URL)

        fine.delete.assert_called_once()
        assert report.deleted_comments == [32]
        assert [f.target_id for f in report.failures] == [31]

    def test_connection_error_is_isolated_like_api_errors(self):
        pr = _make_pr()
        pr._requester.requestJsonAndCheck.side_effect = [requests.exceptions.ConnectionError("reset"), None]

        report = invalidate_past_reviews(pr, [_review(1), _review(2)], NEW_URL)

        assert report.invalidated == [2]
        assert [(f.action, f.target_id) for f in report.failures] == [("edit review", 1)]

    def test_listing_comments_failure_is_recorded(self):
        pr = _make_pr()
        pr.get_single_review_comments.side_effect = GithubException(500, "boom")

        report = invalidate_past_reviews(pr, [_review(1)], NEW_URL)

        assert report.invalidated == [1]
        assert len(report.failures) == 1

    def test_dismiss_only_changes_requested_reviews(self):
        pr = _make_pr()
        blocking = _review(1, state="CHANGES_REQUESTED")
        comment = _review(2, state="COMMENTED")

        report = invalidate_past_reviews(pr, [blocking, comment], NEW_URL, dismiss=True)

        blocking.dismiss.assert_called_once()
        comment.dismiss.assert_not_called()
        assert report.dismissed == [1]

    def test_no_dismiss_by_default(self):
        pr = _make_pr()
        blocking = _review(1, state="CHANGES_REQUESTED")
        invalidate_past_reviews(pr, [blocking], NEW_URL)
        blocking.dismiss.assert_not_called()
