"""The contract every reviewer check implements.

A reviewer is a plain callable taking the shared ReviewInput and returning a
ReviewOutput, or None when it has nothing to report. Reviewers run
concurrently, so they must not mutate the input or share state.
"""

from __future__ import annotations

import functools
from typing import Callable, Optional

from prbot_core.types import ReviewInput, ReviewOutput

Reviewer = Callable[[ReviewInput], Optional[ReviewOutput]]


def reviewer_name(reviewer: Reviewer) -> str:
    if isinstance(reviewer, functools.partial):
        return reviewer_name(reviewer.func)
    return getattr(reviewer, "__name__", type(reviewer).__name__)
