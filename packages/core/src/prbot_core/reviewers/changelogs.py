"""Warns about touched packages whose changelog was left alone."""

from __future__ import annotations

import posixpath
from pathlib import Path

from prbot_core.packages import DEFAULT_PATTERNS, Package, list_packages
from prbot_core.types import ReviewInput, ReviewOutput, ReviewStatus

TITLE = "Missing changelog entries"


def _owns(package: Package, file_path: str) -> bool:
    rel = posixpath.relpath(file_path, package.path)
    return rel != ".." and not rel.startswith("../")


def _changelog_link(review_input: ReviewInput, package: Package) -> str:
    path = package.changelog_path
    if not review_input.repo:
        return f"[{path}]({path})"
    sha = review_input.pull_request.head_sha
    return f"[{path}](https://github.com/{review_input.repo}/blob/{sha}/{path})"


def find_packages_missing_changelogs(review_input: ReviewInput, packages: list[Package]) -> list[Package]:
    changed = review_input.changed_paths
    # A file moved out of a package still changes that package.
    touched = review_input.touched_paths
    modified = [pkg for pkg in packages if any(_owns(pkg, path) for path in touched)]
    root = Path(review_input.workdir)
    return [
        pkg
        for pkg in modified
        if (root / pkg.changelog_path).is_file() and pkg.changelog_path not in changed
    ]


def check_missing_changelogs(
    review_input: ReviewInput,
    patterns: list[str] | tuple[str, ...] = DEFAULT_PATTERNS,
    changelog_name: str = "CHANGELOG.md",
) -> ReviewOutput | None:
    packages = list_packages(review_input.workdir, patterns, changelog_name)
    missing = find_packages_missing_changelogs(review_input, packages)
    if not missing:
        return None

    lines = [f"- {_changelog_link(review_input, pkg)}" for pkg in sorted(missing, key=lambda p: p.changelog_path)]
    body = (
        "If you made some API or behavioural changes, please add appropriate entry to the following changelogs:\n"
        + "\n".join(lines)
    )
    return ReviewOutput(status=ReviewStatus.WARN, title=TITLE, body=body)
