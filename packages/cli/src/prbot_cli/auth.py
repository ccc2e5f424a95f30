"""Finds the GitHub token prbot posts reviews with.

Sources, first hit wins:
  1. GITHUB_TOKEN, which Actions and most CI runners export
  2. GH_TOKEN, the variable the gh CLI itself reads
  3. `gh auth token`, for a local `gh auth login` session
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


def _token_from_gh_cli() -> str | None:
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("gh CLI unavailable: %s", e)
        return None
    if result.returncode != 0:
        logger.debug("gh auth token exited %s: %s", result.returncode, (result.stderr or "").strip())
        return None
    return result.stdout.strip() or None


def resolve_github_token() -> str | None:
    """Return a GitHub token, or None when no source has one.

    Never raises; ``require_token`` turns None into a usage error.
    """
    for name in TOKEN_ENV_VARS:
        token = os.environ.get(name, "").strip()
        if token:
            logger.debug("Using GitHub token from %s.", name)
            return token

    token = _token_from_gh_cli()
    if token:
        logger.debug("Using GitHub token from the gh CLI session.")
    return token
