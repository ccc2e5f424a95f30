"""Discovery of the packages that live in a monorepo checkout."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = ("packages/*", "packages/@*/*")
MANIFEST_NAMES = ("package.json", "pyproject.toml")


@dataclass(frozen=True)
class Package:
    """A package directory. Paths are posix and relative to the repository root."""

    name: str
    path: str
    changelog_path: str


def _package_name(directory: Path) -> str:
    manifest = directory / "package.json"
    if manifest.is_file():
        try:
            name = json.loads(manifest.read_text(encoding="utf-8")).get("name")
        except (OSError, ValueError, AttributeError) as e:
            logger.debug("Could not read %s: %s", manifest, e)
        else:
            if isinstance(name, str) and name:
                return name
    return directory.name


def list_packages(
    workdir: str = ".",
    patterns: list[str] | tuple[str, ...] = DEFAULT_PATTERNS,
    changelog_name: str = "CHANGELOG.md",
) -> list[Package]:
    """Return every directory matching ``patterns`` that contains a package manifest."""
    root = Path(workdir)
    found: dict[str, Package] = {}
    for pattern in patterns:
        for directory in root.glob(pattern):
            if not directory.is_dir():
                continue
            if not any((directory / name).is_file() for name in MANIFEST_NAMES):
                continue
            rel = directory.relative_to(root).as_posix()
            if rel in found:
                continue
            found[rel] = Package(
                name=_package_name(directory),
                path=rel,
                changelog_path=f"{rel}/{changelog_name}",
            )
    return sorted(found.values(), key=lambda p: p.path)
