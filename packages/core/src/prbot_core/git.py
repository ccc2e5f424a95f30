"""Local git access: fetching PR commits, the merge base, and the parsed diff."""

from __future__ import annotations

import logging
import re
import subprocess

from prbot_core.exceptions import GitError
from prbot_core.types import FileDiff, Hunk

logger = logging.getLogger(__name__)

_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_QUOTED_PATH = r'"(?:[^"\\]|\\.)*"'
_DIFF_HEADER_RE = re.compile(rf"^diff --git ({_QUOTED_PATH}|a/.+?) ({_QUOTED_PATH}|b/.+)$")
_OCTAL_ESCAPE_RE = re.compile(r"[0-7]{3}")
_C_ESCAPES = {"a": "\a", "b": "\b", "t": "\t", "n": "\n", "v": "\v", "f": "\f", "r": "\r", '"': '"', "\\": "\\"}


class Git:
    """Runs git commands inside a local checkout."""

    def __init__(self, workdir: str = ".", timeout: float = 120):
        self.workdir = workdir
        self.timeout = timeout

    def run(self, *args: str) -> str:
        logger.debug("Running git %s", " ".join(args))
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.workdir,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise GitError(list(args), None, f"no result after {self.timeout}s") from e
        except FileNotFoundError as e:
            raise GitError(list(args), 127, "git executable not found") from e
        if result.returncode != 0:
            raise GitError(list(args), result.returncode, result.stderr or "")
        return result.stdout

    def fetch(self, remote: str, ref: str) -> None:
        """Make ``ref`` on ``remote`` available locally."""
        self.run("fetch", "--no-tags", remote, ref)

    def merge_base(self, commit_a: str, commit_b: str) -> str:
        return self.run("merge-base", commit_a, commit_b).strip()

    def diff(self, from_commit: str, to_commit: str) -> list[FileDiff]:
        output = self.run("-c", "core.quotePath=false", "diff", "--no-color", "--no-ext-diff", from_commit, to_commit)
        return parse_diff(output)


def unquote_path(path: str) -> str:
    """Undo git's C-style quoting of a path, e.g. ``"a/say \\"hi\\".txt"``.

    Even with ``core.quotePath=false`` git quotes names holding a double
    quote, a backslash or control characters. Octal escapes are raw bytes
    of the UTF-8 encoded name.
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path
    body = path[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            octal = _OCTAL_ESCAPE_RE.match(body, i + 1)
            if octal:
                out.append(int(octal.group(), 8) & 0xFF)
                i = octal.end()
                continue
            nxt = body[i + 1]
            out += _C_ESCAPES.get(nxt, nxt).encode("utf-8")
            i += 2
            continue
        out += ch.encode("utf-8")
        i += 1
    return out.decode("utf-8", errors="replace")


def _header_path(raw: str) -> str | None:
    # Names containing spaces get a trailing tab in ---/+++ lines.
    return _strip_prefix(unquote_path(raw.rstrip("\t")))


def _strip_prefix(path: str) -> str | None:
    if path == "/dev/null":
        return None
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path


def parse_diff(text: str) -> list[FileDiff]:
    """Split the output of ``git diff`` into one FileDiff per changed file.

    Only headers before the first hunk are read as file metadata, so removed
    lines that happen to start with ``--`` are never mistaken for headers.
    """
    files: list[FileDiff] = []
    current: FileDiff | None = None
    patch_lines: list[str] = []
    in_hunks = False

    def flush():
        if current is None:
            return
        current.patch = "\n".join(patch_lines)
        current.positions = get_diff_positions(current.patch)
        if current.status == "added":
            current.old_path = None
        files.append(current)

    for line in text.splitlines():
        if line.startswith("diff --git "):
            flush()
            match = _DIFF_HEADER_RE.match(line)
            old_path, new_path = (_header_path(g) or "" for g in match.groups()) if match else ("", "")
            current = FileDiff(path=new_path, old_path=old_path)
            patch_lines = []
            in_hunks = False
            continue
        if current is None:
            continue

        if line.startswith("@@"):
            match = _HUNK_HEADER_RE.match(line)
            if match:
                old_start, old_lines, new_start, new_lines = match.groups()
                current.hunks.append(
                    Hunk(
                        old_start=int(old_start),
                        old_lines=int(old_lines) if old_lines is not None else 1,
                        new_start=int(new_start),
                        new_lines=int(new_lines) if new_lines is not None else 1,
                    )
                )
            in_hunks = True
            patch_lines.append(line)
        elif in_hunks:
            patch_lines.append(line)
        elif line.startswith("new file mode"):
            current.status = "added"
        elif line.startswith("deleted file mode"):
            current.status = "deleted"
        elif line.startswith("rename from "):
            current.old_path = unquote_path(line[len("rename from ") :])
            current.status = "renamed"
        elif line.startswith("rename to "):
            current.path = unquote_path(line[len("rename to ") :])
            current.status = "renamed"
        elif line.startswith("--- "):
            old_path = _header_path(line[4:])
            if old_path is not None:
                current.old_path = old_path
        elif line.startswith("+++ "):
            new_path = _header_path(line[4:])
            if new_path is None:
                current.status = "deleted"
                current.path = current.old_path or current.path
            else:
                current.path = new_path

    flush()
    return files


def get_diff_positions(patch_text: str) -> dict[int, int]:
    """
    Maps added new-file line numbers to their GitHub diff positions.

    Position 1 is the line right below the first @@ header. Positions are
    cumulative across the whole file patch and every later @@ header takes
    up a position of its own.
    """
    positions: dict[int, int] = {}
    diff_position = 0
    file_line: int | None = None
    seen_header = False

    for line in patch_text.splitlines():
        if line.startswith("@@"):
            if seen_header:
                diff_position += 1
            seen_header = True
            match = _HUNK_HEADER_RE.match(line)
            file_line = int(match.group(3)) if match else None
            continue
        if not seen_header:
            continue

        diff_position += 1

        if line.startswith("\\"):
            continue  # "\ No newline at end of file"
        if line.startswith("+"):
            if file_line is not None:
                positions[file_line] = diff_position
                file_line += 1
        elif line.startswith("-"):
            pass
        elif file_line is not None:
            file_line += 1

    return positions
