"""Line-based diff of two canonical texts.

Only the number of added and removed lines is needed. ``difflib_line_diff``
computes it in-process; ``GitLineDiff`` asks ``git diff --numstat`` so the
counts match what git itself reports for the same texts.
"""

import difflib
import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Callable, List, Optional

from .constants import DEFAULT_CONTEXT_LINES, GIT_EXECUTABLE
from .errors import DelegatedDiffError
from .git import run_git

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiffStat:
    added: int
    removed: int

    def __bool__(self) -> bool:
        return bool(self.added or self.removed)


LineDiff = Callable[[str, str, int], DiffStat]


def _lines(text: str) -> List[str]:
    return text.splitlines()


def difflib_line_diff(old: str, new: str, context_lines: int = DEFAULT_CONTEXT_LINES) -> DiffStat:
    # Context only shapes hunks; the counts come straight from the opcodes.
    matcher = difflib.SequenceMatcher(None, _lines(old), _lines(new), autojunk=False)
    added = removed = 0
    for group in matcher.get_grouped_opcodes(context_lines):
        for tag, i1, i2, j1, j2 in group:
            if tag in ("replace", "delete"):
                removed += i2 - i1
            if tag in ("replace", "insert"):
                added += j2 - j1
    return DiffStat(added=added, removed=removed)


def _write_text(path: str, text: str) -> None:
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(text)
        if text and not text.endswith("\n"):
            handle.write("\n")


class GitLineDiff:
    """Count changed lines with ``git diff --no-index --numstat``."""

    def __init__(self, cwd: Optional[str] = None, git_executable: str = GIT_EXECUTABLE):
        self.cwd = cwd
        self.git_executable = git_executable

    def __call__(self, old: str, new: str, context_lines: int = DEFAULT_CONTEXT_LINES) -> DiffStat:
        with tempfile.TemporaryDirectory(prefix="scratchdiff-") as tmp_dir:
            old_path = os.path.join(tmp_dir, "old.txt")
            new_path = os.path.join(tmp_dir, "new.txt")
            _write_text(old_path, old)
            _write_text(new_path, new)

            # --numstat counts do not depend on context, and combining it with -U
            # makes git print the patch as well.
            args = ["diff", "--no-index", "--no-color", "--numstat", old_path, new_path]
            try:
                result = run_git(args, cwd=self.cwd or tmp_dir, git_executable=self.git_executable)
            except FileNotFoundError as exc:
                raise DelegatedDiffError("git executable not found", self.git_executable) from exc

        # git diff --no-index exits with 1 when the files differ.
        if result.returncode not in (0, 1):
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise DelegatedDiffError(f"git diff failed with exit status {result.returncode}", stderr)

        return parse_numstat(result.stdout.decode("utf-8", errors="replace"))


def parse_numstat(output: str) -> DiffStat:
    """Sum the added/removed columns of ``git diff --numstat`` output."""
    added = removed = 0
    for line in output.splitlines():
        if not line.strip():
            continue
        columns = line.split("\t")
        if len(columns) < 3:
            raise DelegatedDiffError("Unexpected git diff output", line)
        try:
            added += int(columns[0])
            removed += int(columns[1])
        except ValueError as exc:
            raise DelegatedDiffError("Unexpected git diff output", line) from exc
    logger.debug("git diff counted +%d/-%d lines", added, removed)
    return DiffStat(added=added, removed=removed)
