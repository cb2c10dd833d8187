"""Thin wrapper around the ``git`` command line."""

import logging
import os
import subprocess
from typing import List, Optional

from .constants import GIT_EXECUTABLE
from .errors import LoadError

logger = logging.getLogger(__name__)


def run_git(
    args: List[str],
    cwd: Optional[str] = None,
    git_executable: str = GIT_EXECUTABLE,
) -> subprocess.CompletedProcess:
    """Run a git command and return the completed process with raw bytes output.

    Raises ``FileNotFoundError`` when the git executable cannot be found;
    a non-zero exit status is left for the caller to interpret.
    """
    cmd = [git_executable, *args]
    logger.debug("Running %s in %s", " ".join(cmd), cwd or ".")
    return subprocess.run(cmd, cwd=cwd, capture_output=True, check=False)


def show_revision_bytes(
    cwd: str,
    revision: str,
    path: str,
    git_executable: str = GIT_EXECUTABLE,
) -> bytes:
    """Return the contents of ``path`` as stored in ``revision``."""
    object_name = f"{revision}:{path}"
    if not os.path.isdir(cwd):
        raise LoadError(f"Project directory not found: {cwd}")
    try:
        result = run_git(["show", object_name], cwd=cwd, git_executable=git_executable)
    except FileNotFoundError as exc:
        raise LoadError("git executable not found", git_executable) from exc
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise LoadError(f"Could not read {object_name}", stderr)
    return result.stdout


def show_revision(
    cwd: str,
    revision: str,
    path: str,
    git_executable: str = GIT_EXECUTABLE,
) -> str:
    """Return the text of ``path`` as stored in ``revision``."""
    data = show_revision_bytes(cwd, revision, path, git_executable)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise LoadError(f"{revision}:{path} is not UTF-8 text", str(exc)) from exc
