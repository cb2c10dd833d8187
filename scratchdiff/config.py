"""Runtime settings for snapshot comparison."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import (
    DEFAULT_CONTEXT_LINES,
    ENV_CONTEXT_LINES,
    ENV_GIT,
    ENV_PROJECT_FILE,
    GIT_EXECUTABLE,
    PROJECT_JSON,
)
from .errors import LoadError


@dataclass(frozen=True)
class DiffConfig:
    """Settings passed to the git adapters and the script differ."""
    context_lines: int = DEFAULT_CONTEXT_LINES
    git_executable: str = GIT_EXECUTABLE
    project_file: str = PROJECT_JSON

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DiffConfig":
        """Build a config from ``SCRATCHDIFF_*`` environment variables."""
        env = os.environ if environ is None else environ
        raw_context = env.get(ENV_CONTEXT_LINES)
        context_lines = DEFAULT_CONTEXT_LINES
        if raw_context:
            try:
                context_lines = int(raw_context)
            except ValueError as exc:
                raise LoadError(f"Invalid {ENV_CONTEXT_LINES}: {raw_context!r}") from exc
            if context_lines < 0:
                raise LoadError(f"{ENV_CONTEXT_LINES} must not be negative")
        return cls(
            context_lines=context_lines,
            git_executable=env.get(ENV_GIT) or GIT_EXECUTABLE,
            project_file=env.get(ENV_PROJECT_FILE) or PROJECT_JSON,
        )
