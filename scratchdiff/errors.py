"""Exceptions raised while loading and comparing project snapshots.

Every failure is a ``DiffError`` tagged with an ``ErrorKind`` so callers can
branch on ``exc.kind`` without matching on message text.
"""

from enum import Enum


class ErrorKind(Enum):
    """Where a comparison failed."""
    LOAD = "load"
    GRAPH_INTEGRITY = "graph-integrity"
    DELEGATED_DIFF = "delegated-diff"


class DiffError(Exception):
    """Base class for snapshot comparison failures."""

    kind: ErrorKind = ErrorKind.LOAD

    def __init__(self, message: str, detail: str = ""):
        self.message = message
        self.detail = detail
        super().__init__(message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class LoadError(DiffError):
    """A snapshot could not be read or is missing required fields."""
    kind = ErrorKind.LOAD


class GraphIntegrityError(DiffError):
    """A block graph references a block that is absent or malformed."""
    kind = ErrorKind.GRAPH_INTEGRITY


class DelegatedDiffError(DiffError):
    """The external line-diff utility failed."""
    kind = ErrorKind.DELEGATED_DIFF
