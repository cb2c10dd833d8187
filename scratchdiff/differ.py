"""
Project snapshot comparison.

Usage:
    from scratchdiff.differ import ProjectDiff
    diff = ProjectDiff.from_revisions("MyProject", "HEAD")
    for line in diff.commits():
        print(line)
"""

import logging
from typing import List, Optional, Tuple

from .assets import AssetChange, AssetChanges, AssetReader, ChangeKind, assets, changed_assets, merged_assets
from .commits import commits
from .config import DiffConfig
from .constants import STAGE_SUFFIX
from .line_diff import GitLineDiff, LineDiff, difflib_line_diff
from .project_io import directory_reader, load_project_dir, load_revision, revision_reader
from .scripts import ScriptChanges, script_changes
from .snapshot import Snapshot

logger = logging.getLogger(__name__)


def _strip_stage_suffix(sprite: str, on_stage: bool) -> str:
    if on_stage and sprite.endswith(STAGE_SUFFIX):
        return sprite[: -len(STAGE_SUFFIX)]
    return sprite


class ProjectDiff:
    """
    Compare an older and a newer snapshot of the same project.

    Example:
        >>> diff = ProjectDiff(old_snapshot, new_snapshot)
        >>> diff.commits()
        ['Cat: +3/-1 blocks, add fish.svg']
    """

    def __init__(
        self,
        old: Snapshot,
        new: Snapshot,
        cwd: Optional[str] = None,
        line_diff: Optional[LineDiff] = None,
        config: Optional[DiffConfig] = None,
    ):
        """
        Args:
            old: The earlier snapshot.
            new: The later snapshot.
            cwd: Working directory for ``git diff``. When given and no
                ``line_diff`` is passed, script lines are counted by git.
            line_diff: Callable counting added/removed lines of two texts.
            config: Context size and git settings.
        """
        self.old = old
        self.new = new
        self.config = config or DiffConfig()
        if line_diff is None:
            line_diff = GitLineDiff(cwd, self.config.git_executable) if cwd else difflib_line_diff
        self.line_diff = line_diff
        self._old_reader: Optional[AssetReader] = None
        self._new_reader: Optional[AssetReader] = None

    @classmethod
    def from_revisions(
        cls,
        project_dir: str,
        old_revision: str,
        new_revision: Optional[str] = None,
        config: Optional[DiffConfig] = None,
    ) -> "ProjectDiff":
        """
        Compare ``old_revision`` with ``new_revision`` of a git-tracked project.

        Args:
            project_dir: Directory holding project.json and its assets.
            old_revision: Git revision of the earlier snapshot.
            new_revision: Git revision of the later snapshot; the working tree
                when omitted.
            config: Context size and git settings.
        """
        config = config or DiffConfig()
        git = config.git_executable
        old = load_revision(project_dir, old_revision, config.project_file, git)
        if new_revision is None:
            new = load_project_dir(project_dir, config.project_file)
        else:
            new = load_revision(project_dir, new_revision, config.project_file, git)

        diff = cls(old, new, cwd=project_dir, config=config)
        diff._old_reader = revision_reader(project_dir, old_revision, git)
        if new_revision is None:
            diff._new_reader = directory_reader(project_dir)
        else:
            diff._new_reader = revision_reader(project_dir, new_revision, git)
        return diff

    # ========== Assets ==========

    def assets(self, kind: Optional[ChangeKind] = None) -> List[AssetChange]:
        """Assets of the newer snapshot that are new or changed."""
        return assets(self.old, self.new, kind)

    def asset_changes(self) -> AssetChanges:
        """Asset differences split into added, removed and modified."""
        return merged_assets(self.old, self.new)

    def changed_assets(
        self,
        old_reader: Optional[AssetReader] = None,
        new_reader: Optional[AssetReader] = None,
    ) -> List[AssetChange]:
        """Before/after records of modified assets, with contents when readable."""
        return changed_assets(
            self.old,
            self.new,
            old_reader or self._old_reader,
            new_reader or self._new_reader,
        )

    # ========== Scripts ==========

    def script_changes(self) -> List[ScriptChanges]:
        return script_changes(self.old, self.new, self.line_diff, self.config.context_lines)

    # ========== Summaries ==========

    def commits(self, all_verbs: bool = False) -> List[str]:
        """One ``"<sprite>: <changes>"`` line per changed sprite."""
        scripts = self.script_changes()
        asset_changes = self.asset_changes()
        lines = commits(scripts, asset_changes, all_verbs)
        logger.debug(
            "%d script changes, %d added, %d removed, %d modified assets",
            len(scripts),
            len(asset_changes.added),
            len(asset_changes.removed),
            len(asset_changes.merged),
        )
        return lines

    def changed_sprites(self) -> List[Tuple[str, bool]]:
        """``(name, is_stage)`` of every sprite with any change, sorted by name."""
        found: List[Tuple[str, bool]] = []
        for change in self.script_changes():
            found.append((_strip_stage_suffix(change.sprite, change.on_stage), change.on_stage))
        asset_changes = self.asset_changes()
        for change in asset_changes.added + asset_changes.removed + asset_changes.merged:
            found.append((change.sprite, change.on_stage))
        unique = list(dict.fromkeys(found))
        return sorted(unique, key=lambda item: (item[0].lower(), item[0]))
