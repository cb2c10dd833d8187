"""Per-sprite script differences between two snapshots.

Sprites are paired by position, not by name: the n-th sprite of the old
snapshot is compared with the n-th sprite of the new one. Inserting or
removing a sprite in the middle of the list therefore reports every later
sprite as changed.
"""

from dataclasses import dataclass
from itertools import zip_longest
from typing import Any, Dict, List, Optional

from .canonical import render_target
from .constants import DEFAULT_CONTEXT_LINES, MENU_SUFFIX
from .line_diff import LineDiff, difflib_line_diff
from .snapshot import Snapshot, Sprite, display_name


@dataclass(frozen=True)
class ScriptChanges:
    """Changed line counts for one sprite; ``sprite`` is the display name."""
    sprite: str
    added: int
    removed: int
    on_stage: bool

    def summary(self) -> str:
        return f"+{self.added}/-{self.removed} blocks"

    def format(self) -> str:
        return f"{self.sprite}: {self.summary()}"


def is_menu_block(opcode: str) -> bool:
    return opcode.endswith(MENU_SUFFIX)


def count_blocks(blocks: Dict[str, Any]) -> int:
    """Count the blocks that carry script content (menus excluded)."""
    return sum(
        1
        for block in blocks.values()
        if isinstance(block, dict)
        and isinstance(block.get("opcode"), str)
        and not is_menu_block(block["opcode"])
    )


def _sprite_changes(
    old: Optional[Sprite],
    new: Optional[Sprite],
    line_diff: LineDiff,
    context_lines: int,
) -> Optional[ScriptChanges]:
    old_blocks = old.blocks if old is not None else None
    new_blocks = new.blocks if new is not None else None
    if old_blocks == new_blocks:
        return None

    if old is None:
        added = count_blocks(new.blocks)
        return ScriptChanges(sprite=new.display_name, added=added, removed=0, on_stage=new.is_stage)

    if new is None:
        removed = count_blocks(old.blocks)
        return ScriptChanges(sprite=old.display_name, added=0, removed=removed, on_stage=old.is_stage)

    stat = line_diff(render_target(old), render_target(new), context_lines)
    if not stat.added and not stat.removed:
        return None
    return ScriptChanges(
        sprite=display_name(old.name, old.is_stage),
        added=abs(stat.added),
        removed=abs(stat.removed),
        on_stage=new.is_stage,
    )


def script_changes(
    old: Snapshot,
    new: Snapshot,
    line_diff: Optional[LineDiff] = None,
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> List[ScriptChanges]:
    """Return a record for every sprite whose scripts changed.

    Any canonicalization or diff failure propagates; no partial list is
    returned.
    """
    diff = line_diff or difflib_line_diff
    changes: List[ScriptChanges] = []
    for old_sprite, new_sprite in zip_longest(old.sprites, new.sprites):
        change = _sprite_changes(old_sprite, new_sprite, diff, context_lines)
        if change is not None:
            changes.append(change)
    return changes
