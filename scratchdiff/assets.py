"""Costume and sound differences between two snapshots.

An asset is identified by its sprite and name; its content is identified by
its content-addressed path. Comparing the two inventories as sets yields the
assets that are new or changed on one side. An asset whose name survives on
both sides with a different path is a modification rather than an unrelated
add and remove.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from .snapshot import Snapshot, display_name

AssetReader = Callable[[str], Optional[bytes]]


class ChangeKind(Enum):
    """Which side of a comparison an asset record was taken from."""
    BEFORE = "before"
    AFTER = "after"


@dataclass(frozen=True)
class AssetChange:
    """One costume or sound of one sprite. ``contents`` never affects equality."""
    sprite: str
    name: str
    path: str
    ext: str
    on_stage: bool
    kind: Optional[ChangeKind] = None
    contents: Optional[bytes] = field(default=None, compare=False, hash=False, repr=False)

    @property
    def display_sprite(self) -> str:
        return display_name(self.sprite, self.on_stage)

    @property
    def filename(self) -> str:
        return f"{self.name}.{self.ext}"

    @property
    def key(self) -> Tuple[str, bool, str]:
        return self.sprite, self.on_stage, self.name


@dataclass
class AssetChanges:
    added: List[AssetChange] = field(default_factory=list)
    removed: List[AssetChange] = field(default_factory=list)
    merged: List[AssetChange] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.added or self.removed or self.merged)


def asset_records(snapshot: Snapshot, kind: Optional[ChangeKind] = None) -> List[AssetChange]:
    """Every costume then every sound of every sprite, in document order."""
    return [
        AssetChange(
            sprite=sprite.name,
            name=asset.name,
            path=asset.path,
            ext=asset.data_format,
            on_stage=sprite.is_stage,
            kind=kind,
        )
        for sprite in snapshot.sprites
        for asset in sprite.assets
    ]


def asset_inventory(snapshot: Snapshot) -> Dict[str, List[Tuple[str, str, str, bool]]]:
    """Map each sprite's display name to its (name, format, path, is_stage) assets."""
    inventory: Dict[str, List[Tuple[str, str, str, bool]]] = {}
    for sprite in snapshot.sprites:
        entries = inventory.setdefault(sprite.display_name, [])
        entries.extend(
            (asset.name, asset.data_format, asset.path, sprite.is_stage)
            for asset in sprite.assets
        )
    return inventory


def assets(old: Snapshot, new: Snapshot, kind: Optional[ChangeKind] = None) -> List[AssetChange]:
    """Return the assets of ``new`` that do not appear unchanged in ``old``."""
    old_set = set(asset_records(old, kind))
    return [change for change in asset_records(new, kind) if change not in old_set]


def _pair_changes(
    added: List[AssetChange], removed: List[AssetChange]
) -> Tuple[List[AssetChange], List[AssetChange], List[Tuple[AssetChange, AssetChange]]]:
    """Split off (before, after) pairs that share a sprite and a name."""
    remaining_removed = list(removed)
    remaining_added: List[AssetChange] = []
    pairs: List[Tuple[AssetChange, AssetChange]] = []

    for after in added:
        match = next((idx for idx, before in enumerate(remaining_removed) if before.key == after.key), None)
        if match is None:
            remaining_added.append(after)
            continue
        pairs.append((remaining_removed.pop(match), after))

    return remaining_added, remaining_removed, pairs


def merged_assets(old: Snapshot, new: Snapshot) -> AssetChanges:
    """Classify asset differences as added, removed or modified in place."""
    added, removed, pairs = _pair_changes(assets(old, new), assets(new, old))
    return AssetChanges(added=added, removed=removed, merged=[after for _, after in pairs])


def changed_assets(
    old: Snapshot,
    new: Snapshot,
    old_reader: Optional[AssetReader] = None,
    new_reader: Optional[AssetReader] = None,
) -> List[AssetChange]:
    """Return a before and an after record for every modified asset.

    When readers are given, each record carries the file contents stored
    under its path on that side.
    """
    _, _, pairs = _pair_changes(assets(old, new), assets(new, old))
    changes: List[AssetChange] = []
    for before, after in pairs:
        changes.append(replace(
            before,
            kind=ChangeKind.BEFORE,
            contents=old_reader(before.path) if old_reader else None,
        ))
        changes.append(replace(
            after,
            kind=ChangeKind.AFTER,
            contents=new_reader(after.path) if new_reader else None,
        ))
    return changes
