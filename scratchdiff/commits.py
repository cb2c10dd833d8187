"""Group raw change records into one commit message line per sprite."""

from typing import Dict, Hashable, Iterable, List, Sequence, Tuple, TypeVar

from .assets import AssetChange, AssetChanges
from .scripts import ScriptChanges

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


def group_items(pairs: Iterable[Tuple[K, V]]) -> List[Tuple[K, List[V]]]:
    """Group values by key, keeping keys in first-seen order."""
    groups: Dict[K, List[V]] = {}
    for key, value in pairs:
        groups.setdefault(key, []).append(value)
    return list(groups.items())


def asset_actions(changes: Sequence[AssetChange], action: str) -> List[Tuple[str, str]]:
    """Return ``(sprite, "<action> <file>")`` pairs in record order."""
    return [(change.display_sprite, f"{action} {change.filename}") for change in changes]


def format_assets(actions: Iterable[Tuple[str, str]], all_verbs: bool = False) -> List[Tuple[str, str]]:
    """Collapse ``(sprite, "<verb> <object>")`` pairs into one entry per sprite.

    Objects sharing a verb are joined, e.g. ``"add a.svg, b.wav"``. Only the
    first verb group of a sprite is kept unless ``all_verbs`` is set.
    """
    formatted: List[Tuple[str, str]] = []
    for sprite, sprite_actions in group_items(actions):
        split = [tuple(text.split(" ", 1)) for text in sprite_actions]
        verbs = [f"{verb} {', '.join(objects)}" for verb, objects in group_items(split)]
        formatted.append((sprite, ", ".join(verbs) if all_verbs else verbs[0]))
    return formatted


def format_scripts(changes: Sequence[ScriptChanges]) -> List[Tuple[str, str]]:
    return [(change.sprite, change.summary()) for change in changes]


def commits(
    scripts: Sequence[ScriptChanges],
    asset_changes: AssetChanges,
    all_verbs: bool = False,
) -> List[str]:
    """Build ``"<sprite>: <change>, <change>"`` lines, scripts before assets."""
    entries = (
        format_scripts(scripts)
        + format_assets(asset_actions(asset_changes.added, "add"), all_verbs)
        + format_assets(asset_actions(asset_changes.removed, "remove"), all_verbs)
        + format_assets(asset_actions(asset_changes.merged, "modify"), all_verbs)
    )
    return [f"{sprite}: {', '.join(descriptions)}" for sprite, descriptions in group_items(entries)]
