"""Render a sprite's block graph as diffable text.

Each block becomes one line: tab indentation for its nesting depth, its opcode,
then its inputs, fields and mutation as compact JSON. Block ids differ between
saves of the same project, so every id is written as a fixed placeholder.
Independent scripts are sorted so that moving a script around the workspace
does not show up as a change.
"""

from typing import Any, Dict, Iterable, List, Optional, Set

from .constants import (
    CONDITION_INPUT,
    ELSE_MARKER,
    ID_PLACEHOLDER,
    INDENT,
    RENDERED_BLOCK_KEYS,
    SUBSTACK2_INPUT,
    SUBSTACK_INPUT,
)
from .errors import GraphIntegrityError
from .snapshot import Sprite
from .utils import dump_compact


def anonymize_inputs(inputs: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``inputs`` with every block reference replaced by the placeholder.

    An input is ``[shadow_type, value, shadow_value?]`` where each value is
    either a block id (a string) or a literal (an array), so ids can be
    replaced by position instead of by searching the rendered text.
    """
    anonymized: Dict[str, Any] = {}
    for name, entry in inputs.items():
        if isinstance(entry, list) and entry:
            entry = entry[:1] + [ID_PLACEHOLDER if isinstance(item, str) else item for item in entry[1:]]
        anonymized[name] = entry
    return anonymized


def _render_map(value: Any) -> str:
    if value is None or value == {}:
        return ""
    return dump_compact(value)


def _get_block(blocks: Dict[str, Any], block_id: str) -> Dict[str, Any]:
    if block_id not in blocks:
        raise GraphIntegrityError(f"Block {block_id!r} is referenced but missing")
    block = blocks[block_id]
    if not isinstance(block, dict) or not isinstance(block.get("opcode"), str):
        raise GraphIntegrityError(f"Block {block_id!r} has no opcode")
    return block


def _slot_id(block_id: str, block: Dict[str, Any], slot: str) -> Optional[str]:
    """Return the id of the block plugged into ``slot``, None for an empty slot."""
    inputs = block.get("inputs") or {}
    if not isinstance(inputs, dict):
        raise GraphIntegrityError("Malformed inputs", f"Block: {block_id}")
    if slot not in inputs:
        return None
    entry = inputs[slot]
    if not isinstance(entry, list) or len(entry) < 2:
        raise GraphIntegrityError(f"Malformed {slot} input", f"Block: {block_id}")
    target = entry[1]
    if target is None:
        return None
    if not isinstance(target, str):
        raise GraphIntegrityError(f"Malformed {slot} input", f"Block: {block_id}")
    return target


def describe_block(block: Dict[str, Any]) -> str:
    """Return the opcode followed by the block's non-empty maps, ids anonymized."""
    parts = [block["opcode"]]
    for key in RENDERED_BLOCK_KEYS:
        value = block.get(key)
        if key == "inputs" and isinstance(value, dict):
            value = anonymize_inputs(value)
        rendered = _render_map(value)
        if rendered:
            parts.append(rendered)
    return " ".join(parts)


def render_script(
    blocks: Dict[str, Any],
    start_id: str,
    depth: int = -1,
    else_clause: bool = False,
    seen: Optional[Set[str]] = None,
) -> str:
    """Render the chain starting at ``start_id`` and everything nested in it.

    ``depth`` is the nesting level of the chain's parent; top-level scripts
    start at -1 so their blocks are not indented.
    """
    if seen is None:
        seen = set()
    output: List[str] = []

    if else_clause:
        output.append(f"{INDENT * depth}{ELSE_MARKER}\n")

    current_id: Optional[str] = start_id
    while current_id is not None:
        if current_id in seen:
            raise GraphIntegrityError(f"Block {current_id!r} is reached twice")
        seen.add(current_id)
        block = _get_block(blocks, current_id)

        line = INDENT * (depth + 1) + describe_block(block)

        # Boolean conditions stay on their control block's line.
        condition_id = _slot_id(current_id, block, CONDITION_INPUT)
        if condition_id is not None:
            line += render_script(blocks, condition_id, 0, seen=seen).rstrip("\n")
        output.append(line + "\n")

        substack_id = _slot_id(current_id, block, SUBSTACK_INPUT)
        if substack_id is not None:
            output.append(render_script(blocks, substack_id, depth + 1, seen=seen))

        substack2_id = _slot_id(current_id, block, SUBSTACK2_INPUT)
        if substack2_id is not None:
            output.append(render_script(blocks, substack2_id, depth + 1, else_clause=True, seen=seen))

        next_id = block.get("next")
        if next_id is not None and not isinstance(next_id, str):
            raise GraphIntegrityError("Malformed next link", f"Block: {current_id}")
        current_id = next_id

    return "".join(output)


def render_sprite(blocks: Dict[str, Any], top_ids: Iterable[str]) -> str:
    """Render every script rooted at ``top_ids`` as one deterministic text."""
    scripts = [render_script(blocks, top_id) for top_id in top_ids]
    scripts.sort(key=lambda script: (script.lower(), script))
    return "\n".join(scripts).rstrip()


def top_level_ids(blocks: Dict[str, Any]) -> List[str]:
    return [
        block_id
        for block_id, block in blocks.items()
        if isinstance(block, dict) and block.get("topLevel") is True
    ]


def render_target(sprite: Sprite) -> str:
    return render_sprite(sprite.blocks, top_level_ids(sprite.blocks))
