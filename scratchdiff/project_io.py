import json
import logging
import os
import zipfile
from typing import Any, Dict, List, Optional, Tuple

from .assets import AssetReader
from .constants import GIT_EXECUTABLE, PROJECT_JSON
from .errors import LoadError
from .git import show_revision, show_revision_bytes
from .snapshot import Asset, Snapshot, Sprite
from .utils import load_json_file

logger = logging.getLogger(__name__)


def asset_path(entry: Dict[str, Any]) -> str:
    """Return the archive file name of a costume or sound entry."""
    md5ext = entry.get("md5ext")
    if isinstance(md5ext, str) and md5ext:
        return md5ext
    asset_id = entry.get("assetId")
    data_format = entry.get("dataFormat")
    if not isinstance(asset_id, str) or not isinstance(data_format, str):
        raise LoadError(
            f"Asset {entry.get('name')!r} has no file path",
            "expected md5ext, or assetId and dataFormat",
        )
    return f"{asset_id}.{data_format}"


def _parse_assets(target_name: str, entries: Any, kind: str) -> Tuple[Asset, ...]:
    if entries is None:
        return ()
    if not isinstance(entries, list):
        raise LoadError(f"Invalid project: {kind} of {target_name!r} is not a list")

    parsed: List[Asset] = []
    for entry in entries:
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
            raise LoadError(f"Invalid project: {kind} entry of {target_name!r} has no name")
        path = asset_path(entry)
        data_format = entry.get("dataFormat")
        if not isinstance(data_format, str):
            data_format = os.path.splitext(path)[1].lstrip(".")
        parsed.append(Asset(name=entry["name"], data_format=data_format, path=path))
    return tuple(parsed)


def _parse_blocks(target_name: str, blocks: Any) -> Dict[str, Any]:
    if not isinstance(blocks, dict):
        raise LoadError("Invalid project: missing blocks", f"Sprite: {target_name}")
    for block_id, block in blocks.items():
        # Top-level variable and list reporters are stored as bare arrays.
        if isinstance(block, list):
            continue
        if not isinstance(block, dict) or not isinstance(block.get("opcode"), str):
            raise LoadError(
                f"Invalid project: block {block_id!r} has no opcode",
                f"Sprite: {target_name}",
            )
    return blocks


def _parse_target(target: Any, index: int) -> Sprite:
    if not isinstance(target, dict):
        raise LoadError(f"Invalid project: target {index} is not an object")
    name = target.get("name")
    if not isinstance(name, str):
        raise LoadError(f"Invalid project: target {index} has no name")
    is_stage = target.get("isStage")
    if not isinstance(is_stage, bool):
        raise LoadError("Invalid project: missing isStage", f"Sprite: {name}")

    return Sprite(
        name=name,
        is_stage=is_stage,
        blocks=_parse_blocks(name, target.get("blocks")),
        costumes=_parse_assets(name, target.get("costumes"), "costumes"),
        sounds=_parse_assets(name, target.get("sounds"), "sounds"),
    )


def parse_project(data: Any) -> Snapshot:
    """Build a snapshot from a decoded project.json document."""
    if not isinstance(data, dict):
        raise LoadError("Invalid project: document is not an object")
    targets = data.get("targets")
    if not isinstance(targets, list):
        raise LoadError("Invalid project: missing targets")
    sprites = tuple(_parse_target(target, idx) for idx, target in enumerate(targets))
    return Snapshot(sprites=sprites, data=data)


def load_json_text(text: str) -> Snapshot:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LoadError("Invalid project: not valid JSON", str(exc)) from exc
    return parse_project(data)


def load_sb3(sb3_path: str, project_file: str = PROJECT_JSON) -> Snapshot:
    """Load the project.json stored inside an .sb3 archive."""
    if not os.path.exists(sb3_path):
        raise LoadError(f"Project not found: {sb3_path}")

    try:
        with zipfile.ZipFile(sb3_path, "r") as archive:
            if project_file not in archive.namelist():
                raise LoadError(f"{project_file} not found in the archive", sb3_path)
            with archive.open(project_file) as handle:
                text = handle.read().decode("utf-8")
    except zipfile.BadZipFile as exc:
        raise LoadError(f"Not an .sb3 archive: {sb3_path}", str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise LoadError(f"{project_file} is not UTF-8 text", sb3_path) from exc
    except OSError as exc:
        raise LoadError(f"Could not read {sb3_path}", str(exc)) from exc

    logger.debug("Loaded %s from %s", project_file, sb3_path)
    return load_json_text(text)


def load_project_dir(project_dir: str, project_file: str = PROJECT_JSON) -> Snapshot:
    """Load an unpacked project whose project.json sits in ``project_dir``."""
    path = os.path.join(project_dir, project_file)
    try:
        data = load_json_file(path, None)
    except json.JSONDecodeError as exc:
        raise LoadError(f"Invalid project: {path} is not valid JSON", str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise LoadError(f"{project_file} is not UTF-8 text", path) from exc
    except OSError as exc:
        raise LoadError(f"Could not read {path}", str(exc)) from exc
    if data is None:
        raise LoadError(f"Project not found: {path}")

    logger.debug("Loaded %s", path)
    return parse_project(data)


def load_revision(
    project_dir: str,
    revision: str,
    project_file: str = PROJECT_JSON,
    git_executable: str = GIT_EXECUTABLE,
) -> Snapshot:
    """Load project.json as committed in a git revision (e.g. ``HEAD~1``)."""
    text = show_revision(project_dir, revision, project_file, git_executable)
    logger.debug("Loaded %s:%s from %s", revision, project_file, project_dir)
    return load_json_text(text)


# ============================================================================
# Asset readers: path -> bytes, None when the file is not available
# ============================================================================

def directory_reader(asset_dir: str) -> AssetReader:
    def read(path: str) -> Optional[bytes]:
        full_path = os.path.join(asset_dir, path)
        if not os.path.isfile(full_path):
            logger.warning("Asset %s not found in %s", path, asset_dir)
            return None
        with open(full_path, "rb") as handle:
            return handle.read()

    return read


def sb3_reader(sb3_path: str) -> AssetReader:
    def read(path: str) -> Optional[bytes]:
        with zipfile.ZipFile(sb3_path, "r") as archive:
            if path not in archive.namelist():
                logger.warning("Asset %s not found in archive %s", path, sb3_path)
                return None
            return archive.read(path)

    return read


def revision_reader(
    project_dir: str,
    revision: str,
    git_executable: str = GIT_EXECUTABLE,
) -> AssetReader:
    def read(path: str) -> Optional[bytes]:
        try:
            return show_revision_bytes(project_dir, revision, path, git_executable)
        except LoadError as exc:
            logger.warning("Asset %s not available in %s: %s", path, revision, exc)
            return None

    return read
