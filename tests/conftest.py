from typing import Any, Dict, List, Optional

import pytest

from scratchdiff.project_io import parse_project


def block(
    opcode: str,
    next: Optional[str] = None,
    parent: Optional[str] = None,
    top_level: bool = False,
    inputs: Optional[Dict[str, Any]] = None,
    fields: Optional[Dict[str, Any]] = None,
    mutation: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "opcode": opcode,
        "next": next,
        "parent": parent,
        "inputs": inputs or {},
        "fields": fields or {},
        "shadow": False,
        "topLevel": top_level,
    }
    if top_level:
        data["x"] = 0
        data["y"] = 0
    if mutation is not None:
        data["mutation"] = mutation
    return data


def costume(name: str, md5: str, fmt: str = "svg") -> Dict[str, Any]:
    return {
        "name": name,
        "dataFormat": fmt,
        "assetId": md5,
        "md5ext": f"{md5}.{fmt}",
        "rotationCenterX": 0,
        "rotationCenterY": 0,
    }


def sound(name: str, md5: str, fmt: str = "wav") -> Dict[str, Any]:
    return {
        "name": name,
        "dataFormat": fmt,
        "assetId": md5,
        "md5ext": f"{md5}.{fmt}",
        "rate": 48000,
        "sampleCount": 1024,
    }


def target(
    name: str,
    blocks: Optional[Dict[str, Any]] = None,
    costumes: Optional[List[Dict[str, Any]]] = None,
    sounds: Optional[List[Dict[str, Any]]] = None,
    is_stage: bool = False,
) -> Dict[str, Any]:
    return {
        "isStage": is_stage,
        "name": name,
        "variables": {},
        "lists": {},
        "broadcasts": {},
        "blocks": blocks or {},
        "comments": {},
        "currentCostume": 0,
        "costumes": costumes or [],
        "sounds": sounds or [],
        "volume": 100,
        "layerOrder": 0 if is_stage else 1,
    }


def project(*targets: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "targets": list(targets),
        "monitors": [],
        "extensions": [],
        "meta": {"semver": "3.0.0", "vm": "0.2.0", "agent": ""},
    }


def relabel(blocks: Dict[str, Any], mapping: Dict[str, str]) -> Dict[str, Any]:
    """Rename every block id consistently, including references in inputs."""
    def ref(value: Any) -> Any:
        return mapping.get(value, value) if isinstance(value, str) else value

    renamed: Dict[str, Any] = {}
    for block_id, data in blocks.items():
        data = dict(data)
        data["next"] = ref(data.get("next"))
        data["parent"] = ref(data.get("parent"))
        data["inputs"] = {
            name: [entry[0]] + [ref(item) for item in entry[1:]]
            for name, entry in data.get("inputs", {}).items()
        }
        renamed[mapping[block_id]] = data
    return renamed


def if_else_blocks() -> Dict[str, Any]:
    """An if/else with a condition, two blocks in "then" and one in "else"."""
    return {
        "ifelse": block(
            "control_if_else",
            top_level=True,
            inputs={
                "CONDITION": [2, "cond"],
                "SUBSTACK": [2, "then1"],
                "SUBSTACK2": [2, "else1"],
            },
        ),
        "cond": block(
            "operator_gt",
            parent="ifelse",
            inputs={"OPERAND1": [1, [10, "1"]], "OPERAND2": [1, [10, "2"]]},
        ),
        "then1": block("motion_movesteps", next="then2", parent="ifelse", inputs={"STEPS": [1, [4, "10"]]}),
        "then2": block("looks_show", parent="then1"),
        "else1": block("looks_hide", parent="ifelse"),
    }


def green_flag_script() -> Dict[str, Any]:
    return {
        "flag": block("event_whenflagclicked", next="move", top_level=True),
        "move": block("motion_movesteps", next="goto", parent="flag", inputs={"STEPS": [1, [4, "10"]]}),
        "goto": block("motion_goto", parent="move", inputs={"TO": [1, "gotomenu"]}),
        "gotomenu": block("motion_goto_menu", parent="goto", fields={"TO": ["_random_", None]}),
    }


@pytest.fixture
def cat_project() -> Dict[str, Any]:
    return project(
        target("Stage", costumes=[costume("backdrop1", "aaa111")], is_stage=True),
        target(
            "Cat",
            blocks=green_flag_script(),
            costumes=[costume("fish", "abc123")],
            sounds=[sound("Meow", "bbb222")],
        ),
    )


@pytest.fixture
def cat_snapshot(cat_project):
    return parse_project(cat_project)
