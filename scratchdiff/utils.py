import json
import os
from typing import Any


def load_json_file(path: str, default: Any) -> Any:
    if not os.path.exists(path):
        return default
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def dump_compact(value: Any) -> str:
    # Sorted keys and no padding so equal maps always serialize identically.
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)

