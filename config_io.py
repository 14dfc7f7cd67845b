from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict


def load_json_config(path: Path) -> Dict[str, Any]:
    """Read the tool's JSON settings file into a dict.

    A missing file raises FileNotFoundError so the caller can fall back to
    defaults. Broken JSON, or JSON that is not an object, stops the program
    with a message pointing at the file and the offending line.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SystemExit(
            f"\nERROR: {path} could not be parsed as JSON "
            f"(line {e.lineno}, col {e.colno}): {e.msg}\n"
            f"Check for trailing commas and unquoted keys.\n"
        )
    if not isinstance(data, dict):
        raise SystemExit(
            f"\nERROR: {path} must hold a JSON object ({{...}}), "
            f"not {type(data).__name__}.\n"
        )
    return data
