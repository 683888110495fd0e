# src/utils/io.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union


def read_json(path: Union[str, Path]) -> Any:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suf = path.suffix.lower()
    if suf != ".json":
        raise ValueError(f"Unsupported fixture format: {suf}")

    with path.open("r", encoding="utf-8") as f:
        return json.load(f)
