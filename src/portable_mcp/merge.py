"""Deep merge of configuration documents."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any


def deep_merge(base: Any, overlay: Any) -> Any:
    """Merge ``overlay`` into ``base`` and return a new structure.

    Nested dicts are merged key by key. Every other overlay value (scalars,
    ``None``, lists) replaces the base value wholesale; lists are never merged
    element-wise. Keys only present in ``base`` are kept. Neither argument is
    mutated and the result shares no mutable objects with them.
    """
    if not isinstance(overlay, dict):
        return copy.deepcopy(overlay)

    result = copy.deepcopy(base) if isinstance(base, dict) else {}
    for key, value in overlay.items():
        if isinstance(value, dict):
            result[key] = deep_merge(result.get(key), value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def load_merge_base(path: Path) -> Any:
    """Existing destination content, or ``{}`` if it is missing or not valid JSON."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return {}
