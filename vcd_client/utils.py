"""Utility helpers for shaping parsed vCloud response bodies."""

from __future__ import annotations

import json
from typing import Any, Dict


def ensure_list(data: Any, key1: str, key2: str | None = None) -> Any:
    """Coerce an element that may appear 0, 1 or many times into a list.

    XML parsing yields a mapping for a single occurrence and a list for several,
    so callers normalize known collection elements after parsing.

    Args:
        data: Parsed body, modified in place.
        key1: Key holding the value (or the container when ``key2`` is given).
        key2: Optional key inside ``data[key1]`` holding the repeated element.

    Returns:
        The same ``data`` object.
    """
    if not isinstance(data, dict) or key1 not in data:
        return data

    if key2 is None:
        if not isinstance(data[key1], list):
            data[key1] = [data[key1]]
        return data

    container = data[key1]
    if not isinstance(container, dict):
        # e.g. an empty <Children/> parses to ""
        data[key1] = {key2: []}
        return data
    value = container.get(key2)
    if value is None:
        container[key2] = []
    elif not isinstance(value, list):
        container[key2] = [value]
    return data


def dict_to_json(data: Dict[str, Any]) -> str:
    """Serialize a body mapping to indented JSON for display.

    Args:
        data: Mapping to encode.

    Returns:
        str: Indented JSON text.
    """
    return json.dumps(data, indent=2, ensure_ascii=False)
