"""
core/paths.py - Dot-notation access into nested settings dicts
"""

from __future__ import annotations
from typing import Any, Dict, List


def split_path(path: str) -> List[str]:
    """
    Split a dotted path into its keys.

    Raises:
        ValueError: If the path is empty or has an empty segment
    """
    parts = path.split(".") if path else []
    if not parts or any(not part for part in parts):
        raise ValueError(f"Invalid settings path: {path!r}")
    return parts


def get_path(data: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get nested value using dot notation.

    Args:
        data: Nested dict
        path: Dot-notation path (e.g., "hero.overlayOpacity")
        default: Value to return if path not found

    Returns:
        Value at path or default
    """
    current: Any = data
    for part in split_path(path):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def set_path(data: Dict[str, Any], path: str, value: Any) -> Dict[str, Any]:
    """
    Set nested value using dot notation, creating intermediate dicts.

    An intermediate that exists but is not a dict is replaced by one.
    Mutates and returns data.
    """
    parts = split_path(path)
    current = data
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value
    return data
