#!/usr/bin/env python3
"""
YAMLANALYZER PROBES - Path Lookups & Line Anchors
-------------------------------------------------
Read-only helpers that look into a parsed document without assuming a
schema. A probe returns the value found at a path, or None when any step
is missing or has the wrong shape.

Line anchors are approximate. When a node was produced by the ruamel.yaml
round-trip loader its own position metadata is used; otherwise the first
line of the text containing the key or value wins, defaulting to line 1.

Author: YAML Analyzer Team
Date: 2026-10-19
"""

from collections.abc import Mapping, Sequence
from typing import Any, List, Optional, Tuple

POD_SPEC_PATH = ("spec", "template", "spec")

# Searched in order; the first sequence found is used
CONTAINER_PATHS: Tuple[Tuple[str, ...], ...] = (
    ("spec", "template", "spec", "containers"),
    ("spec", "containers"),
    ("containers",),
)


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def probe(doc: Any, path: Tuple[str, ...]) -> Optional[Any]:
    """Walks mapping keys along path. Returns None if the walk falls off the tree."""
    node = doc
    for key in path:
        if not is_mapping(node) or key not in node:
            return None
        node = node[key]
    return node


def probe_mapping(doc: Any, path: Tuple[str, ...]) -> Optional[Mapping]:
    node = probe(doc, path)
    return node if is_mapping(node) else None


def find_containers(doc: Any) -> List[Any]:
    """Entries of the first container sequence found, or an empty list."""
    for path in CONTAINER_PATHS:
        node = probe(doc, path)
        if is_sequence(node):
            return list(node)
    return []


def resource_kind(doc: Any) -> Optional[str]:
    """The document's `kind` as a string, or None when it is not a resource."""
    if not is_mapping(doc):
        return None
    kind = doc.get("kind")
    if kind is None or kind == "":
        return None
    return str(kind)


def find_line(text: str, needle: str, default: int = 1) -> int:
    """1-based index of the first line containing needle."""
    if needle:
        for line_no, line in enumerate(text.split('\n'), 1):
            if needle in line:
                return line_no
    return default


def key_line(text: str, key: str, node: Any = None, default: int = 1) -> int:
    """
    Line of `key:`. If node is a round-trip mapping holding key, the
    loader's recorded position is used instead of the text search.
    """
    position = _recorded_key_line(node, key)
    if position is not None:
        return position
    return find_line(text, f"{key}:", default)


def value_line(text: str, value: Any, node: Any = None, key: Optional[str] = None, default: int = 1) -> int:
    """Line holding a scalar value, preferring node.lc.value(key) when present."""
    if key is not None:
        position = _recorded_value_line(node, key)
        if position is not None:
            return position
    return find_line(text, str(value), default)


def _recorded_key_line(node: Any, key: str) -> Optional[int]:
    lc = getattr(node, 'lc', None)
    if lc is None or not is_mapping(node) or key not in node:
        return None
    try:
        return lc.key(key)[0] + 1
    except (KeyError, IndexError, TypeError, AttributeError):
        return None


def _recorded_value_line(node: Any, key: str) -> Optional[int]:
    lc = getattr(node, 'lc', None)
    if lc is None or not is_mapping(node) or key not in node:
        return None
    try:
        return lc.value(key)[0] + 1
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
