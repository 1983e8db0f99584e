"""
Path-addressed mutation of JSON values.

Produces an updated document from an old document, a path and a new value,
leaving the old document untouched.

This module exposes:
- set_value_at_path(root, path, new_value) -> new root
- get_value_at_path(root, path, default=MISSING) -> value at path
- merge_preserving_containers(current, edited) -> edited value with container children kept

Every container along the addressed path is copied (dicts stay dicts, lists
stay lists); siblings that are not on the path are shared with the old
document, so callers must not mutate the result in place expecting the old
document to stay unchanged below those shared children.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from jsongraph.json_path import MISSING, Segment, get_value_at_path, is_index, normalize_path, object_key

logger = logging.getLogger(__name__)

__all__ = [
    "set_value_at_path",
    "get_value_at_path",
    "merge_preserving_containers",
]


def _shallow_copy(value: Any) -> Any:
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return dict(value)
    return value


def _get_child(container: Any, seg: Segment) -> Any:
    if isinstance(container, list):
        if is_index(seg) and -len(container) <= seg < len(container):
            return container[seg]
        return MISSING
    return container.get(object_key(seg), MISSING)


def _assign(container: Any, seg: Segment, value: Any) -> None:
    if isinstance(container, list):
        if not is_index(seg):
            raise TypeError(f"Cannot use key {seg!r} on a list")
        if seg >= len(container):
            # Pad so that the index exists; index == len appends.
            container.extend([None] * (seg - len(container) + 1))
        container[seg] = value
    else:
        container[object_key(seg)] = value


def set_value_at_path(root: Any, path: Optional[Iterable[Segment]], new_value: Any) -> Any:
    """
    Return a copy of `root` with `new_value` stored at `path`.

    An empty path replaces the whole document. Missing intermediate children
    are created as empty objects, even under an index segment; an index
    that lands on an object is stored as its string key ("0"). A scalar
    found where a container is needed is replaced by an empty object.
    """
    segments = normalize_path(path)
    if not segments:
        return new_value

    if not isinstance(root, (dict, list)):
        logger.debug(f"Replacing non-container root {type(root).__name__} with an object")
        root = {}

    new_root = _shallow_copy(root)
    if isinstance(new_root, list) and not is_index(segments[0]):
        logger.debug(f"Replacing list root with an object to address key {segments[0]!r}")
        new_root = {}

    cur = new_root
    for seg, next_seg in zip(segments[:-1], segments[1:]):
        child = _get_child(cur, seg)
        if child is MISSING:
            child = {}
        elif not isinstance(child, (dict, list)):
            logger.debug(f"Overwriting scalar at segment {seg!r} with an object")
            child = {}
        elif isinstance(child, list) and not is_index(next_seg):
            logger.debug(f"Overwriting list at segment {seg!r} with an object")
            child = {}
        else:
            child = _shallow_copy(child)
        _assign(cur, seg, child)
        cur = child

    _assign(cur, segments[-1], new_value)
    return new_root


def merge_preserving_containers(current: Any, edited: Any) -> Any:
    """
    Keep the container children of `current` that `edited` does not mention.

    A node's edit buffer only carries its scalar fields; its object/array
    children are edited through their own nodes. When both values are
    objects, the result holds `edited`'s entries plus those children, in
    the original key order with new keys appended. Otherwise `edited` is
    returned as-is.
    """
    if not isinstance(current, dict) or not isinstance(edited, dict):
        return edited

    merged = {}
    for key, value in current.items():
        if key in edited:
            merged[key] = edited[key]
        elif isinstance(value, (dict, list)):
            merged[key] = value
    for key, value in edited.items():
        if key not in merged:
            merged[key] = value
    return merged
