"""
Path model for addressing values inside a JSON document.

A path is a tuple of segments. An int segment is an index into a list,
a str segment is a key into an object. The empty tuple is the document root.

Paths are only meaningful against the snapshot of the document they were
derived from; inserting or removing siblings before the addressed position
invalidates them.
"""

from typing import Any, Iterable, Optional, Tuple, Union

Segment = Union[str, int]
JsonPath = Tuple[Segment, ...]

ROOT_MARKER = "$"


class _Missing:
    """Sentinel for an absent value (distinct from JSON null)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def is_index(segment: Any) -> bool:
    """Number means index."""
    return isinstance(segment, int) and not isinstance(segment, bool)


def is_key(segment: Any) -> bool:
    """String means key."""
    return isinstance(segment, str)


def normalize_path(path: Optional[Iterable[Segment]]) -> JsonPath:
    """
    Return `path` as a tuple, validating every segment.

    None is accepted and means the root. Segment types are kept exactly as
    given, so ("0",) and (0,) stay different paths even though both address
    key "0" of an object.
    """
    if path is None:
        return ()
    segments = tuple(path)
    for seg in segments:
        if not (is_index(seg) or is_key(seg)):
            raise TypeError(f"Invalid path segment {seg!r}: expected str or int")
    return segments


def path_to_string(path: Optional[Iterable[Segment]]) -> str:
    """
    Render a path as a bracketed accessor chain, e.g. $["customer"][0].

    Index segments render unquoted, key segments render double-quoted.
    The root renders as "$" alone.
    """
    if not path:
        return ROOT_MARKER
    parts = [str(seg) if is_index(seg) else f'"{seg}"' for seg in path]
    return f"{ROOT_MARKER}[{']['.join(parts)}]"


def last_segment(path: JsonPath) -> Optional[Segment]:
    if not path:
        return None
    return path[-1]


def object_key(segment: Segment) -> str:
    """Key used for `segment` inside an object; JSON object keys are always strings."""
    return segment if is_key(segment) else str(segment)


def get_value_at_path(root: Any, path: Optional[Iterable[Segment]], default: Any = MISSING) -> Any:
    """
    Read the value addressed by `path`.

    An index segment that meets an object reads the key of the same digits.
    Raises KeyError when the path does not resolve, unless `default` is given.
    """
    obj = root
    for seg in normalize_path(path):
        if is_index(seg) and isinstance(obj, list) and -len(obj) <= seg < len(obj):
            obj = obj[seg]
        elif isinstance(obj, dict) and object_key(seg) in obj:
            obj = obj[object_key(seg)]
        else:
            if default is not MISSING:
                return default
            raise KeyError(f"Path {path_to_string(path)} does not resolve at segment {seg!r}")
    return obj
