"""
Field codec: turns a node's rows into editable text and back.

A node is edited either as one free-text blob or as a set of named fields
(one per keyed scalar row). Edited text is turned back into values with a
best-effort JSON literal parse; anything that does not parse stays a string.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Literal, Optional

from jsongraph.json_path import MISSING

RowType = Literal['string', 'number', 'boolean', 'null', 'object', 'array']

CONTAINER_TYPES = ('object', 'array')
EMPTY_OBJECT_TEXT = "{}"


@dataclass
class Row:
    """One display line of a node: a scalar leaf or a container summary."""
    key: Optional[str]
    value: Any = MISSING
    type: RowType = 'string'
    child_count: Optional[int] = None

    @property
    def is_container(self) -> bool:
        return self.type in CONTAINER_TYPES


@dataclass
class EditingBuffer:
    """
    Transient edit state of one open node.

    `fields` is None for the free-text form; otherwise it maps each field key
    to its raw edited text, in display order.
    """
    text: str = ""
    fields: Optional[Dict[str, str]] = None

    @classmethod
    def from_text(cls, text: str) -> 'EditingBuffer':
        return cls(text=text)

    @classmethod
    def from_fields(cls, fields: Dict[str, str]) -> 'EditingBuffer':
        return cls(fields=dict(fields))

    @property
    def uses_fields(self) -> bool:
        return self.fields is not None

    def set_text(self, text: str) -> None:
        self.text = text

    def set_field(self, key: str, text: str) -> None:
        if self.fields is None:
            raise ValueError("Buffer is in free-text form")
        if key not in self.fields:
            raise KeyError(f"No editable field {key!r}")
        self.fields[key] = text

    def copy(self) -> 'EditingBuffer':
        return EditingBuffer(
            text=self.text,
            fields=dict(self.fields) if self.fields is not None else None,
        )


def row_type_of(value: Any) -> RowType:
    if isinstance(value, dict):
        return 'object'
    if isinstance(value, list):
        return 'array'
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    return 'string'


def rows_from_value(value: Any) -> List[Row]:
    """
    Build the rows of one container level.

    An object yields one row per key (container children as summaries),
    a scalar yields a single unkeyed row. Arrays are expanded into their
    own nodes by the graph builder and yield no rows here.
    """
    if isinstance(value, dict):
        rows = []
        for key, child in value.items():
            child_type = row_type_of(child)
            if child_type in CONTAINER_TYPES:
                rows.append(Row(key=key, type=child_type, child_count=len(child)))
            else:
                rows.append(Row(key=key, value=child, type=child_type))
        return rows
    if isinstance(value, list):
        return []
    return [Row(key=None, value=value, type=row_type_of(value))]


def value_to_text(value: Any) -> str:
    """Render a value the way it appears in an edit field."""
    if value is MISSING:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unsupported JSON constant {name}")


def parse_literal(text: str) -> Any:
    """
    Parse `text` as a JSON literal, falling back to the raw text.

    NaN/Infinity are refused so a reconstructed value can always be written
    back as standard JSON.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (TypeError, ValueError, RecursionError):
        return text


def _keyed_scalar_rows(rows: Iterable[Row]) -> List[Row]:
    return [r for r in rows if r.key is not None and not r.is_container]


def project_for_editing(rows: Optional[List[Row]]) -> EditingBuffer:
    """Build the editing buffer for a node from its rows."""
    if not rows:
        return EditingBuffer.from_text(EMPTY_OBJECT_TEXT)
    if len(rows) == 1 and rows[0].key is None:
        return EditingBuffer.from_text(value_to_text(rows[0].value))

    keyed = _keyed_scalar_rows(rows)
    if not keyed:
        # Only container children: nothing editable at this level.
        return EditingBuffer.from_text(EMPTY_OBJECT_TEXT)
    return EditingBuffer.from_fields({r.key: value_to_text(r.value) for r in keyed})


def reconstruct_from_editing(buffer: EditingBuffer) -> Any:
    """
    Turn an editing buffer back into a value. Never raises.

    Fields are parsed independently; a field that does not parse keeps its
    raw text as a string.
    """
    if buffer.uses_fields:
        return {key: parse_literal(raw) for key, raw in buffer.fields.items()}
    return parse_literal(buffer.text)


def format_node_content(rows: Optional[List[Row]], indent: int = 2) -> str:
    """Read-only display of a node's scalar projection."""
    if not rows:
        return EMPTY_OBJECT_TEXT
    if len(rows) == 1 and rows[0].key is None:
        return value_to_text(rows[0].value)
    obj = {r.key: (None if r.value is MISSING else r.value) for r in _keyed_scalar_rows(rows)}
    return json.dumps(obj, indent=indent, ensure_ascii=False)
