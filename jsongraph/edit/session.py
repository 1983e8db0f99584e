"""
Edit Session - Single source of truth for the node dialog's editing state.

The session moves between three modes:

    VIEWING --start_edit--> EDITING --commit--> COMMITTING --ok--> VIEWING
                               |                    |
                               |<------failed-------+
                               +--cancel--> VIEWING

The editing buffer exists only in EDITING (and while COMMITTING). It is
rebuilt from the canonical document every time editing starts, dropped on
cancel, on a successful commit and whenever another node is selected.
Store changes refresh what the dialog shows while VIEWING; they never touch
a buffer that is being edited.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional

from jsongraph.edit.sync import CommitResult, commit_node_edit
from jsongraph.field_codec import (
    EditingBuffer,
    Row,
    format_node_content,
    project_for_editing,
    rows_from_value,
)
from jsongraph.graph_builder import NodeData
from jsongraph.json_path import MISSING, JsonPath, get_value_at_path, is_index, last_segment, path_to_string
from jsongraph.storage.memory_store import EVENT_VALUE_CHANGE, DocumentChange

logger = logging.getLogger(__name__)


class EditMode(Enum):
    VIEWING = 'viewing'
    EDITING = 'editing'
    COMMITTING = 'committing'


@dataclass
class EditState:
    """Snapshot of the session, handed to state-change callbacks."""
    mode: EditMode = EditMode.VIEWING
    node_id: Optional[str] = None
    path: Optional[JsonPath] = None
    buffer: Optional[EditingBuffer] = None
    base_revision: Optional[int] = None
    last_error: Optional[str] = None


class EditSession:
    """Manages the edit state of the currently selected node."""

    def __init__(self, store, indent: int = 2):
        self._store = store
        self._indent = indent
        self._state = EditState()
        self._node: Optional[NodeData] = None
        self._rows: List[Row] = []
        self._on_state_change: Optional[Callable[[EditState], None]] = None
        self._store.on(EVENT_VALUE_CHANGE, self._handle_value_change)

    # --- Read-only view ---

    @property
    def state(self) -> EditState:
        return self._state

    @property
    def mode(self) -> EditMode:
        return self._state.mode

    @property
    def node(self) -> Optional[NodeData]:
        return self._node

    @property
    def rows(self) -> List[Row]:
        return self._rows

    @property
    def buffer(self) -> Optional[EditingBuffer]:
        return self._state.buffer

    @property
    def is_editing(self) -> bool:
        return self._state.mode == EditMode.EDITING

    @property
    def is_stale(self) -> bool:
        """True when the document changed since editing started."""
        if self._state.base_revision is None:
            return False
        return self._store.revision != self._state.base_revision

    @property
    def display_text(self) -> str:
        return format_node_content(self._rows, indent=self._indent)

    @property
    def path_display(self) -> str:
        return path_to_string(self._node.path if self._node else None)

    @property
    def title(self) -> str:
        """Key or index the node sits under, "$" for the root."""
        seg = last_segment(self._node.path) if self._node else None
        if seg is None:
            return "$"
        return f"[{seg}]" if is_index(seg) else seg

    def set_on_state_change(self, callback: Callable[[EditState], None]):
        self._on_state_change = callback

    # --- Transitions ---

    def select_node(self, node: Optional[NodeData]) -> EditState:
        """
        Show `node` in VIEWING mode.

        Any uncommitted buffer of the previously selected node is dropped.
        """
        if node is None:
            return self.close()
        if self._state.mode == EditMode.EDITING:
            logger.debug(f"Dropping uncommitted edit of node {self._state.node_id}")
        self._node = node
        self._rows = list(node.rows)
        self._set_state(EditState(mode=EditMode.VIEWING, node_id=node.id, path=node.path))
        return self._state

    def start_edit(self) -> EditState:
        """Enter EDITING with a buffer freshly projected from the document."""
        if self._node is None:
            raise RuntimeError("No node selected")
        if self._state.mode != EditMode.VIEWING:
            return self._state

        self._refresh_rows()
        self._set_state(replace(
            self._state,
            mode=EditMode.EDITING,
            buffer=project_for_editing(self._rows),
            base_revision=self._store.revision,
            last_error=None,
        ))
        return self._state

    def set_field(self, key: str, text: str) -> None:
        self._require_editing()
        self._state.buffer.set_field(key, text)

    def set_text(self, text: str) -> None:
        self._require_editing()
        self._state.buffer.set_text(text)

    def commit(self) -> CommitResult:
        """
        Write the buffer into the document.

        On success the session closes. On failure it stays in EDITING with
        the buffer exactly as the user left it.
        """
        self._require_editing()
        editing_state = self._state
        self._set_state(replace(editing_state, mode=EditMode.COMMITTING))

        result = commit_node_edit(
            self._store,
            self._node.path,
            editing_state.buffer.copy(),
            indent=self._indent,
            origin=self,
        )

        if result.ok:
            self.close()
        else:
            self._set_state(replace(editing_state, last_error=result.error))
        return result

    def quick_edit(self, key: Optional[str], text: str) -> CommitResult:
        """
        Edit one value and commit straight away (inline edit from the view).

        `key` is the row key, or None for a node showing a single bare value.
        """
        self.start_edit()
        try:
            if key is None or not self._state.buffer.uses_fields:
                self.set_text(text)
            else:
                self.set_field(key, text)
        except KeyError:
            self.cancel()
            raise
        return self.commit()

    def cancel(self) -> EditState:
        """Leave EDITING without touching the document."""
        if self._state.mode != EditMode.EDITING:
            return self._state
        self._refresh_rows()
        self._set_state(replace(self._state, mode=EditMode.VIEWING, buffer=None,
                                base_revision=None, last_error=None))
        return self._state

    def close(self) -> EditState:
        """Forget the selected node."""
        self._node = None
        self._rows = []
        self._set_state(EditState())
        return self._state

    # --- Internals ---

    def _require_editing(self) -> None:
        if self._state.mode != EditMode.EDITING or self._state.buffer is None:
            raise RuntimeError(f"Not editing (mode={self._state.mode.value})")

    def _refresh_rows(self) -> None:
        """Re-project the selected node's rows from the canonical value."""
        if self._node is None:
            return
        try:
            value = get_value_at_path(self._store.get_canonical_value(), self._node.path)
        except KeyError:
            value = MISSING
        if value is MISSING or isinstance(value, list):
            # Path no longer addresses a node-shaped value; keep derived rows.
            self._rows = list(self._node.rows)
            return
        self._rows = rows_from_value(value)

    def _handle_value_change(self, change: DocumentChange) -> None:
        # Own commit; other sessions on the store still refresh.
        if change.origin is self:
            return
        if self._node is None or self._state.mode != EditMode.VIEWING:
            return
        self._refresh_rows()
        self._notify_change()

    def _set_state(self, state: EditState) -> None:
        self._state = state
        self._notify_change()

    def _notify_change(self):
        if self._on_state_change:
            self._on_state_change(self._state)

    def dispose(self) -> None:
        """Detach from the store (call when the page goes away)."""
        self._store.off(EVENT_VALUE_CHANGE, self._handle_value_change)
