"""
In-memory canonical document store.

Holds the document as serialized text plus parsed value, bumps a revision
counter on every write, and notifies registered callbacks of changes.
An instance is an explicitly owned document handle: pass it to whatever
needs the document instead of reaching for shared module state.
"""

import copy
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

EVENT_TEXT_CHANGE = 'text_change'
EVENT_VALUE_CHANGE = 'value_change'
EVENT_PARSE_ERROR = 'parse_error'


@dataclass
class DocumentChange:
    """Represents one change notification from the store."""
    event: str  # 'text_change', 'value_change', 'parse_error'
    revision: int
    suppress_edit_surface_refresh: bool = False
    text: Optional[str] = None
    value: Any = None
    error: Optional[str] = None
    origin: Any = None  # writer that produced the change, if it identified itself


class MemoryDocumentStore:
    """
    Canonical document kept in memory.

    Writes through set_canonical_text without the suppress flag re-parse the
    text and, when it is valid JSON, replace the value as well (the path taken
    while the user types into the text editor). Flagged writes leave the value
    alone; the writer is expected to set it itself, normally through
    apply_update.
    """

    def __init__(self, text: str = "{}"):
        self._text = text
        self._value: Any = None
        self._revision = 0
        self._callbacks: Dict[str, List[Callable]] = {
            EVENT_TEXT_CHANGE: [],
            EVENT_VALUE_CHANGE: [],
            EVENT_PARSE_ERROR: [],
        }
        try:
            self._value = json.loads(text)
        except ValueError as e:
            logger.warning(f"Initial document text is not valid JSON: {e}")

    # --- Reads ---

    @property
    def revision(self) -> int:
        return self._revision

    def get_canonical_text(self) -> str:
        return self._text

    def get_canonical_value(self) -> Any:
        # Callers get their own copy; the store stays the only owner.
        return copy.deepcopy(self._value)

    # --- Writes ---

    def set_canonical_text(self, text: str, suppress_edit_surface_refresh: bool = False) -> int:
        self._on_text_written(text)
        self._text = text
        self._revision += 1
        self._emit(EVENT_TEXT_CHANGE, DocumentChange(
            event=EVENT_TEXT_CHANGE,
            revision=self._revision,
            suppress_edit_surface_refresh=suppress_edit_surface_refresh,
            text=text,
        ))

        if suppress_edit_surface_refresh:
            return self._revision

        try:
            value = json.loads(text)
        except ValueError as e:
            logger.debug(f"Canonical text does not parse, keeping previous value: {e}")
            self._emit(EVENT_PARSE_ERROR, DocumentChange(
                event=EVENT_PARSE_ERROR,
                revision=self._revision,
                text=text,
                error=str(e),
            ))
            return self._revision

        self._value = value
        self._emit(EVENT_VALUE_CHANGE, DocumentChange(
            event=EVENT_VALUE_CHANGE,
            revision=self._revision,
            value=copy.deepcopy(value),
        ))
        return self._revision

    def set_canonical_value(self, value: Any) -> int:
        self._value = copy.deepcopy(value)
        self._revision += 1
        self._emit(EVENT_VALUE_CHANGE, DocumentChange(
            event=EVENT_VALUE_CHANGE,
            revision=self._revision,
            value=copy.deepcopy(value),
        ))
        return self._revision

    def apply_update(self, text: str, value: Any, suppress_edit_surface_refresh: bool = False,
                     origin: Any = None) -> int:
        """
        Write text and value under a single revision.

        `origin` is handed to listeners unchanged so the writer can recognise
        its own change; every other listener still sees it.

        Both assignments happen before any callback runs, so listeners never
        observe the two forms out of step.
        """
        self._on_text_written(text)
        self._text = text
        self._value = copy.deepcopy(value)
        self._revision += 1

        self._emit(EVENT_TEXT_CHANGE, DocumentChange(
            event=EVENT_TEXT_CHANGE,
            revision=self._revision,
            suppress_edit_surface_refresh=suppress_edit_surface_refresh,
            text=text,
            origin=origin,
        ))
        self._emit(EVENT_VALUE_CHANGE, DocumentChange(
            event=EVENT_VALUE_CHANGE,
            revision=self._revision,
            suppress_edit_surface_refresh=suppress_edit_surface_refresh,
            value=copy.deepcopy(value),
            origin=origin,
        ))
        return self._revision

    def _on_text_written(self, text: str) -> None:
        """Hook for subclasses that persist the text. Runs before memory is updated."""

    # --- Change notification ---

    def on(self, event: str, callback: Callable) -> None:
        if event in self._callbacks:
            self._callbacks[event].append(callback)
        else:
            raise ValueError(f"Unknown event type: {event}")

    def off(self, event: str, callback: Callable) -> None:
        if event in self._callbacks and callback in self._callbacks[event]:
            self._callbacks[event].remove(callback)

    def _emit(self, event: str, change: DocumentChange) -> None:
        """Emit an event to all registered callbacks."""
        for callback in list(self._callbacks.get(event, [])):
            try:
                callback(change)
            except Exception as e:
                logger.error(f"Error in callback for {event}: {e}")
