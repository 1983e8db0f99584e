"""
DocumentStore Protocol Definition.

This module defines the interface every canonical-document store implements.
Both MemoryDocumentStore and FileDocumentStore conform to this protocol.

The store owns the canonical document in two forms, the serialized text and
the parsed value, and is its only writer.
"""

from typing import Any, Callable, Protocol, runtime_checkable


@runtime_checkable
class DocumentStore(Protocol):
    """
    Abstract protocol for canonical-document stores.
    """

    @property
    def revision(self) -> int:
        """Counter bumped by every write; lets callers detect stale reads."""
        ...

    # --- Reads ---

    def get_canonical_text(self) -> str:
        """Return the serialized text of the document."""
        ...

    def get_canonical_value(self) -> Any:
        """Return the parsed value of the document (None if the text never parsed)."""
        ...

    # --- Writes ---

    def set_canonical_text(self, text: str, suppress_edit_surface_refresh: bool = False) -> int:
        """
        Replace the serialized text.

        Args:
            text: New document text
            suppress_edit_surface_refresh: Mark the change as originating from
                the edit surface, so listeners must not feed it back into it
                and the store does not re-derive the value from the text.

        Returns:
            The new revision
        """
        ...

    def set_canonical_value(self, value: Any) -> int:
        """
        Replace the parsed value.

        Returns:
            The new revision
        """
        ...

    def apply_update(self, text: str, value: Any, suppress_edit_surface_refresh: bool = False,
                     origin: Any = None) -> int:
        """
        Write text and value together as a single logical update.

        Args:
            origin: Token identifying the writer, passed through to listeners
                on the change events so the writer can skip its own change.

        Returns:
            The new revision
        """
        ...

    # --- Change notification ---

    def on(self, event: str, callback: Callable) -> None:
        """
        Register a callback for an event type.

        Event types:
        - 'text_change': canonical text replaced
        - 'value_change': canonical value replaced
        - 'parse_error': text was written that does not parse
        """
        ...

    def off(self, event: str, callback: Callable) -> None:
        """Remove a callback for an event type."""
        ...
