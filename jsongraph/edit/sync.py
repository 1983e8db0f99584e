"""
Commit of a node edit into the canonical document.

Reads the current document, rebuilds the edited value from the buffer,
writes it at the node's path and stores the result as text and value in one
update. The update is flagged so the store's own change handling does not
feed it back into the edit surface that produced it.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from jsongraph.field_codec import EditingBuffer, reconstruct_from_editing
from jsongraph.json_path import JsonPath, get_value_at_path, normalize_path, path_to_string
from jsongraph.mutation import merge_preserving_containers, set_value_at_path

logger = logging.getLogger(__name__)


@dataclass
class CommitResult:
    """Outcome of a commit attempt. Nothing was written when ok is False."""
    ok: bool
    value: Any = None
    text: Optional[str] = None
    revision: Optional[int] = None
    error: Optional[str] = None


def read_canonical_value(store) -> Any:
    """
    Parse the store's canonical text.

    Parsing the text (rather than reusing the stored value) hands the commit
    a private copy and catches a text pane holding invalid JSON.

    Raises:
        ValueError: the text is not valid JSON
    """
    return json.loads(store.get_canonical_text())


def commit_node_edit(store, path: JsonPath, buffer: EditingBuffer, indent: int = 2,
                     origin: Any = None) -> CommitResult:
    """
    Write the edited value of one node back into the document.

    Args:
        store: DocumentStore holding the canonical document
        path: Path of the node being edited
        buffer: The node's editing buffer
        indent: Indent for the re-serialized text
        origin: Token of the committing edit surface, carried on the change events

    Returns:
        CommitResult; on failure the store is left untouched
    """
    path = normalize_path(path)

    try:
        current = read_canonical_value(store)
    except ValueError as e:
        logger.warning(f"Could not parse current document, commit aborted: {e}")
        return CommitResult(ok=False, error=f"Current document is not valid JSON: {e}")

    try:
        edited = reconstruct_from_editing(buffer)
        existing = get_value_at_path(current, path, default=None)
        edited = merge_preserving_containers(existing, edited)

        updated = set_value_at_path(current, path, edited)
        text = json.dumps(updated, indent=indent, ensure_ascii=False)

        revision = store.apply_update(text, updated, suppress_edit_surface_refresh=True, origin=origin)
    except Exception as e:
        logger.exception(f"Error saving node edit at {path_to_string(path)}")
        return CommitResult(ok=False, error=str(e))

    logger.info(f"Committed edit at {path_to_string(path)} (revision {revision})")
    return CommitResult(ok=True, value=updated, text=text, revision=revision)
