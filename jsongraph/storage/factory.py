"""
Store Factory for jsongraph.

Creates the appropriate document store: a FileDocumentStore when a document
path is configured, a MemoryDocumentStore otherwise.
"""

import logging
from pathlib import Path
from typing import Optional, Union, TYPE_CHECKING

from jsongraph.storage.file_store import FileDocumentStore
from jsongraph.storage.memory_store import MemoryDocumentStore

if TYPE_CHECKING:
    from jsongraph.storage.protocol import DocumentStore

logger = logging.getLogger(__name__)

# Document shown when no file is configured
SAMPLE_DOCUMENT = """{
  "customer": {
    "name": "Ada Lovelace",
    "active": true,
    "credit": 1250.5,
    "tags": ["vip", "engineer"]
  },
  "orders": [
    {"id": 1, "total": 19.99, "shipped": false},
    {"id": 2, "total": 5, "shipped": true}
  ],
  "notes": null
}"""


def create_store(
    document_path: Optional[Union[str, Path]] = None,
    initial_text: Optional[str] = None,
) -> "DocumentStore":
    """
    Create a document store.

    Args:
        document_path: JSON file to load and persist to, or None for memory only
        initial_text: Text for a memory store (defaults to a small sample)

    Returns:
        DocumentStore instance (FileDocumentStore or MemoryDocumentStore)
    """
    if document_path:
        logger.info(f"Using file store at {document_path}")
        return FileDocumentStore(document_path)

    logger.info("No document configured, using in-memory store")
    return MemoryDocumentStore(initial_text if initial_text is not None else SAMPLE_DOCUMENT)
