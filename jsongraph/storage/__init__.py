"""
Canonical document storage for jsongraph.

Supports two stores:
- MemoryDocumentStore: document kept in memory only
- FileDocumentStore: document persisted to a JSON file
"""

from jsongraph.storage.protocol import DocumentStore
from jsongraph.storage.memory_store import (
    MemoryDocumentStore,
    DocumentChange,
    EVENT_TEXT_CHANGE,
    EVENT_VALUE_CHANGE,
    EVENT_PARSE_ERROR,
)
from jsongraph.storage.file_store import FileDocumentStore
from jsongraph.storage.factory import create_store

__all__ = [
    'DocumentStore',
    'MemoryDocumentStore',
    'FileDocumentStore',
    'DocumentChange',
    'EVENT_TEXT_CHANGE',
    'EVENT_VALUE_CHANGE',
    'EVENT_PARSE_ERROR',
    'create_store',
]
