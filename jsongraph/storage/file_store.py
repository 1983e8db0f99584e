"""
File-backed canonical document store.

Keeps the document in memory like MemoryDocumentStore and writes the
canonical text to a JSON file on every text write, so a committed edit is
on disk before any listener sees it.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from jsongraph.storage.memory_store import MemoryDocumentStore

logger = logging.getLogger(__name__)

EMPTY_DOCUMENT = "{}"


class FileDocumentStore(MemoryDocumentStore):
    """
    Canonical document persisted to a single JSON file.

    A missing file starts as an empty object and is created on the first
    write. A file that does not hold valid JSON is still loaded as text so
    the user can repair it in the text editor.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        text = EMPTY_DOCUMENT
        if self.path.exists():
            with open(self.path, "r", encoding="utf-8") as f:
                text = f.read()
            logger.info(f"Loaded document {self.path} ({len(text)} chars)")
        else:
            logger.info(f"Document {self.path} does not exist yet, starting empty")
        super().__init__(text)

    def _on_text_written(self, text: str) -> None:
        """Replace the file atomically; a failed write leaves the old file in place."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, self.path)
        except Exception:
            os.unlink(tmp_name)
            raise
