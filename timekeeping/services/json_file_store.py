"""
JSON file backed record store.

The whole store is one versioned JSON document. Every mutation rewrites the
document with an atomic write (temp file + rename), so the file is never
left half-written even if the process dies mid-save.
"""

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from timekeeping.errors import StoreError
from timekeeping.services.record_store import InMemoryRecordStore, Record
from timekeeping.utils.logging_utils import log_function_call

logger = logging.getLogger(__name__)


class JsonFileRecordStore(InMemoryRecordStore):
    """
    Record store persisted to a JSON document on disk.

    Reads are served from memory. A failed save rolls the in-memory change
    back before ``StoreError`` is raised, so memory and disk never diverge.

    Example:
        >>> store = JsonFileRecordStore("data/timekeeping.json")
        >>> store.insert("employees", {"full_name": "Ada Lovelace"})
        {'full_name': 'Ada Lovelace', 'id': '...'}
    """

    STORE_VERSION = "1.0"

    def __init__(self, file_path: Union[str, Path]):
        """
        Open (or create on first write) the store document.

        Args:
            file_path: Location of the JSON document

        Raises:
            StoreError: If an existing document cannot be read or parsed
        """
        super().__init__()
        self.file_path = Path(file_path)
        self._load()
        logger.info(f"JsonFileRecordStore opened at {self.file_path}")

    def insert(self, table: str, record: Record) -> Record:
        with self._lock:
            stored = super().insert(table, record)
            try:
                self._save()
            except StoreError:
                del self._table(table)[stored["id"]]
                raise
            return stored

    def update(self, table: str, record_id: str, patch: Record) -> Record:
        with self._lock:
            previous = self.get(table, record_id)
            updated = super().update(table, record_id, patch)
            try:
                self._save()
            except StoreError:
                self._table(table)[record_id] = previous
                raise
            return updated

    def _load(self) -> None:
        """Load the document into memory; a missing file means an empty store."""
        if not self.file_path.exists():
            logger.debug(f"Store file not found, starting empty: {self.file_path}")
            return

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise StoreError(f"Store file is corrupted: {self.file_path}", e) from e
        except OSError as e:
            raise StoreError(f"Failed to read store file: {self.file_path}", e) from e

        version = document.get("version", "unknown")
        if version != self.STORE_VERSION:
            raise StoreError(
                f"Unsupported store version {version} "
                f"(expected {self.STORE_VERSION}) in {self.file_path}"
            )

        self._restore(document.get("tables", {}))
        counts = {name: len(rows) for name, rows in document.get("tables", {}).items()}
        logger.info(f"Loaded store tables from disk: {counts}")

    @log_function_call
    def _save(self) -> None:
        """Write the document atomically (temp file + rename)."""
        document = {
            "version": self.STORE_VERSION,
            "last_updated": datetime.now().isoformat(),
            "tables": self.snapshot(),
        }

        temp_path: Optional[str] = None
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=self.file_path.parent, suffix=".tmp"
            )
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(temp_path, self.file_path)
        except OSError as e:
            if temp_path and os.path.exists(temp_path):
                os.unlink(temp_path)
            raise StoreError(f"Failed to write store file: {self.file_path}", e) from e
