"""
Record store abstraction and in-memory implementation.

The timekeeping core never talks to a database directly. It maps its models
onto a generic CRUD surface of named tables holding JSON-compatible records:

- ``insert(table, record)`` stores a new record and returns it with its id
- ``update(table, record_id, patch)`` merges a patch and returns the result
- ``query(table, filters, order_by, descending)`` returns matching records
- ``get(table, record_id)`` returns one record or None

Every failure is reported as ``StoreError``.
"""

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from timekeeping.errors import StoreError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

TIME_ENTRIES = "time_entries"
WEEKLY_TIMESHEETS = "weekly_timesheets"
EMPLOYEES = "employees"
PROJECTS = "projects"


def _sort_key(row: Record, field: str) -> tuple:
    value = row.get(field)
    if value is None:
        return (False,)
    return (True, value)


class RecordStore(ABC):
    """Generic CRUD surface over named tables of records."""

    @abstractmethod
    def insert(self, table: str, record: Record) -> Record:
        """
        Insert a record, assigning an ``id`` when the record has none.

        Raises:
            StoreError: If the record cannot be stored
        """

    @abstractmethod
    def update(self, table: str, record_id: str, patch: Record) -> Record:
        """
        Merge ``patch`` into an existing record.

        Raises:
            StoreError: If the record does not exist or cannot be stored
        """

    @abstractmethod
    def query(
        self,
        table: str,
        filters: Optional[Record] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Record]:
        """
        Return records whose fields equal every value in ``filters``.

        Raises:
            StoreError: If the store cannot be read
        """

    def get(self, table: str, record_id: str) -> Optional[Record]:
        """Return the record with ``record_id`` or None."""
        matches = self.query(table, filters={"id": record_id})
        return matches[0] if matches else None


class InMemoryRecordStore(RecordStore):
    """
    Thread-safe record store backed by ordered dictionaries.

    Records are copied on the way in and out, so callers can never mutate
    stored state by accident.

    Example:
        >>> store = InMemoryRecordStore()
        >>> saved = store.insert("projects", {"name": "Apollo", "status": "active"})
        >>> store.get("projects", saved["id"])["name"]
        'Apollo'
    """

    def __init__(self):
        self._tables: Dict[str, "OrderedDict[str, Record]"] = {}
        self._lock = threading.RLock()

    def _table(self, table: str) -> "OrderedDict[str, Record]":
        return self._tables.setdefault(table, OrderedDict())

    def insert(self, table: str, record: Record) -> Record:
        with self._lock:
            stored = dict(record)
            record_id = stored.get("id") or str(uuid.uuid4())
            stored["id"] = record_id

            rows = self._table(table)
            if record_id in rows:
                raise StoreError(f"Duplicate id {record_id} in table {table}")

            rows[record_id] = stored
            logger.debug(f"Inserted record {record_id} into {table}")
            return dict(stored)

    def update(self, table: str, record_id: str, patch: Record) -> Record:
        with self._lock:
            rows = self._table(table)
            if record_id not in rows:
                raise StoreError(f"Record {record_id} not found in table {table}")
            if "id" in patch and patch["id"] != record_id:
                raise StoreError("Record id cannot be changed by an update")

            updated = {**rows[record_id], **patch}
            rows[record_id] = updated
            logger.debug(f"Updated record {record_id} in {table}: {sorted(patch)}")
            return dict(updated)

    def query(
        self,
        table: str,
        filters: Optional[Record] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Record]:
        with self._lock:
            filters = filters or {}
            matches = [
                dict(row)
                for row in self._table(table).values()
                if all(row.get(key) == value for key, value in filters.items())
            ]

        if order_by:
            # Records missing the ordering field sort first ascending, last descending
            matches.sort(key=lambda row: _sort_key(row, order_by), reverse=descending)
        return matches

    def snapshot(self) -> Dict[str, List[Record]]:
        """Return a copy of every table, used for persistence."""
        with self._lock:
            return {
                name: [dict(row) for row in rows.values()]
                for name, rows in self._tables.items()
            }

    def _restore(self, tables: Dict[str, List[Record]]) -> None:
        with self._lock:
            self._tables = {
                name: OrderedDict((row["id"], dict(row)) for row in rows)
                for name, rows in tables.items()
            }
