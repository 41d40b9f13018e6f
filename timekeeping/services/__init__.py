"""
Record store and lookup services for the timekeeping system.

This package provides:
- RecordStore: generic CRUD surface the core is written against
- InMemoryRecordStore / JsonFileRecordStore: concrete stores
- EmployeeDirectory: employee lookup and identity resolution
- ProjectCatalog: projects time can be booked against
"""

from .directory import EmployeeDirectory, ProjectCatalog
from .json_file_store import JsonFileRecordStore
from .record_store import InMemoryRecordStore, RecordStore

__all__ = [
    "RecordStore",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    "EmployeeDirectory",
    "ProjectCatalog",
]
