"""
Employee directory and project catalog.

These are thin lookups over the record store. The directory also performs
identity resolution: mapping an authenticated user id to the employee the
time is tracked for.
"""

import logging
from typing import List, Optional

from timekeeping.errors import NotFoundError
from timekeeping.models.employee import Employee, Project
from timekeeping.services.record_store import EMPLOYEES, PROJECTS, RecordStore

logger = logging.getLogger(__name__)


class EmployeeDirectory:
    """Looks up and registers employees.

    Attributes:
        store: Record store holding the ``employees`` table
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def register(self, full_name: str, user_id: Optional[str] = None) -> Employee:
        """Register a new active employee, optionally linked to a user id."""
        record = self.store.insert(
            EMPLOYEES,
            {"full_name": full_name.strip(), "user_id": user_id, "status": "active"},
        )
        employee = Employee.from_record(record)
        logger.info(f"Registered employee {employee.id} ({employee.full_name})")
        return employee

    def get_employee(self, employee_id: str) -> Employee:
        """
        Fetch an employee by id.

        Raises:
            NotFoundError: If no employee has this id
        """
        record = self.store.get(EMPLOYEES, employee_id)
        if record is None:
            raise NotFoundError("employee", employee_id)
        return Employee.from_record(record)

    def list_employees(self) -> List[Employee]:
        """All employees ordered by name."""
        records = self.store.query(EMPLOYEES, order_by="full_name")
        return [Employee.from_record(r) for r in records]

    def resolve_employee_id(self, user_id: str) -> str:
        """
        Resolve the employee linked to an authenticated user.

        Raises:
            NotFoundError: If no employee is linked to the user
        """
        records = self.store.query(EMPLOYEES, filters={"user_id": user_id})
        if not records:
            raise NotFoundError("employee for user", user_id)
        if len(records) > 1:
            logger.warning(
                f"User {user_id} is linked to {len(records)} employees, "
                f"using {records[0]['id']}"
            )
        return records[0]["id"]


class ProjectCatalog:
    """Manages the projects time can be booked against."""

    def __init__(self, store: RecordStore):
        self.store = store

    def add_project(self, name: str) -> Project:
        record = self.store.insert(PROJECTS, {"name": name.strip(), "status": "active"})
        project = Project.from_record(record)
        logger.info(f"Added project {project.id} ({project.name})")
        return project

    def list_projects(self, active_only: bool = True) -> List[Project]:
        """Projects ordered by name; only active ones unless asked otherwise."""
        filters = {"status": "active"} if active_only else None
        records = self.store.query(PROJECTS, filters=filters, order_by="name")
        return [Project.from_record(r) for r in records]

    def archive_project(self, project_id: str) -> Project:
        """
        Mark a project archived so it no longer shows as bookable.

        Raises:
            NotFoundError: If the project does not exist
        """
        if self.store.get(PROJECTS, project_id) is None:
            raise NotFoundError("project", project_id)
        record = self.store.update(PROJECTS, project_id, {"status": "archived"})
        return Project.from_record(record)
