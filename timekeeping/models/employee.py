"""Employee and project reference models."""

from typing import Literal, Optional

from pydantic import Field, field_validator

from timekeeping.models.base import BaseDataModel


class Employee(BaseDataModel):
    """An employee time can be tracked for.

    Attributes:
        id: Store-assigned identifier
        user_id: Authenticated user this employee is linked to, if any
        full_name: Display name
        status: Employment status
    """

    id: str = Field(..., min_length=1)
    user_id: Optional[str] = None
    full_name: str = Field(..., min_length=1)
    status: Literal["active", "inactive"] = "active"

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("full_name cannot be empty or whitespace")
        return v.strip()


class Project(BaseDataModel):
    """A project time entries can be booked against."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    status: Literal["active", "archived"] = "active"

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name cannot be empty or whitespace")
        return v.strip()
