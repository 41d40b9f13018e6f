"""Base model for all data models in the timekeeping system.

This module provides a base Pydantic model with common configuration
and helpers for converting between models and store records.
"""

from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ConfigDict

ModelT = TypeVar("ModelT", bound="BaseDataModel")


class BaseDataModel(BaseModel):
    """Base class for all data models.

    Provides common configuration for:
    - Validation on assignment
    - Rejecting unknown fields
    - Conversion to and from JSON-compatible store records

    Example:
        >>> class Team(BaseDataModel):
        ...     id: str
        ...     name: str
        >>> team = Team.from_record({"id": "t-1", "name": "Ops"})
        >>> team.to_record()
        {'id': 't-1', 'name': 'Ops'}
    """

    model_config = ConfigDict(
        validate_assignment=True,
        strict=False,
        extra="forbid",
        frozen=False,
    )

    @classmethod
    def from_record(cls: Type[ModelT], record: Dict[str, Any]) -> ModelT:
        """Build a model from a record returned by a RecordStore."""
        return cls.model_validate(record)

    def to_record(self) -> Dict[str, Any]:
        """Dump the model as a JSON-compatible record for a RecordStore."""
        return self.model_dump(mode="json")
