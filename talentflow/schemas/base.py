"""
Base Pydantic schemas with common fields.

These are templates that other schemas inherit from.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Type, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, ValidationError

from talentflow.pipeline.errors import ValidationFailure


FormT = TypeVar("FormT", bound=BaseModel)


class OwnerScopedRead(BaseModel):
    """
    Base schema for reading owner-scoped data.

    Includes all the auto-generated fields like id, timestamps, etc.
    """

    id: UUID
    owner_id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    # Build from ORM rows or plain store records alike
    model_config = ConfigDict(from_attributes=True)


def blank_to_none(value: Any) -> Any:
    """Trim strings; empty strings become None."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def parse_form(model: Type[FormT], data: Dict[str, Any]) -> FormT:
    """
    Validate raw form data into a strict schema.

    Pydantic errors become a ValidationFailure keyed by field name so the
    caller can show them inline.
    """
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        field_errors: Dict[str, str] = {}
        for error in exc.errors():
            field = str(error["loc"][0]) if error.get("loc") else "__all__"
            field_errors.setdefault(field, _friendly_message(field, error))
        raise ValidationFailure(field_errors) from exc


def _friendly_message(field: str, error: Dict[str, Any]) -> str:
    if error.get("type") in ("missing", "string_too_short") or ("input" in error and error["input"] is None):
        return f"{field.replace('_', ' ').capitalize()} is required"
    message = str(error.get("msg") or "Invalid value")
    # Pydantic prefixes custom ValueErrors with "Value error, "
    return message.split(", ", 1)[1] if message.startswith("Value error, ") else message
