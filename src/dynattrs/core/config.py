"""
Per-record-type configuration for dynamic attributes.

Attached once by ``has_dynamic_attributes`` and read-only afterwards.
"""

from typing import Any, Tuple

from pydantic import BaseModel, field_validator

DEFAULT_COLUMN_NAME = "dynamic_attributes"


class DynamicAttributesConfig(BaseModel):
    column_name: str = DEFAULT_COLUMN_NAME
    declared_fields: Tuple[str, ...] = ()  # empty ➜ open namespace
    model_config = {"frozen": True}

    @field_validator("column_name", mode="before")
    @classmethod
    def _column_to_str(cls, value: Any) -> str:
        return str(value)

    @field_validator("declared_fields", mode="before")
    @classmethod
    def _normalize_fields(cls, value: Any) -> Tuple[str, ...]:
        # ordered set of names
        return tuple(dict.fromkeys(str(field) for field in value))

    @property
    def is_open(self) -> bool:
        """True when any non-static name is accepted as dynamic."""
        return not self.declared_fields
