"""
Decide how an attribute name is resolved on a dynamic record.

Declared mode (non-empty field list) rejects unknown names; open mode
accepts every name that is not a static column.
"""

from __future__ import annotations

import enum
from typing import AbstractSet

from .config import DynamicAttributesConfig


class AttributeKind(enum.Enum):
    STATIC = "static"
    DYNAMIC_OPEN = "dynamic_open"
    DYNAMIC_DECLARED = "dynamic_declared"
    REJECTED = "rejected"

    @property
    def is_dynamic(self) -> bool:
        return self in (AttributeKind.DYNAMIC_OPEN, AttributeKind.DYNAMIC_DECLARED)


def classify(
    name: str,
    config: DynamicAttributesConfig,
    static_column_names: AbstractSet[str],
) -> AttributeKind:
    name = str(name)
    if config.declared_fields:
        if name in config.declared_fields:
            return AttributeKind.DYNAMIC_DECLARED
        if name in static_column_names:
            return AttributeKind.STATIC
        return AttributeKind.REJECTED

    if name in static_column_names:
        return AttributeKind.STATIC
    return AttributeKind.DYNAMIC_OPEN
