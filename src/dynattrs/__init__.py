"""
Public surface for dynattrs.
Importing this module does **not** touch a database; call
`dynattrs.init_dynattrs(engine)` or `DynAttrs.init()` during start-up.
"""

from .bootstrap import init_dynattrs
from .core.classifier import AttributeKind, classify
from .core.config import DynamicAttributesConfig
from .core.record import DynamicRecord, has_dynamic_attributes
from .errors import (
    BlobDecodeError,
    BlobEncodeError,
    DeclaredFieldConflict,
    DynamicAttributesError,
    MultiparameterAssignmentError,
    UndefinedTableColumn,
)
from .events import on
from .persistence.models import Base, blob_column
from .persistence.store import RecordStore
from .runtime import DynAttrs

__all__ = [
    "AttributeKind",
    "Base",
    "BlobDecodeError",
    "BlobEncodeError",
    "DeclaredFieldConflict",
    "DynAttrs",
    "DynamicAttributesConfig",
    "DynamicAttributesError",
    "DynamicRecord",
    "MultiparameterAssignmentError",
    "RecordStore",
    "UndefinedTableColumn",
    "blob_column",
    "classify",
    "has_dynamic_attributes",
    "init_dynattrs",
    "on",
]
