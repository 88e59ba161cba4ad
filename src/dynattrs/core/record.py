"""
DynamicRecord mixin – schema-less attributes on a SQLAlchemy model.

* Unknown attribute reads/writes ➜ DynamicAttributeResolver ➜ pending buffer
* Pending buffer ➜ blob column, flushed by a ``before_save`` hook
* ``@has_dynamic_attributes(...)`` attaches the per-class configuration
"""

from __future__ import annotations

import inspect as pyinspect
import logging
import types
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Mapping, Optional, Type, TypeVar

from sqlalchemy import inspect

from ..errors import DeclaredFieldConflict, UndefinedTableColumn
from ..events import on
from .assignment import assign_attributes
from .config import DEFAULT_COLUMN_NAME, DynamicAttributesConfig
from .resolver import DynamicAttributeResolver

if TYPE_CHECKING:
    from ..persistence.store import RecordStore

logger = logging.getLogger(__name__)

T_Record = TypeVar("T_Record", bound="DynamicRecord")


def _column_defaults(cls: type) -> Dict[str, Any]:
    """Attribute key ➜ scalar column default (``None`` for callables)."""
    defaults: Dict[str, Any] = {}
    for key, column in inspect(cls).columns.items():
        default = getattr(column, "default", None)
        defaults[key] = default.arg if default is not None and default.is_scalar else None
    return defaults


def _is_method(cls: type, name: str) -> bool:
    """True when assigning ``name`` on an instance would shadow a method."""
    if name.startswith("_"):
        return False
    try:
        raw = pyinspect.getattr_static(cls, name)
    except AttributeError:
        return False
    return isinstance(raw, (types.FunctionType, classmethod, staticmethod))


class DynamicRecord:
    """Mixin for declarative models – mix in *before* the declarative base."""

    __dynamic_attributes__: ClassVar[Optional[DynamicAttributesConfig]] = None
    __protected_attributes__: ClassVar[frozenset] = frozenset()
    __accessible_attributes__: ClassVar[Optional[frozenset]] = None

    _store: ClassVar[Optional["RecordStore"]] = None  # injected by init_dynattrs()

    def __init__(self, **attributes: Any) -> None:
        columns = self.column_names()
        for key, value in self.initial_attributes().items():
            if key in columns and key not in attributes and value is not None:
                super().__setattr__(key, value)
        self.assign_attributes(attributes)

    # ------------------------------------------------------------------ #
    # class-level introspection
    # ------------------------------------------------------------------ #
    @classmethod
    def dynamic_attributes_config(cls) -> DynamicAttributesConfig:
        config = cls.__dynamic_attributes__
        if config is None:
            raise TypeError(
                f"{cls.__name__} has no dynamic attributes; decorate it with has_dynamic_attributes"
            )
        return config

    @classmethod
    def column_names(cls) -> frozenset[str]:
        return frozenset(inspect(cls).columns.keys())

    @classmethod
    def primary_key_names(cls) -> tuple[str, ...]:
        mapper = inspect(cls)
        return tuple(mapper.get_property_by_column(col).key for col in mapper.primary_key)

    @classmethod
    def initial_attributes(cls) -> Dict[str, Any]:
        """Declared dynamic fields as ``None`` plus static column defaults."""
        attributes: Dict[str, Any] = {}
        config = cls.__dynamic_attributes__
        if config is not None and config.declared_fields:
            attributes.update(dict.fromkeys(config.declared_fields))

        primary_keys = set(cls.primary_key_names())
        for key, default in _column_defaults(cls).items():
            if key not in primary_keys:
                attributes[key] = default
        return attributes

    # ------------------------------------------------------------------ #
    # attribute interception
    # ------------------------------------------------------------------ #
    @property
    def _dynamic(self) -> DynamicAttributeResolver:
        resolver = self.__dict__.get("_dynamic_resolver")
        if resolver is None:
            resolver = DynamicAttributeResolver(
                self.dynamic_attributes_config(),
                self.column_names(),
                read_static=lambda name: object.__getattribute__(self, name),
                write_static=lambda name, value: super(DynamicRecord, self).__setattr__(name, value),
                owner=type(self).__name__,
            )
            self.__dict__["_dynamic_resolver"] = resolver
        return resolver

    def __getattr__(self, name: str) -> Any:
        # only reached when normal lookup failed
        if name.startswith("_") or type(self).__dynamic_attributes__ is None:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")
        return self._dynamic.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        cls = type(self)
        if cls.__dynamic_attributes__ is not None and _is_method(cls, name):
            raise AttributeError(
                f"'{name}' is a method of '{cls.__name__}' and cannot be assigned"
            )
        if (
            cls.__dynamic_attributes__ is None
            or name.startswith("_")
            or (name not in self._dynamic.static_column_names and hasattr(cls, name))
        ):
            super().__setattr__(name, value)
            return
        self._dynamic.set(name, value)

    def is_dynamic_attribute(self, name: str) -> bool:
        if type(self).__dynamic_attributes__ is None:
            return False
        return self._dynamic.is_dynamic(name)

    def read_attribute(self, name: str) -> Any:
        if type(self).__dynamic_attributes__ is None:
            return getattr(self, name)
        return self._dynamic.get(name)

    def write_attribute(self, name: str, value: Any) -> Any:
        if type(self).__dynamic_attributes__ is None:
            super().__setattr__(name, value)
            return value
        return self._dynamic.set(name, value)

    def decoded_dynamic_attributes(self) -> Dict[str, Any] | None:
        """What the blob column holds right now, decoded; pending writes excluded."""
        return self._dynamic.decoded()

    def dynamic_attributes_snapshot(self) -> Dict[str, Any]:
        return self._dynamic.snapshot()

    def assign_attributes(
        self, new_attributes: Mapping[Any, Any] | None, guard_protected_attributes: bool = True
    ) -> None:
        assign_attributes(self, new_attributes, guard_protected_attributes)

    def build_dynamic_attributes(self) -> bool:
        """Flush pending dynamic writes into the blob column."""
        if type(self).__dynamic_attributes__ is not None:
            self._dynamic.flush()
        return True

    # ------------------------------------------------------------------ #
    # persistence shortcuts
    # ------------------------------------------------------------------ #
    @classmethod
    def _ensure_store(cls) -> "RecordStore":
        if cls._store is None:
            raise RuntimeError("Call init_dynattrs(engine) before using DynamicRecord persistence")
        return cls._store

    @classmethod
    def create(cls: Type[T_Record], **attributes: Any) -> T_Record:
        record = cls(**attributes)
        record.save()
        return record

    @classmethod
    def find(cls: Type[T_Record], pk: Any) -> T_Record | None:
        return cls._ensure_store().find(cls, pk)

    @classmethod
    def first(cls: Type[T_Record]) -> T_Record | None:
        return cls._ensure_store().first(cls)

    @classmethod
    def last(cls: Type[T_Record]) -> T_Record | None:
        return cls._ensure_store().last(cls)

    def save(self) -> bool:
        return self._ensure_store().save(self)

    def reload(self: T_Record) -> T_Record:
        return self._ensure_store().reload(self)


@on.before_save(DynamicRecord)
def _flush_dynamic_attributes(record: DynamicRecord) -> bool:
    return record.build_dynamic_attributes()


def has_dynamic_attributes(*declared_fields: Any, column_name: str = DEFAULT_COLUMN_NAME):
    """
    Class decorator enabling dynamic attributes on a mapped DynamicRecord.

        @has_dynamic_attributes("about", "age", column_name="data")
        class User(DynamicRecord, Base): ...

    With no field names every non-column attribute is accepted. The blob
    column is checked immediately; a missing one raises UndefinedTableColumn.
    Declared fields must not share a name with a column (DeclaredFieldConflict).
    """
    if len(declared_fields) == 1 and isinstance(declared_fields[0], type):
        # bare @has_dynamic_attributes
        return has_dynamic_attributes(column_name=column_name)(declared_fields[0])

    def decorator(cls: Type[T_Record]) -> Type[T_Record]:
        if not (isinstance(cls, type) and issubclass(cls, DynamicRecord)):
            raise TypeError(f"{cls!r} must subclass DynamicRecord to have dynamic attributes")

        config = DynamicAttributesConfig(column_name=column_name, declared_fields=declared_fields)
        if config.column_name not in cls.column_names():
            raise UndefinedTableColumn(
                f"{cls.__name__} has no column {config.column_name!r} to hold dynamic attributes"
            )
        clashing = [f for f in config.declared_fields if f in cls.column_names()]
        if clashing:
            raise DeclaredFieldConflict(
                f"{cls.__name__}: declared dynamic fields clash with columns: {', '.join(clashing)}"
            )

        cls.__dynamic_attributes__ = config
        logger.debug(
            "%s: dynamic attributes in %r (%s)",
            cls.__name__,
            config.column_name,
            ", ".join(config.declared_fields) or "open",
        )
        return cls

    return decorator
