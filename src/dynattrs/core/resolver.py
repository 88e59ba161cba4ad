"""
Attribute resolver & pending-write buffer.

The resolver wraps a *static* accessor pair supplied by the host record
(``read_static(name)`` / ``write_static(name, value)``) and adds a second
resolution tier for dynamic names:

* reads  ➜ pending buffer first, decoded blob second
* writes ➜ pending buffer only (the blob column is untouched)
* flush  ➜ decoded blob + pending buffer ➜ encoded ➜ blob column

One resolver belongs to exactly one record instance.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Any, Callable, Dict, Mapping

from . import codec
from .classifier import AttributeKind, classify
from .config import DynamicAttributesConfig

logger = logging.getLogger(__name__)

ReadStatic = Callable[[str], Any]
WriteStatic = Callable[[str, Any], Any]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (dict, list, tuple, set, frozenset)):
        return not value
    return False


class DynamicAttributeResolver:
    def __init__(
        self,
        config: DynamicAttributesConfig,
        static_column_names: AbstractSet[str],
        read_static: ReadStatic,
        write_static: WriteStatic,
        *,
        owner: str = "object",
    ):
        self.config = config
        self.static_column_names = frozenset(static_column_names)
        self._read_static = read_static
        self._write_static = write_static
        self._owner = owner
        self._pending: Dict[str, Any] | None = None  # created on first write

    # ------------------------------------------------------------------ #
    # classification
    # ------------------------------------------------------------------ #
    def classify(self, name: str) -> AttributeKind:
        return classify(name, self.config, self.static_column_names)

    def is_dynamic(self, name: str) -> bool:
        return self.classify(name).is_dynamic

    def _no_such_attribute(self, name: str) -> AttributeError:
        return AttributeError(f"'{self._owner}' object has no attribute '{name}'")

    # ------------------------------------------------------------------ #
    # get / set
    # ------------------------------------------------------------------ #
    def get(self, name: str) -> Any:
        name = str(name)
        kind = self.classify(name)
        if kind is AttributeKind.STATIC:
            return self._read_static(name)
        if kind is AttributeKind.REJECTED:
            raise self._no_such_attribute(name)

        if self._pending and not _is_blank(self._pending.get(name)):
            return self._pending[name]
        stored = self.decoded()
        if not stored:
            return None
        return stored.get(name)

    def set(self, name: str, value: Any) -> Any:
        name = str(name)
        if name == self.config.column_name and isinstance(value, Mapping):
            self._merge_mapping(value)
            return value

        kind = self.classify(name)
        if kind is AttributeKind.STATIC:
            self._write_static(name, value)
            return value
        if kind is AttributeKind.REJECTED:
            raise self._no_such_attribute(name)

        if self._pending is None:
            self._pending = {}
        self._pending[name] = value
        return value

    def _merge_mapping(self, mapping: Mapping[Any, Any]) -> None:
        """Route each entry of a mapping assigned to the blob column."""
        for key, value in mapping.items():
            if not self.is_dynamic(str(key)):
                raise AttributeError(
                    f"'{key}' is not a dynamic attribute of '{self._owner}'"
                )
            self.set(str(key), value)

    # ------------------------------------------------------------------ #
    # views
    # ------------------------------------------------------------------ #
    def decoded(self) -> Dict[str, Any] | None:
        """Decode the blob column as currently held by the record."""
        return codec.decode(self._read_static(self.config.column_name))

    @property
    def pending(self) -> Dict[str, Any]:
        return dict(self._pending or {})

    @property
    def dirty(self) -> bool:
        return bool(self._pending)

    def snapshot(self) -> Dict[str, Any]:
        """Decoded blob overlaid with pending writes."""
        merged = dict(self.decoded() or {})
        merged.update(self._pending or {})
        return merged

    # ------------------------------------------------------------------ #
    # flush
    # ------------------------------------------------------------------ #
    def flush(self) -> bool:
        """
        Write pending values into the blob column and clear the buffer.

        Returns ``False`` when there was nothing to write. The previously
        stored mapping is kept; pending keys replace stored ones.
        """
        if not self._pending:
            return False

        merged = self.snapshot()
        self._write_static(self.config.column_name, codec.encode(merged))
        logger.debug(
            "flushed %d dynamic attribute(s) into %s.%s",
            len(self._pending),
            self._owner,
            self.config.column_name,
        )
        self._pending = {}
        return True
