"""
Bulk attribute assignment.

Unlike a plain ``for k, v in attrs.items(): setattr(...)`` guarded by
``hasattr``, every simple key is assigned unconditionally so the record's
own resolution decides whether the name is acceptable. Keys shaped like
``born_on(1i)`` are collected and assembled once the simple keys are in.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from collections import defaultdict
from typing import Any, Callable, Dict, Iterable, List, Mapping, Tuple

from sqlalchemy import inspect

from ..errors import MultiparameterAssignmentError

logger = logging.getLogger(__name__)

_MULTIPARAMETER_KEY = re.compile(r"^(?P<name>[^(]+)\((?P<position>\d+)(?P<cast>[ifs]?)\)$")
_CASTS: Dict[str, Callable[[Any], Any]] = {"i": int, "f": float, "s": str, "": lambda v: v}


def protected_attributes(cls: type) -> Tuple[frozenset[str], frozenset[str] | None]:
    """(deny list, allow list) for ``cls``; primary keys are always denied."""
    denied = set(getattr(cls, "__protected_attributes__", ()) or ())
    mapper = inspect(cls)
    denied.update(mapper.get_property_by_column(col).key for col in mapper.primary_key)
    accessible = getattr(cls, "__accessible_attributes__", None)
    return frozenset(denied), None if accessible is None else frozenset(accessible)


def remove_protected_attributes(cls: type, attributes: Dict[str, Any]) -> Dict[str, Any]:
    denied, accessible = protected_attributes(cls)
    kept: Dict[str, Any] = {}
    removed: List[str] = []
    for key, value in attributes.items():
        base = key.split("(", 1)[0]
        if base in denied or (accessible is not None and base not in accessible):
            removed.append(key)
        else:
            kept[key] = value
    if removed:
        logger.warning(
            "Can't mass-assign these protected attributes on %s: %s",
            cls.__name__,
            ", ".join(removed),
        )
    return kept


def assign_attributes(
    record: Any,
    new_attributes: Mapping[Any, Any] | None,
    guard_protected_attributes: bool = True,
) -> None:
    if new_attributes is None:
        return
    attributes = {str(k): v for k, v in new_attributes.items()}
    if guard_protected_attributes:
        attributes = remove_protected_attributes(type(record), attributes)

    multi_parameter_attributes: List[Tuple[str, Any]] = []
    for key, value in attributes.items():
        if "(" in key:
            multi_parameter_attributes.append((key, value))
        else:
            setattr(record, key, value)

    assign_multiparameter_attributes(record, multi_parameter_attributes)


def assign_multiparameter_attributes(record: Any, pairs: Iterable[Tuple[str, Any]]) -> None:
    errors: List[Tuple[str, Exception]] = []
    for name, values in _group_multiparameter(pairs).items():
        try:
            setattr(record, name, _assemble(values))
        except (TypeError, ValueError, AttributeError) as exc:
            errors.append((name, exc))
    if errors:
        raise MultiparameterAssignmentError(errors)


def _group_multiparameter(pairs: Iterable[Tuple[str, Any]]) -> Dict[str, Dict[int, Tuple[Callable, Any]]]:
    grouped: Dict[str, Dict[int, Tuple[Callable, Any]]] = defaultdict(dict)
    for key, value in pairs:
        match = _MULTIPARAMETER_KEY.match(key)
        if match is None:
            raise MultiparameterAssignmentError([(key, ValueError(f"bad multiparameter key {key!r}"))])
        grouped[match["name"]][int(match["position"])] = (_CASTS[match["cast"]], value)
    return grouped


def _cast(cast: Callable[[Any], Any], value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return cast(value)


def _assemble(values: Dict[int, Tuple[Callable, Any]]) -> Any:
    parts = [_cast(*values[i]) if i in values else None for i in range(1, max(values) + 1)]
    if all(p is None for p in parts):
        return None
    if len(parts) == 1:
        return parts[0]
    if len(parts) == 3:
        return dt.date(*parts)
    if 3 < len(parts) <= 6:
        # missing time parts default to zero
        return dt.datetime(*parts[:3], *(p or 0 for p in parts[3:]))
    raise ValueError(f"cannot assemble a value from {len(parts)} parts")
