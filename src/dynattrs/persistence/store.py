"""
Thin data-access layer for DynamicRecord models.
Runs the save lifecycle hooks around every write.
"""

from __future__ import annotations

import logging
from typing import Any, Type, TypeVar

from sqlalchemy import inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from ..events import run_after_save, run_before_save

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordStore:
    """Short-lived sessions around any mapped DynamicRecord class."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def _new_session(self) -> Session:  # separate to keep pylint happy
        return Session(bind=self.engine, future=True, expire_on_commit=False)

    # ---- writes ---------------------------------------------------------
    def save(self, rec: Any) -> bool:
        """
        Persist ``rec`` after its ``before_save`` handlers ran.

        Returns ``False`` (and writes nothing) when a handler vetoed it.
        """
        if not run_before_save(rec):
            logger.debug("save of %s aborted by a before_save handler", type(rec).__name__)
            return False

        with self._new_session() as s:
            s.add(rec)
            s.commit()
        logger.debug("saved %s", type(rec).__name__)

        run_after_save(rec)
        return True

    # ---- reads ----------------------------------------------------------
    def find(self, cls: Type[T], pk: Any) -> T | None:
        with self._new_session() as s:
            return s.get(cls, pk)

    def first(self, cls: Type[T]) -> T | None:
        return self._edge(cls, descending=False)

    def last(self, cls: Type[T]) -> T | None:
        return self._edge(cls, descending=True)

    def reload(self, rec: T) -> T:
        """Fresh copy of ``rec`` as stored; ``KeyError`` if it is gone."""
        cls = type(rec)
        pk = inspect(rec).identity
        fresh = None
        if pk is not None:
            fresh = self.find(cls, pk[0] if len(pk) == 1 else pk)
        if fresh is None:
            raise KeyError(f"{cls.__name__} {pk} not found (never saved?)")
        return fresh

    def _edge(self, cls: Type[T], *, descending: bool) -> T | None:
        keys = inspect(cls).primary_key
        order = [k.desc() if descending else k.asc() for k in keys]
        with self._new_session() as s:
            q = select(cls).order_by(*order).limit(1)
            return s.scalars(q).first()
