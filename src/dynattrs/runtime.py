"""
dynattrs.runtime  ──  A thin façade so applications get a configured store
without wiring engines by hand.

Usage pattern in user code
--------------------------
    from dynattrs import DynAttrs

    DynAttrs.init()                      # DYNATTRS_DATABASE_URL or sqlite file
    user = User.create(name="Joel", home_town="Chorley")
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from .bootstrap import init_dynattrs
from .core.record import DynamicRecord
from .persistence.models import Base
from .persistence.store import RecordStore
from .settings import Settings


class DynAttrs:
    """
    Process-wide holder of the engine and store. We keep a private singleton
    so modules don't have to pass stores around.
    """

    _store: ClassVar[Optional[RecordStore]] = None
    _engine: ClassVar[Optional[Engine]] = None
    settings: ClassVar[Optional[Settings]] = None

    # ---------- one-shot initialiser ----------
    @classmethod
    def init(
        cls,
        database_url: Optional[str] = None,
        *,
        base=Base,
        settings: Optional[Settings] = None,
        **engine_kwargs: Any,
    ) -> RecordStore:
        if cls._store is None:
            settings = settings or Settings.from_env()
            if database_url is not None:
                settings = settings.model_copy(update={"database_url": database_url})
            if settings.log_level:
                logging.getLogger("dynattrs").setLevel(settings.log_level.upper())

            engine_kwargs.setdefault("echo", settings.echo_sql)
            cls._engine = create_engine(settings.database_url, pool_pre_ping=True, **engine_kwargs)
            cls._store = init_dynattrs(cls._engine, base)  # auto-wire DynamicRecord
            cls.settings = settings
        return cls._store

    # ---------- convenience helpers ----------
    @classmethod
    def store(cls) -> RecordStore:
        if cls._store is None:
            raise RuntimeError("DynAttrs.init() has not been called")
        return cls._store

    @classmethod
    def shutdown(cls) -> None:
        """Dispose of the engine and forget the store."""
        if cls._engine is not None:
            cls._engine.dispose()
        if DynamicRecord._store is cls._store:
            DynamicRecord._store = None
        cls._store = None
        cls._engine = None
        cls.settings = None
