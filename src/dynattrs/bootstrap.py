"""
Single entry-point that wires a SQLAlchemy engine into dynattrs.
Call once, e.g. in application start-up or a test fixture.
"""

import logging

from sqlalchemy.engine import Engine

from .core.record import DynamicRecord
from .persistence.models import Base
from .persistence.store import RecordStore

logger = logging.getLogger(__name__)


def init_dynattrs(engine: Engine, base=Base) -> RecordStore:
    """
    Create the tables of ``base`` and inject one RecordStore into
    DynamicRecord (inherited by every subclass).
    """
    base.metadata.create_all(engine)  # ← this line creates tables
    global_store = RecordStore(engine)

    DynamicRecord._store = global_store
    logger.info("dynattrs initialised on %s", engine.url.render_as_string(hide_password=True))
    return global_store
