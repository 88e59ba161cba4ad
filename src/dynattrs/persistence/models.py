"""
Declarative base and column helpers for dynamic records.
"""

import datetime as dt

from sqlalchemy import Column, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def now_utc() -> dt.datetime:  # compact timezone‑aware timestamp
    return dt.datetime.now(tz=dt.timezone.utc)


def blob_column(name: str | None = None, **kw) -> Column:
    """Nullable text column that holds the serialized dynamic attributes."""
    kw.setdefault("nullable", True)
    if name is None:
        return Column(Text, **kw)
    return Column(name, Text, **kw)


__all__ = ["Base", "blob_column", "now_utc"]
