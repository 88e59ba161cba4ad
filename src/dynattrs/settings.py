"""
Process-level settings, read from the environment (and a ``.env`` file).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel

ENV_PREFIX = "DYNATTRS_"


class Settings(BaseModel):
    database_url: str = "sqlite:///dynattrs.db"
    echo_sql: bool = False
    log_level: str | None = None

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "Settings":
        if load_dotenv_file:
            load_dotenv()
        values = {}
        for field in cls.model_fields:
            raw = os.environ.get(ENV_PREFIX + field.upper())
            if raw is not None and raw != "":
                values[field] = raw
        return cls.model_validate(values)
