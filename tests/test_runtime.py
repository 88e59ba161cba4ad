"""Tests for settings and the DynAttrs façade."""

import pytest
from sqlalchemy import Column, Integer, String

from dynattrs import DynAttrs, DynamicRecord, RecordStore, blob_column, has_dynamic_attributes
from dynattrs.settings import Settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("DYNATTRS_DATABASE_URL", "DYNATTRS_ECHO_SQL", "DYNATTRS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env) -> None:
        settings = Settings.from_env(load_dotenv_file=False)
        assert settings.database_url == "sqlite:///dynattrs.db"
        assert settings.echo_sql is False
        assert settings.log_level is None

    def test_environment_overrides(self, clean_env) -> None:
        clean_env.setenv("DYNATTRS_DATABASE_URL", "sqlite://")
        clean_env.setenv("DYNATTRS_ECHO_SQL", "true")
        clean_env.setenv("DYNATTRS_LOG_LEVEL", "debug")
        settings = Settings.from_env(load_dotenv_file=False)
        assert settings.database_url == "sqlite://"
        assert settings.echo_sql is True
        assert settings.log_level == "debug"


class TestDynAttrs:
    def test_store_before_init(self) -> None:
        with pytest.raises(RuntimeError):
            DynAttrs.store()

    def test_init_wires_records(self, base, tmp_path) -> None:
        @has_dynamic_attributes
        class Person(DynamicRecord, base):
            __tablename__ = "people"

            id = Column(Integer, primary_key=True)
            name = Column(String)
            dynamic_attributes = blob_column()

        try:
            store = DynAttrs.init(f"sqlite:///{tmp_path / 'runtime.db'}", base=base, settings=Settings())
            assert isinstance(store, RecordStore)
            assert DynAttrs.store() is store
            assert DynamicRecord._store is store

            Person.create(name="Joel Moss", home_town="Chorley")
            assert Person.last().home_town == "Chorley"
        finally:
            DynAttrs.shutdown()

        assert DynamicRecord._store is None
        with pytest.raises(RuntimeError):
            DynAttrs.store()
