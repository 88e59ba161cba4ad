"""Shared pytest fixtures for dynattrs tests."""

from types import SimpleNamespace

import pytest
from sqlalchemy import Column, Integer, String, create_engine
from sqlalchemy.orm import declarative_base

from dynattrs import DynamicRecord, blob_column, has_dynamic_attributes, init_dynattrs


@pytest.fixture
def base():
    """Fresh declarative base so every test owns its tables."""
    return declarative_base()


@pytest.fixture
def models(base) -> SimpleNamespace:
    """The three record shapes: open, declared fields, renamed column."""

    @has_dynamic_attributes(column_name="data")
    class UserAttributeWithNamedColumn(DynamicRecord, base):
        __tablename__ = "user_attribute_with_named_columns"

        id = Column(Integer, primary_key=True)
        name = Column(String)
        data = blob_column()

    @has_dynamic_attributes("about", "age", "middle_name")
    class UserAttributeWithNamedField(DynamicRecord, base):
        __tablename__ = "user_attribute_with_named_fields"

        id = Column(Integer, primary_key=True)
        name = Column(String)
        dynamic_attributes = blob_column()

    @has_dynamic_attributes()
    class UserAttribute(DynamicRecord, base):
        __tablename__ = "user_attributes"

        id = Column(Integer, primary_key=True)
        name = Column(String)
        dynamic_attributes = blob_column()

    return SimpleNamespace(
        UserAttributeWithNamedColumn=UserAttributeWithNamedColumn,
        UserAttributeWithNamedField=UserAttributeWithNamedField,
        UserAttribute=UserAttribute,
    )


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'dynattrs.db'}")
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine, base, models):
    """Tables created and the store injected into DynamicRecord."""
    store = init_dynattrs(engine, base)
    yield store
    DynamicRecord._store = None
