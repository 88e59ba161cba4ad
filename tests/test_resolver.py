"""Tests for DynamicAttributeResolver against a plain dict row."""

from __future__ import annotations

import json
from typing import Any

import pytest

from dynattrs.core import codec
from dynattrs.core.config import DynamicAttributesConfig
from dynattrs.core.resolver import DynamicAttributeResolver
from dynattrs.errors import BlobDecodeError


def _make(
    declared: tuple[str, ...] = (), stored: str | None = None
) -> tuple[DynamicAttributeResolver, dict[str, Any]]:
    row: dict[str, Any] = {"id": 1, "name": "Joel Moss", "dynamic_attributes": stored}
    resolver = DynamicAttributeResolver(
        DynamicAttributesConfig(declared_fields=declared),
        set(row),
        row.__getitem__,
        row.__setitem__,
        owner="Row",
    )
    return resolver, row


# ---------------------------------------------------------------------------
# Static path
# ---------------------------------------------------------------------------


class TestStaticPath:
    def test_get_delegates(self) -> None:
        resolver, _ = _make()
        assert resolver.get("name") == "Joel Moss"

    def test_set_delegates(self) -> None:
        resolver, row = _make()
        resolver.set("name", "Someone Else")
        assert row["name"] == "Someone Else"
        assert not resolver.dirty


# ---------------------------------------------------------------------------
# Dynamic reads and writes
# ---------------------------------------------------------------------------


class TestDynamicPath:
    def test_unset_attribute_reads_none(self) -> None:
        resolver, _ = _make()
        assert resolver.get("home_town") is None

    def test_set_buffers_without_touching_the_blob(self) -> None:
        resolver, row = _make()
        assert resolver.set("home_town", "Chorley") == "Chorley"
        assert resolver.get("home_town") == "Chorley"
        assert row["dynamic_attributes"] is None
        assert resolver.pending == {"home_town": "Chorley"}

    def test_reads_fall_back_to_the_stored_blob(self) -> None:
        resolver, _ = _make(stored=codec.encode({"home_town": "Chorley"}))
        assert resolver.get("home_town") == "Chorley"
        assert resolver.get("age") is None

    def test_pending_value_takes_precedence(self) -> None:
        resolver, _ = _make(stored=codec.encode({"home_town": "Chorley"}))
        resolver.set("home_town", "Leeds")
        assert resolver.get("home_town") == "Leeds"
        assert resolver.decoded() == {"home_town": "Chorley"}

    def test_blank_pending_value_falls_back_to_stored(self) -> None:
        resolver, _ = _make(stored=codec.encode({"home_town": "Chorley"}))
        resolver.set("home_town", None)
        assert resolver.get("home_town") == "Chorley"

    def test_false_is_not_blank(self) -> None:
        resolver, _ = _make(stored=codec.encode({"admin": True}))
        resolver.set("admin", False)
        assert resolver.get("admin") is False

    def test_pending_is_a_copy(self) -> None:
        resolver, _ = _make()
        resolver.set("age", 33)
        resolver.pending["age"] = 99
        assert resolver.get("age") == 33

    def test_malformed_blob_propagates(self) -> None:
        resolver, _ = _make(stored="{oops")
        with pytest.raises(BlobDecodeError):
            resolver.get("home_town")


class TestRejectedNames:
    def test_get_raises_attribute_error(self) -> None:
        resolver, _ = _make(declared=("about", "age"))
        with pytest.raises(AttributeError, match="'Row' object has no attribute 'address'"):
            resolver.get("address")

    def test_set_raises_attribute_error(self) -> None:
        resolver, _ = _make(declared=("about", "age"))
        with pytest.raises(AttributeError):
            resolver.set("address", "My address")
        assert not resolver.dirty

    def test_declared_names_are_accepted(self) -> None:
        resolver, _ = _make(declared=("about", "age"))
        resolver.set("about", "stuff")
        assert resolver.get("about") == "stuff"


class TestMappingOnBlobColumn:
    def test_entries_are_buffered(self) -> None:
        resolver, row = _make()
        resolver.set("dynamic_attributes", {"age": 33, "home_town": "Chorley"})
        assert resolver.pending == {"age": 33, "home_town": "Chorley"}
        assert row["dynamic_attributes"] is None

    def test_static_keys_are_refused(self) -> None:
        resolver, _ = _make()
        with pytest.raises(AttributeError):
            resolver.set("dynamic_attributes", {"name": "sneaky"})

    def test_raw_text_is_a_static_write(self) -> None:
        resolver, row = _make()
        resolver.set("dynamic_attributes", '{"age": 1}')
        assert row["dynamic_attributes"] == '{"age": 1}'
        assert resolver.get("age") == 1


# ---------------------------------------------------------------------------
# Flush
# ---------------------------------------------------------------------------


class TestFlush:
    def test_nothing_to_do(self) -> None:
        resolver, row = _make()
        assert resolver.flush() is False
        assert row["dynamic_attributes"] is None

    def test_writes_buffer_and_clears_it(self) -> None:
        resolver, row = _make()
        resolver.set("home_town", "Chorley")
        assert resolver.flush() is True
        assert json.loads(row["dynamic_attributes"]) == {"home_town": "Chorley"}
        assert resolver.pending == {}
        assert not resolver.dirty
        assert resolver.get("home_town") == "Chorley"

    def test_second_flush_is_a_noop(self) -> None:
        resolver, row = _make()
        resolver.set("home_town", "Chorley")
        resolver.flush()
        written = row["dynamic_attributes"]
        assert resolver.flush() is False
        assert row["dynamic_attributes"] is written

    def test_merges_with_stored_keys(self) -> None:
        resolver, row = _make(stored=codec.encode({"age": 33, "home_town": "Chorley"}))
        resolver.set("home_town", "Leeds")
        resolver.flush()
        assert codec.decode(row["dynamic_attributes"]) == {"age": 33, "home_town": "Leeds"}

    def test_snapshot_overlays_pending(self) -> None:
        resolver, _ = _make(stored=codec.encode({"age": 33}))
        resolver.set("home_town", "Chorley")
        assert resolver.snapshot() == {"age": 33, "home_town": "Chorley"}
