"""Tests for JSONLoader in mcq_compare/data_formats/json_loader.py."""

from __future__ import annotations

import json

import pytest

from mcq_compare.data_formats import JSONLoader


class TestJSONLoaderProperties:
    """Tests for JSONLoader properties."""

    def test_format_name(self):
        assert JSONLoader().format_name == "json"

    def test_supported_extensions(self):
        assert JSONLoader().supported_extensions == [".json"]


class TestJSONLoaderBytes:
    """Tests for JSONLoader.load_bytes()."""

    def test_load_array(self):
        """An array of objects yields each object."""
        data = json.dumps([{"id": "a"}, {"id": "b"}]).encode()
        assert [r["id"] for r in JSONLoader().load_bytes(data)] == ["a", "b"]

    def test_load_single_object(self):
        """A single object is treated as one record."""
        data = json.dumps({"id": "only"}).encode()
        assert list(JSONLoader().load_bytes(data)) == [{"id": "only"}]

    def test_scalar_rejected(self):
        """A top-level scalar is not a record container."""
        with pytest.raises(ValueError, match="object or array"):
            list(JSONLoader().load_bytes(b"42"))

    def test_strict_load_rejects_non_object_items(self):
        data = json.dumps([{"id": "a"}, 3]).encode()
        with pytest.raises(ValueError, match="index 1"):
            list(JSONLoader().load_bytes(data))

    def test_non_object_items_reported(self):
        """Non-object items are skipped and reported by index."""
        errors = []
        data = json.dumps([{"id": "a"}, "junk", {"id": "b"}]).encode()

        records = list(JSONLoader().load_bytes(data, lambda pos, e: errors.append(pos)))

        assert [r["id"] for r in records] == ["a", "b"]
        assert errors == [1]

    def test_utf8_bom_is_ignored(self):
        data = "\ufeff[{\"id\": \"a\"}]".encode("utf-8")
        assert list(JSONLoader().load_bytes(data)) == [{"id": "a"}]

    def test_invalid_json_raises(self):
        """Invalid JSON fails the whole source."""
        with pytest.raises(json.JSONDecodeError):
            list(JSONLoader().load_bytes(b"[{"))
