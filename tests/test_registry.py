"""Tests for typeshape.registry module."""

import pytest

from typeshape.errors import RegistryFrozenError, SchemaNotFoundError
from typeshape.registry import SchemaRegistry, resolve_reference
from typeshape.types import PrimitiveSpec, Types


class TestSchemaRegistry:
    """Test the schema lookup table."""

    def test_register_and_resolve(self):
        registry = SchemaRegistry()
        registry.register("Name", Types.string())
        assert registry.resolve("Name") == Types.string()
        assert registry["Name"] == Types.string()
        assert list(registry) == ["Name"]
        assert len(registry) == 1

    def test_shorthand_registration(self):
        registry = SchemaRegistry({"Age": {"type": "integer", "constraints": {"gt": 0}}})
        assert isinstance(registry["Age"], PrimitiveSpec)

    def test_replace(self):
        registry = SchemaRegistry({"Id": "integer"})
        registry.register("Id", "string")
        assert registry["Id"].type == "string"

    def test_missing(self):
        with pytest.raises(SchemaNotFoundError) as exc_info:
            SchemaRegistry().resolve("Nope")
        assert exc_info.value.identifier == "Nope"

    def test_missing_is_a_key_error(self):
        assert "Nope" not in SchemaRegistry()
        assert SchemaRegistry().get("Nope") is None

    def test_freeze(self):
        registry = SchemaRegistry({"Id": "integer"}).freeze()
        assert registry.frozen
        with pytest.raises(RegistryFrozenError):
            registry.register("Other", "string")


class TestResolveReference:
    """Test reference lookup in arbitrary mappings."""

    def test_no_registry(self):
        with pytest.raises(SchemaNotFoundError):
            resolve_reference(None, "User")

    def test_plain_dict(self):
        assert resolve_reference({"User": Types.string()}, "User") == Types.string()
