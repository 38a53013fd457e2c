"""Tests for typeshape.json_schema.computed module."""

from typeshape.json_schema import (
    COMPUTED_EXTENSION,
    extract_computed_field_info,
    has_computed_fields,
    remove_computed_fields,
    to_json_schema,
)
from typeshape.types import Types


def _order_schema():
    return to_json_schema(
        Types.object(
            {
                "quantity": Types.integer(),
                "price": Types.float(),
                "total": Types.float().computed("order_total").with_description("Line total"),
                "label": Types.string().computed(),
            }
        )
    )


class TestExtractComputedFieldInfo:
    """Test computed field discovery."""

    def test_extracts_fields_in_order(self):
        fields = extract_computed_field_info(_order_schema())
        assert [field.name for field in fields] == ["total", "label"]

        total = fields[0]
        assert total.function == "order_total"
        assert total.read_only is True
        assert total.description == "Line total"
        assert total.type_schema == {"type": "number"}

        assert fields[1].function is None

    def test_no_computed_fields(self, user_spec):
        schema = to_json_schema(user_spec)
        assert extract_computed_field_info(schema) == []
        assert not has_computed_fields(schema)
        assert has_computed_fields(_order_schema())

    def test_not_an_object_schema(self):
        assert extract_computed_field_info({"type": "string"}) == []

    def test_extension_without_read_only(self):
        schema = {"properties": {"x": {"type": "string", COMPUTED_EXTENSION: {}}}}
        [field] = extract_computed_field_info(schema)
        assert field.read_only is False


class TestRemoveComputedFields:
    """Test producing input-facing documents."""

    def test_removes_read_only_properties(self):
        schema = remove_computed_fields(_order_schema())
        assert list(schema["properties"]) == ["quantity", "price"]
        assert schema["required"] == ["quantity", "price"]

    def test_prunes_required(self):
        schema = {
            "type": "object",
            "properties": {"id": {"type": "integer", "readOnly": True}, "n": {"type": "string"}},
            "required": ["id", "n"],
        }
        assert remove_computed_fields(schema)["required"] == ["n"]

    def test_drops_empty_required(self):
        schema = {
            "type": "object",
            "properties": {"id": {"type": "integer", "readOnly": True}},
            "required": ["id"],
        }
        assert remove_computed_fields(schema) == {"type": "object", "properties": {}}

    def test_input_is_not_mutated(self):
        schema = _order_schema()
        remove_computed_fields(schema)
        assert "total" in schema["properties"]
