"""Tests for typeshape.json_schema.type_mapper module."""

import pytest

from typeshape.errors import InvalidCustomTypeError, ReferenceStoreRequiredError
from typeshape.json_schema import COMPUTED_EXTENSION, ReferenceStore, to_json_schema
from typeshape.types import Types


class TestPrimitives:
    """Test primitive mapping."""

    @pytest.mark.parametrize(
        "spec,expected",
        [
            (Types.string(), {"type": "string"}),
            (Types.integer(), {"type": "integer"}),
            (Types.float(), {"type": "number"}),
            (Types.boolean(), {"type": "boolean"}),
            (
                Types.atom(),
                {"type": "string", "description": "Atom value (represented as string in JSON)"},
            ),
            (Types.any(), {}),
        ],
    )
    def test_primitive(self, spec, expected):
        assert to_json_schema(spec) == expected

    def test_string_constraints(self):
        spec = Types.string().with_constraints(min_length=1, max_length=20, format=r"^[a-z]+$")
        assert to_json_schema(spec) == {
            "type": "string",
            "minLength": 1,
            "maxLength": 20,
            "pattern": "^[a-z]+$",
        }

    def test_numeric_constraints(self):
        spec = Types.integer().with_constraints(gt=0, lteq=150)
        assert to_json_schema(spec) == {"type": "integer", "exclusiveMinimum": 0, "maximum": 150}
        spec = Types.float().with_constraints(gteq=0.5, lt=1.0)
        assert to_json_schema(spec) == {"type": "number", "minimum": 0.5, "exclusiveMaximum": 1.0}

    def test_choices_are_not_rendered(self):
        assert to_json_schema(Types.string().with_constraints(choices=["a", "b"])) == {
            "type": "string"
        }

    def test_inapplicable_constraints_are_not_rendered(self):
        assert to_json_schema(Types.boolean().with_constraints(min_length=2)) == {
            "type": "boolean"
        }

    def test_description(self):
        assert to_json_schema(Types.string().with_description("Full name")) == {
            "type": "string",
            "description": "Full name",
        }


class TestContainers:
    """Test container mapping."""

    def test_array_with_item_bounds(self):
        spec = Types.array(Types.string()).with_constraints(min_items=1, max_items=5)
        assert to_json_schema(spec) == {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 1,
            "maxItems": 5,
        }

    def test_map(self):
        spec = Types.map(Types.string(), Types.integer()).with_constraints(size=2)
        assert to_json_schema(spec) == {
            "type": "object",
            "additionalProperties": {"type": "integer"},
            "minProperties": 2,
            "maxProperties": 2,
        }

    def test_union_keeps_order_and_duplicates(self):
        spec = Types.union([Types.integer(), Types.string(), Types.integer()])
        assert to_json_schema(spec) == {
            "oneOf": [{"type": "integer"}, {"type": "string"}, {"type": "integer"}]
        }

    def test_tuple(self):
        spec = Types.tuple([Types.string(), Types.float()])
        assert to_json_schema(spec) == {
            "type": "array",
            "items": False,
            "prefixItems": [{"type": "string"}, {"type": "number"}],
            "minItems": 2,
            "maxItems": 2,
        }


class TestObjects:
    """Test object mapping."""

    def test_properties_and_required(self, user_spec):
        schema = to_json_schema(user_spec)
        assert schema == {
            "type": "object",
            "properties": {
                "name": {"type": "string", "minLength": 1},
                "age": {"type": "integer", "exclusiveMinimum": 0},
            },
            "required": ["name", "age"],
        }
        assert list(schema["properties"]) == ["name", "age"]

    def test_optional_fields_and_defaults(self):
        spec = Types.object(
            {
                "name": Types.string(),
                "nickname": Types.string().optional(),
                "tags": Types.array(Types.string()).with_default([]),
            }
        )
        schema = to_json_schema(spec)
        assert schema["required"] == ["name"]
        assert schema["properties"]["tags"]["default"] == []

    def test_empty_required_when_everything_is_optional(self):
        spec = Types.object({"nickname": Types.string().optional()})
        assert to_json_schema(spec) == {
            "type": "object",
            "properties": {"nickname": {"type": "string"}},
            "required": [],
        }
        assert to_json_schema(Types.object({}))["required"] == []

    def test_additional_properties(self, user_spec):
        assert to_json_schema(user_spec, additional_properties=False)["additionalProperties"] is False

    def test_computed_field(self):
        spec = Types.object(
            {"first": Types.string(), "full_name": Types.string().computed("full_name")}
        )
        schema = to_json_schema(spec)
        assert schema["required"] == ["first"]
        assert schema["properties"]["full_name"] == {
            "type": "string",
            "readOnly": True,
            COMPUTED_EXTENSION: {"function": "full_name"},
        }


class TestReferences:
    """Test reference and custom type mapping."""

    def test_reference_requires_store(self):
        with pytest.raises(ReferenceStoreRequiredError, match="User"):
            to_json_schema(Types.ref("User"))

    def test_reference_is_recorded(self):
        store = ReferenceStore()
        schema = to_json_schema(Types.array(Types.ref("billing.Invoice")), store)
        assert schema == {"type": "array", "items": {"$ref": "#/definitions/Invoice"}}
        assert store.get_references() == ["billing.Invoice"]

    def test_custom_type(self):
        class Money:
            @staticmethod
            def json_schema():
                return {"type": "string", "pattern": r"^\d+\.\d{2}$"}

        assert to_json_schema(Types.custom(Money).with_description("Amount")) == {
            "type": "string",
            "pattern": r"^\d+\.\d{2}$",
            "description": "Amount",
        }

    def test_invalid_custom_type(self):
        with pytest.raises(InvalidCustomTypeError):
            to_json_schema(Types.custom(object()))

    def test_custom_type_must_return_dict(self):
        class Broken:
            @staticmethod
            def json_schema():
                return "string"

        with pytest.raises(InvalidCustomTypeError, match="expected dict"):
            to_json_schema(Types.custom(Broken))
