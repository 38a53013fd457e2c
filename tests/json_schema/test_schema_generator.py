"""Tests for typeshape.json_schema.generator module."""

import jsonschema
import pytest

from typeshape.errors import SchemaNotFoundError
from typeshape.json_schema import SchemaGenerator, check_schema, generate_schema
from typeshape.registry import SchemaRegistry
from typeshape.types import Types


@pytest.fixture
def billing_registry():
    return SchemaRegistry(
        {
            "billing.Address": Types.object({"street": Types.string(), "city": Types.string()}),
            "billing.Customer": Types.object(
                {"name": Types.string(), "address": Types.ref("billing.Address")}
            ),
            "billing.Invoice": Types.object(
                {
                    "customer": Types.ref("billing.Customer"),
                    "lines": Types.array(Types.ref("billing.Line")).with_constraints(min_items=1),
                }
            ),
            "billing.Line": Types.object(
                {"sku": Types.string(), "amount": Types.float().with_constraints(gt=0)}
            ),
        }
    ).freeze()


class TestSchemaGenerator:
    """Test document generation."""

    def test_no_references(self, user_spec):
        doc = generate_schema(user_spec, title="User")
        assert doc["title"] == "User"
        assert "definitions" not in doc

    def test_transitive_references(self, billing_registry):
        doc = SchemaGenerator(billing_registry).generate(Types.ref("billing.Invoice"))
        assert doc["$ref"] == "#/definitions/Invoice"
        assert sorted(doc["definitions"]) == ["Address", "Customer", "Invoice", "Line"]
        assert doc["definitions"]["Customer"]["properties"]["address"] == {
            "$ref": "#/definitions/Address"
        }

    def test_recursive_reference_terminates(self, tree_registry):
        doc = generate_schema(Types.ref("Tree"), tree_registry)
        assert list(doc["definitions"]) == ["Tree"]
        assert doc["definitions"]["Tree"]["properties"]["children"] == {
            "type": "array",
            "items": {"$ref": "#/definitions/Tree"},
            "default": [],
        }

    def test_resolve_refs(self, billing_registry):
        doc = generate_schema(
            Types.ref("billing.Customer"), billing_registry, resolve_refs=True
        )
        assert "definitions" not in doc
        assert doc["properties"]["address"]["properties"]["city"] == {"type": "string"}

    def test_description_and_additional_properties(self, user_spec):
        doc = SchemaGenerator(additional_properties=False).generate(
            user_spec, description="A user"
        )
        assert doc["description"] == "A user"
        assert doc["additionalProperties"] is False

    def test_missing_reference(self):
        with pytest.raises(SchemaNotFoundError):
            generate_schema(Types.ref("Ghost"), SchemaRegistry())

    def test_generated_document_validates_data(self, billing_registry):
        doc = generate_schema(Types.ref("billing.Invoice"), billing_registry)
        invoice = {
            "customer": {"name": "Ada", "address": {"street": "Main", "city": "London"}},
            "lines": [{"sku": "A-1", "amount": 9.5}],
        }
        jsonschema.validate(invoice, doc)
        with pytest.raises(jsonschema.ValidationError):
            jsonschema.validate({**invoice, "lines": []}, doc)


class TestGenerateBatch:
    """Test concurrent batch generation."""

    def test_one_definition_per_identifier(self, billing_registry):
        generator = SchemaGenerator(billing_registry)
        doc = generator.generate_batch(
            {
                "Invoice": billing_registry["billing.Invoice"],
                "Customer": billing_registry["billing.Customer"],
                "Line": billing_registry["billing.Line"],
            },
            max_workers=4,
        )
        assert sorted(doc["definitions"]) == ["Address", "Customer", "Invoice", "Line"]
        assert doc["definitions"]["Customer"]["type"] == "object"

    def test_errors_propagate(self):
        with pytest.raises(SchemaNotFoundError):
            SchemaGenerator(SchemaRegistry()).generate_batch({"A": Types.ref("Ghost")})


class TestCheckSchema:
    """Test the meta-schema check."""

    def test_generated_documents_are_valid(self, tree_registry):
        check_schema(generate_schema(Types.ref("Tree"), tree_registry))

    def test_invalid_document(self):
        with pytest.raises(ValueError, match="Invalid JSON Schema"):
            check_schema({"type": "array", "minItems": -1})
