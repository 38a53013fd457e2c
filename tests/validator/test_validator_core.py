"""Tests for typeshape.validator.core module."""

import pytest

from typeshape.config import ValidationPolicy
from typeshape.errors import SchemaNotFoundError, ValidationError
from typeshape.types import Types
from typeshape.validator import ErrorDetail, Validator, validate


def _errors(result):
    return [(error.path, error.code) for error in result.errors]


class TestPrimitives:
    """Test primitive validation."""

    def test_integer_range(self):
        spec = Types.integer().with_constraints(gt=0, lt=150)

        result = validate(spec, 25)
        assert result.ok
        assert result.value == 25

        result = validate(spec, -5)
        assert not result.ok
        assert result.value is None
        assert _errors(result) == [((), "gt")]

    def test_type_mismatch_without_coercion(self):
        result = validate(Types.integer(), "42")
        assert _errors(result) == [((), "type")]
        assert result.errors[0].message == "expected integer, got string"

    def test_coercion(self):
        policy = ValidationPolicy(coercion="safe")
        assert validate(Types.integer(), "42", policy).value == 42
        assert validate(Types.boolean(), "yes", policy).value is True

    def test_failed_coercion(self):
        result = validate(Types.integer(), "abc", ValidationPolicy(coercion="safe"))
        assert _errors(result) == [((), "coercion")]

    def test_coercion_runs_before_constraints(self):
        spec = Types.integer().with_constraints(gt=100)
        result = validate(spec, "42", ValidationPolicy(coercion="safe"))
        assert _errors(result) == [((), "gt")]

    def test_float_accepts_integer(self):
        assert validate(Types.float(), 3).value == 3

    def test_boolean_is_not_integer(self):
        assert _errors(validate(Types.integer(), True)) == [((), "type")]

    def test_message_override(self):
        spec = Types.string().with_constraints(min_length=3).with_error_message(
            "min_length", "name is too short"
        )
        result = validate(spec, "ab")
        assert len(result.errors) == 1
        assert result.errors[0].message == "name is too short"

    def test_default_message_override(self):
        spec = Types.integer().with_default_message("age must be a positive number")
        result = validate(spec, "x")
        assert result.errors[0].message == "age must be a positive number"


class TestContainers:
    """Test arrays, maps and tuples."""

    def test_array_element_error_path(self):
        result = validate(Types.array(Types.string()), ["a", 1, "c"])
        assert _errors(result) == [((1,), "type")]

    def test_array_collects_every_element_error(self):
        result = validate(Types.array(Types.integer()), ["a", 1, "b"])
        assert _errors(result) == [((0,), "type"), ((2,), "type")]

    def test_array_constraints(self):
        spec = Types.array(Types.integer()).with_constraints(min_items=2)
        assert _errors(validate(spec, [1])) == [((), "min_items")]

    def test_array_constraints_with_element_errors(self):
        spec = Types.array(Types.integer()).with_constraints(min_items=3)
        assert _errors(validate(spec, ["a"])) == [((0,), "type"), ((), "min_items")]

    def test_array_accepts_tuple_but_not_string(self):
        assert validate(Types.array(Types.string()), ("a", "b")).value == ["a", "b"]
        assert _errors(validate(Types.array(Types.string()), "ab")) == [((), "type")]

    def test_map_paths(self):
        spec = Types.map(Types.string(), Types.integer())
        result = validate(spec, {"a": 1, "b": "x"})
        assert _errors(result) == [(("b",), "type")]

    def test_map_key_errors(self):
        spec = Types.map(Types.string().with_constraints(min_length=2), Types.integer())
        result = validate(spec, {"a": 1})
        assert _errors(result) == [(("a",), "min_length")]

    def test_tuple(self):
        spec = Types.tuple([Types.string(), Types.integer()])
        assert validate(spec, ["a", 1]).value == ("a", 1)
        assert _errors(validate(spec, ("a", "b"))) == [((1,), "type")]

    def test_tuple_length(self):
        spec = Types.tuple([Types.string(), Types.integer()])
        assert _errors(validate(spec, ["a"])) == [((), "type")]

    def test_container_validator_skipped_on_child_errors(self):
        calls = []

        def record(value):
            calls.append(value)
            return value

        spec = Types.array(Types.integer()).with_validator(record)
        validate(spec, ["x"])
        assert calls == []
        validate(spec, [1])
        assert calls == [[1]]


class TestObjects:
    """Test object validation."""

    def test_collects_every_field_error(self, user_spec):
        result = validate(user_spec, {"name": "", "age": -1})
        assert _errors(result) == [(("name",), "min_length"), (("age",), "gt")]

    def test_missing_required_field(self, user_spec):
        result = validate(user_spec, {"name": "Ada"})
        assert _errors(result) == [(("age",), "required")]

    def test_none_counts_as_missing(self, user_spec):
        result = validate(user_spec, {"name": "Ada", "age": None})
        assert _errors(result) == [(("age",), "required")]

    def test_defaults_are_filled_and_copied(self):
        spec = Types.object({"tags": Types.array(Types.string()).with_default([])})
        first = validate(spec, {}).value
        first["tags"].append("x")
        assert validate(spec, {}).value == {"tags": []}

    def test_optional_and_computed_fields(self):
        spec = Types.object(
            {
                "name": Types.string(),
                "nickname": Types.string().optional(),
                "display": Types.string().computed("display_name"),
            }
        )
        assert validate(spec, {"name": "Ada"}).value == {"name": "Ada"}

    def test_extra_keys_allowed_by_default(self, user_spec):
        result = validate(user_spec, {"name": "Ada", "age": 36, "role": "admin"})
        assert result.value == {"name": "Ada", "age": 36, "role": "admin"}

    def test_extra_keys_ignored(self, user_spec):
        result = validate(
            user_spec, {"name": "Ada", "age": 36, "role": "admin"}, ValidationPolicy(extra="ignore")
        )
        assert result.value == {"name": "Ada", "age": 36}

    def test_extra_keys_forbidden(self, user_spec):
        result = validate(
            user_spec,
            {"name": "Ada", "age": 36, "role": "admin", "team": "x"},
            ValidationPolicy.preset("strict"),
        )
        assert _errors(result) == [
            (("role",), "additional_properties"),
            (("team",), "additional_properties"),
        ]

    def test_not_a_mapping(self, user_spec):
        assert _errors(validate(user_spec, ["Ada", 36])) == [((), "type")]

    def test_nested_coercion(self, user_spec):
        result = validate(user_spec, {"name": "Ada", "age": "36"}, ValidationPolicy.preset("api"))
        assert result.value == {"name": "Ada", "age": 36}


class TestUnions:
    """Test first-match union semantics."""

    def test_first_member_wins(self):
        spec = Types.union([Types.integer(), Types.string()])
        policy = ValidationPolicy(coercion="safe")
        assert validate(spec, 5, policy).value == 5
        assert validate(spec, "5", policy).value == 5
        assert validate(spec, "5").value == "5"

    def test_last_member_errors_reported(self):
        spec = Types.union(
            [Types.integer().with_constraints(gt=10), Types.string().with_constraints(min_length=5)]
        )
        assert _errors(validate(spec, 3)) == [((), "type")]

    def test_all_member_errors_reported(self):
        spec = Types.union(
            [Types.integer().with_constraints(gt=10), Types.string().with_constraints(min_length=5)]
        )
        result = validate(spec, 3, ValidationPolicy(union_errors="all"))
        assert _errors(result) == [((), "gt"), ((), "type")]

    def test_empty_union(self):
        assert _errors(validate(Types.union([]), 1)) == [((), "union")]


class TestReferences:
    """Test reference resolution through a registry."""

    def test_recursive_tree(self, tree_registry):
        result = validate(
            Types.ref("Tree"),
            {"value": 1, "children": [{"value": 2}, {"value": 3, "children": []}]},
            registry=tree_registry,
        )
        assert result.ok
        assert result.value["children"][0] == {"value": 2, "children": []}

    def test_error_path_through_recursion(self, tree_registry):
        result = validate(
            Types.ref("Tree"),
            {"value": 1, "children": [{"value": 2}, {"value": "x"}]},
            registry=tree_registry,
        )
        assert _errors(result) == [(("children", 1, "value"), "type")]

    def test_missing_reference(self):
        with pytest.raises(SchemaNotFoundError, match="Missing"):
            validate(Types.ref("Missing"), {}, registry={})

    def test_plain_mapping_registry(self):
        assert validate(Types.ref("Age"), 3, registry={"Age": "integer"}).value == 3


class TestCustomTypes:
    """Test custom type delegation."""

    def test_custom_validate(self):
        class Even:
            @staticmethod
            def json_schema():
                return {"type": "integer", "multipleOf": 2}

            @staticmethod
            def validate(value):
                if not isinstance(value, int) or value % 2:
                    raise ValueError("must be an even integer")
                return value

        spec = Types.custom(Even)
        assert validate(spec, 4).value == 4
        result = validate(spec, 3)
        assert [(e.code, e.message) for e in result.errors] == [
            ("custom_validation", "must be an even integer")
        ]

    def test_custom_without_validate_accepts(self):
        class Anything:
            @staticmethod
            def json_schema():
                return {}

        assert validate(Types.custom(Anything), object).value is object


class TestValidator:
    """Test the Validator class and results."""

    def test_deterministic(self, user_spec):
        validator = Validator()
        value = {"name": "", "age": -1, "extra": True}
        assert validator.validate(user_spec, value) == validator.validate(user_spec, value)

    def test_unwrap(self, user_spec):
        result = validate(user_spec, {"name": "", "age": -1})
        with pytest.raises(ValidationError) as exc_info:
            result.unwrap()
        assert len(exc_info.value.errors) == 2
        assert "age: must be greater than 0" in str(exc_info.value)

    def test_unwrap_ok(self):
        assert validate(Types.string(), "x").unwrap() == "x"

    def test_error_format(self):
        nested = ErrorDetail(path=("users", 0, "age"), code="gt", message="must be greater than 0")
        assert nested.format() == "users.0.age: must be greater than 0"
        assert ErrorDetail(code="type", message="expected string").format() == "expected string"

    def test_root_error_has_no_path_prefix(self):
        result = validate(Types.string(), 5)
        with pytest.raises(ValidationError) as exc_info:
            result.unwrap()
        assert not str(exc_info.value).startswith(":")
        assert str(exc_info.value) == result.errors[0].message
