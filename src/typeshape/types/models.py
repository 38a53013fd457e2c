"""Pydantic models for typeshape type specifications.

A type specification (``TypeSpec``) is a closed, recursive, tagged variant.
The ``kind`` field is the discriminator:

- ``primitive``: string, integer, float, boolean, atom or any
- ``array``: homogeneous sequence of ``element``
- ``map``: key/value association of ``key`` to ``value``
- ``union``: ordered ``members``; the first member that validates wins
- ``object``: fixed-key record described by ``properties``
- ``ref``: named schema resolved through a registry; enables recursion
- ``tuple``: fixed-length positional sequence of ``elements``
- ``custom``: external object that renders its own JSON Schema

Every node carries an ordered tuple of ``Constraint`` objects and an optional
error-message override table.

Example:
    >>> from typeshape.types.models import parse_type_spec
    >>>
    >>> spec = parse_type_spec({
    ...     "kind": "object",
    ...     "properties": {
    ...         "name": {"type": "string", "constraints": {"min_length": 1}},
    ...         "tags": {"kind": "array", "element": "string"},
    ...         "parent": "Node",
    ...     },
    ... })
    >>> spec.properties["parent"].ref
    'Node'
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from typing import Annotated, Any, Literal, Self, Union

from pydantic import BeforeValidator, Discriminator, Field, TypeAdapter, model_validator

from typeshape.models import ShapeBaseModel

PrimitiveKind = Literal["string", "integer", "float", "boolean", "atom", "any"]

PRIMITIVE_KINDS: tuple[str, ...] = ("string", "integer", "float", "boolean", "atom", "any")

# Constraint kinds understood by the constraint engine
CHECK_KINDS: tuple[str, ...] = (
    "min_length",
    "max_length",
    "format",
    "choices",
    "gt",
    "gteq",
    "lt",
    "lteq",
    "min_items",
    "max_items",
    "size",
    "validator",
)

# Constraint kinds that only carry metadata for objects and schema rendering
METADATA_KINDS: tuple[str, ...] = ("required", "default", "computed")


class Constraint(ShapeBaseModel):
    """A named refinement attached to a type specification.

    Attributes:
        kind: Constraint name, e.g. ``min_length`` or ``gt``. Kinds that do not
            apply to the carrying specification are ignored.
        value: Kind-specific payload. ``format`` payloads are compiled
            regular expressions; plain strings are compiled on construction.

    Example:
        >>> Constraint(kind="format", value=r"^[a-z]+$").value.pattern
        '^[a-z]+$'
    """

    kind: str
    value: Any = None

    @model_validator(mode="before")
    @classmethod
    def compile_format(cls, data: Any) -> Any:
        """Accept ``(kind, value)`` pairs and compile string ``format`` patterns."""
        if isinstance(data, (tuple, list)) and len(data) == 2:
            data = {"kind": data[0], "value": data[1]}
        if isinstance(data, dict) and data.get("kind") == "format":
            pattern = data.get("value")
            if isinstance(pattern, str):
                data = {**data, "value": re.compile(pattern)}
        return data


def normalize_constraints(value: Any) -> list[Any]:
    """Turn the accepted constraint shorthands into a list.

    A mapping ``{kind: value}`` keeps its order; ``None`` means no constraints.
    """
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [{"kind": kind, "value": payload} for kind, payload in value.items()]
    return list(value)


def _as_constraints(items: Iterable[Any]) -> tuple[Constraint, ...]:
    return tuple(
        item if isinstance(item, Constraint) else Constraint.model_validate(item) for item in items
    )


class BaseTypeSpec(ShapeBaseModel):
    """Fields and fluent helpers shared by every type specification.

    Attributes:
        constraints: Ordered constraints; a later constraint of the same kind
            overrides an earlier one where only one value is meaningful.
        messages: Custom messages keyed by constraint kind or error code.
        message: Fallback custom message used for any error raised at this node.
        description: Free text rendered into JSON Schema.
    """

    constraints: Annotated[tuple[Constraint, ...], BeforeValidator(normalize_constraints)] = ()
    messages: dict[str, str] = Field(default_factory=dict)
    message: str | None = None
    description: str | None = None

    # Fluent builders; every call returns a new frozen specification

    def with_constraints(self, *constraints: Any, **named: Any) -> Self:
        """Append constraints given as ``Constraint`` objects, pairs or keywords.

        Example:
            >>> PrimitiveSpec(type="string").with_constraints(min_length=3, max_length=10)
        """
        added = _as_constraints([*constraints, *normalize_constraints(named)])
        return self.model_copy(update={"constraints": self.constraints + added})

    def with_error_message(self, kind: str, message: str) -> Self:
        return self.model_copy(update={"messages": {**self.messages, kind: message}})

    def with_error_messages(self, messages: Mapping[str, str]) -> Self:
        return self.model_copy(update={"messages": {**self.messages, **dict(messages)}})

    def with_default_message(self, message: str) -> Self:
        return self.model_copy(update={"message": message})

    def with_validator(self, validator: Callable[[Any], Any]) -> Self:
        """Append a custom check.

        The callable receives the value and returns the (possibly transformed)
        value, or raises ``ValueError`` with the error message.
        """
        return self.with_constraints(Constraint(kind="validator", value=validator))

    def with_description(self, description: str) -> Self:
        return self.model_copy(update={"description": description})

    def optional(self) -> Self:
        return self.with_constraints(Constraint(kind="required", value=False))

    def required(self) -> Self:
        return self.with_constraints(Constraint(kind="required", value=True))

    def with_default(self, value: Any) -> Self:
        return self.with_constraints(Constraint(kind="default", value=value))

    def computed(self, function: str | None = None) -> Self:
        """Mark an object field as computed (output-only, rendered read-only)."""
        return self.with_constraints(Constraint(kind="computed", value=function or True))

    # Constraint queries

    def constraint_value(self, kind: str, default: Any = None) -> Any:
        """Return the payload of the last constraint of ``kind``."""
        for constraint in reversed(self.constraints):
            if constraint.kind == kind:
                return constraint.value
        return default

    def has_constraint(self, kind: str) -> bool:
        return any(constraint.kind == kind for constraint in self.constraints)

    @property
    def has_default(self) -> bool:
        return self.has_constraint("default")

    @property
    def is_computed(self) -> bool:
        return bool(self.constraint_value("computed", False))

    @property
    def is_required(self) -> bool:
        """Whether an object field with this specification must be present."""
        if self.has_default or self.is_computed:
            return False
        return bool(self.constraint_value("required", True))


class PrimitiveSpec(BaseTypeSpec):
    kind: Literal["primitive"] = "primitive"
    type: PrimitiveKind


class ArraySpec(BaseTypeSpec):
    kind: Literal["array"] = "array"
    element: TypeSpec


class MapSpec(BaseTypeSpec):
    kind: Literal["map"] = "map"
    key: TypeSpec
    value: TypeSpec


class UnionSpec(BaseTypeSpec):
    kind: Literal["union"] = "union"
    members: tuple[TypeSpec, ...]


class ObjectSpec(BaseTypeSpec):
    kind: Literal["object"] = "object"
    properties: dict[str, TypeSpec] = Field(default_factory=dict)

    @property
    def required_fields(self) -> list[str]:
        return [name for name, spec in self.properties.items() if spec.is_required]


class RefSpec(BaseTypeSpec):
    """Reference to a named schema.

    The identifier may be hierarchical (``billing.Invoice``); JSON Schema
    definitions are keyed by its last segment.
    """

    kind: Literal["ref"] = "ref"
    ref: str


class TupleSpec(BaseTypeSpec):
    kind: Literal["tuple"] = "tuple"
    elements: tuple[TypeSpec, ...]


class CustomSpec(BaseTypeSpec):
    """Pointer to an external type that renders its own JSON Schema.

    The object must expose ``json_schema() -> dict``; it may also expose
    ``validate(value)`` returning the validated value or raising ``ValueError``.
    """

    kind: Literal["custom"] = "custom"
    type: Any


def normalize_type(value: Any) -> Any:
    """Expand shorthand type notation before model validation.

    - ``"string"`` (any primitive name) becomes a primitive specification
    - any other bare string becomes a reference
    - a mapping with a primitive ``type`` and no ``kind`` becomes a primitive
    - an object exposing ``json_schema`` becomes a custom specification
    """
    if isinstance(value, str):
        if value in PRIMITIVE_KINDS:
            return {"kind": "primitive", "type": value}
        return {"kind": "ref", "ref": value}
    if isinstance(value, Mapping):
        if "kind" not in value and value.get("type") in PRIMITIVE_KINDS:
            return {**value, "kind": "primitive"}
        return value
    if not isinstance(value, BaseTypeSpec) and hasattr(value, "json_schema"):
        return {"kind": "custom", "type": value}
    return value


TypeSpec = Annotated[
    Union[
        PrimitiveSpec,
        ArraySpec,
        MapSpec,
        UnionSpec,
        ObjectSpec,
        RefSpec,
        TupleSpec,
        CustomSpec,
    ],
    Discriminator("kind"),
    BeforeValidator(normalize_type),
]


# Update forward references
PrimitiveSpec.model_rebuild()
ArraySpec.model_rebuild()
MapSpec.model_rebuild()
UnionSpec.model_rebuild()
ObjectSpec.model_rebuild()
RefSpec.model_rebuild()
TupleSpec.model_rebuild()
CustomSpec.model_rebuild()

_TYPE_SPEC_ADAPTER: TypeAdapter[Any] = TypeAdapter(TypeSpec)


def parse_type_spec(data: Any) -> BaseTypeSpec:
    """Build a type specification from plain data (as loaded from YAML/JSON).

    Raises:
        pydantic.ValidationError: If the data does not describe a valid specification.
    """
    return _TYPE_SPEC_ADAPTER.validate_python(data)  # type: ignore[no-any-return]
