"""Render type specifications as JSON Schema fragments.

The mapping is a pure function of the specification, apart from references:
a ``ref`` specification records its identifier in the caller's
``ReferenceStore`` and renders as a local ``$ref`` pointer.

Example:
    >>> from typeshape.types import Types
    >>> from typeshape.json_schema import to_json_schema
    >>>
    >>> to_json_schema(Types.array(Types.string()).with_constraints(min_items=1, max_items=5))
    {'type': 'array', 'items': {'type': 'string'}, 'minItems': 1, 'maxItems': 5}
"""

import copy
import re
from typing import Any

from typeshape.errors import InvalidCustomTypeError, ReferenceStoreRequiredError
from typeshape.types.models import (
    ArraySpec,
    BaseTypeSpec,
    CustomSpec,
    MapSpec,
    ObjectSpec,
    PrimitiveSpec,
    RefSpec,
    TupleSpec,
    UnionSpec,
)
from typeshape.validator.constraints import is_applicable

from .reference_store import ReferenceStore

COMPUTED_EXTENSION = "x-typeshape-computed"

ATOM_DESCRIPTION = "Atom value (represented as string in JSON)"

_PRIMITIVES: dict[str, dict[str, Any]] = {
    "string": {"type": "string"},
    "integer": {"type": "integer"},
    "float": {"type": "number"},
    "boolean": {"type": "boolean"},
    "atom": {"type": "string", "description": ATOM_DESCRIPTION},
    "any": {},
}

# Constraint kind -> JSON Schema keyword, per carrying kind
_KEYWORDS: dict[str, dict[str, str]] = {
    "min_length": {"string": "minLength", "array": "minItems"},
    "max_length": {"string": "maxLength", "array": "maxItems"},
    "min_items": {"array": "minItems"},
    "max_items": {"array": "maxItems"},
    "gt": {"integer": "exclusiveMinimum", "float": "exclusiveMinimum"},
    "gteq": {"integer": "minimum", "float": "minimum"},
    "lt": {"integer": "exclusiveMaximum", "float": "exclusiveMaximum"},
    "lteq": {"integer": "maximum", "float": "maximum"},
    "format": {"string": "pattern", "any": "pattern"},
}


def to_json_schema(
    spec: BaseTypeSpec,
    store: ReferenceStore | None = None,
    *,
    additional_properties: bool | None = None,
) -> dict[str, Any]:
    """Render ``spec`` as a JSON Schema fragment.

    Args:
        spec: Type specification to render
        store: Reference store receiving every referenced identifier; required
            as soon as the specification contains a ``ref``
        additional_properties: When set, emitted as ``additionalProperties`` on
            every ``object`` specification

    Returns:
        A new JSON Schema dictionary

    Raises:
        ReferenceStoreRequiredError: If a reference is rendered without a store
        InvalidCustomTypeError: If a custom type cannot render itself
    """
    return _SchemaMapper(store, additional_properties).render(spec)


class _SchemaMapper:
    def __init__(self, store: ReferenceStore | None, additional_properties: bool | None):
        self.store = store
        self.additional_properties = additional_properties

    def render(self, spec: BaseTypeSpec) -> dict[str, Any]:
        kind = spec.kind  # type: ignore[attr-defined]
        if kind == "primitive":
            schema = copy.deepcopy(_PRIMITIVES[spec.type])  # type: ignore[attr-defined]
            return self._decorate(spec, schema, spec.type)  # type: ignore[attr-defined]
        if kind == "array":
            return self._decorate(spec, self._array(spec), "array")  # type: ignore[arg-type]
        if kind == "map":
            return self._decorate(spec, self._map(spec), "map")  # type: ignore[arg-type]
        if kind == "union":
            return self._decorate(spec, self._union(spec), "union")  # type: ignore[arg-type]
        if kind == "object":
            return self._decorate(spec, self._object(spec), "object")  # type: ignore[arg-type]
        if kind == "ref":
            return self._decorate(spec, self._ref(spec), "ref")  # type: ignore[arg-type]
        if kind == "tuple":
            return self._decorate(spec, self._tuple(spec), "tuple")  # type: ignore[arg-type]
        if kind == "custom":
            return self._decorate(spec, self._custom(spec), "custom")  # type: ignore[arg-type]
        raise TypeError(f"Unsupported type specification: {spec!r}")

    def _array(self, spec: ArraySpec) -> dict[str, Any]:
        return {"type": "array", "items": self.render(spec.element)}

    def _map(self, spec: MapSpec) -> dict[str, Any]:
        # JSON object keys are always strings; only the value type is described
        return {"type": "object", "additionalProperties": self.render(spec.value)}

    def _union(self, spec: UnionSpec) -> dict[str, Any]:
        return {"oneOf": [self.render(member) for member in spec.members]}

    def _tuple(self, spec: TupleSpec) -> dict[str, Any]:
        return {
            "type": "array",
            "items": False,
            "prefixItems": [self.render(element) for element in spec.elements],
            "minItems": len(spec.elements),
            "maxItems": len(spec.elements),
        }

    def _object(self, spec: ObjectSpec) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {name: self.render(field) for name, field in spec.properties.items()},
        }
        schema["required"] = spec.required_fields
        if self.additional_properties is not None:
            schema["additionalProperties"] = self.additional_properties
        return schema

    def _ref(self, spec: RefSpec) -> dict[str, Any]:
        if self.store is None:
            raise ReferenceStoreRequiredError(
                f"Schema reference '{spec.ref}' requires a reference store"
            )
        self.store.add_reference(spec.ref)
        return {"$ref": ReferenceStore.ref_path(spec.ref)}

    def _custom(self, spec: CustomSpec) -> dict[str, Any]:
        render = getattr(spec.type, "json_schema", None)
        if not callable(render):
            raise InvalidCustomTypeError(f"{spec.type!r} is not a valid custom type")
        schema = render()
        if not isinstance(schema, dict):
            raise InvalidCustomTypeError(
                f"{spec.type!r}.json_schema() returned {type(schema).__name__}, expected dict"
            )
        return copy.deepcopy(schema)

    def _decorate(self, spec: BaseTypeSpec, schema: dict[str, Any], kind: str) -> dict[str, Any]:
        for constraint in spec.constraints:
            keyword = _KEYWORDS.get(constraint.kind, {}).get(kind)
            if keyword is None or not is_applicable(constraint.kind, kind):
                continue
            value = constraint.value
            if isinstance(value, re.Pattern):
                value = value.pattern
            schema[keyword] = value

        if kind == "map" and is_applicable("size", kind) and spec.has_constraint("size"):
            size = spec.constraint_value("size")
            schema["minProperties"] = size
            schema["maxProperties"] = size

        if spec.description is not None:
            schema["description"] = spec.description
        if spec.has_default:
            schema["default"] = copy.deepcopy(spec.constraint_value("default"))
        if spec.is_computed:
            schema["readOnly"] = True
            function = spec.constraint_value("computed")
            schema[COMPUTED_EXTENSION] = {"function": function} if isinstance(function, str) else {}
        return schema
