"""Fluent constructors for type specifications.

``Types`` is the programmatic replacement for a declarative schema DSL: each
constructor returns a frozen specification that can be refined with the fluent
methods every specification carries.

Example:
    >>> from typeshape.types import Types
    >>>
    >>> user = Types.object({
    ...     "name": Types.string().with_constraints(min_length=1),
    ...     "age": Types.integer().with_constraints(gt=0, lt=150),
    ...     "email": Types.string().with_constraints(format=r"^[^@]+@[^@]+$").optional(),
    ...     "friends": Types.array(Types.ref("User")).with_default([]),
    ... })
"""

from collections.abc import Iterable, Mapping
from typing import Any

from .models import (
    ArraySpec,
    BaseTypeSpec,
    CustomSpec,
    MapSpec,
    ObjectSpec,
    PrimitiveSpec,
    RefSpec,
    TupleSpec,
    UnionSpec,
    parse_type_spec,
)


class Types:
    """Namespace of type specification constructors.

    Nested arguments may be specifications or any shorthand accepted by
    ``parse_type_spec`` (``"string"``, ``"User"``, plain dictionaries).
    """

    @staticmethod
    def string() -> PrimitiveSpec:
        return PrimitiveSpec(type="string")

    @staticmethod
    def integer() -> PrimitiveSpec:
        return PrimitiveSpec(type="integer")

    @staticmethod
    def float() -> PrimitiveSpec:
        return PrimitiveSpec(type="float")

    @staticmethod
    def boolean() -> PrimitiveSpec:
        return PrimitiveSpec(type="boolean")

    @staticmethod
    def atom() -> PrimitiveSpec:
        return PrimitiveSpec(type="atom")

    @staticmethod
    def any() -> PrimitiveSpec:
        return PrimitiveSpec(type="any")

    @staticmethod
    def array(element: Any) -> ArraySpec:
        return ArraySpec(element=_spec(element))

    @staticmethod
    def map(key: Any, value: Any) -> MapSpec:
        return MapSpec(key=_spec(key), value=_spec(value))

    @staticmethod
    def union(members: Iterable[Any]) -> UnionSpec:
        return UnionSpec(members=tuple(_spec(member) for member in members))

    @staticmethod
    def object(properties: Mapping[str, Any]) -> ObjectSpec:
        return ObjectSpec(properties={name: _spec(spec) for name, spec in properties.items()})

    @staticmethod
    def ref(identifier: str) -> RefSpec:
        return RefSpec(ref=identifier)

    @staticmethod
    def tuple(elements: Iterable[Any]) -> TupleSpec:
        return TupleSpec(elements=tuple(_spec(element) for element in elements))

    @staticmethod
    def custom(type_: Any) -> CustomSpec:
        return CustomSpec(type=type_)


def _spec(value: Any) -> BaseTypeSpec:
    if isinstance(value, BaseTypeSpec):
        return value
    return parse_type_spec(value)
