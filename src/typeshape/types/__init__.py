"""typeshape type specifications.

- ``TypeSpec``: the closed, recursive specification variant
- ``Constraint``: named refinement attached to a specification
- ``Types``: fluent constructors
- ``parse_type_spec``: build a specification from plain data
"""

from .builders import Types
from .models import (
    CHECK_KINDS,
    METADATA_KINDS,
    PRIMITIVE_KINDS,
    ArraySpec,
    BaseTypeSpec,
    Constraint,
    CustomSpec,
    MapSpec,
    ObjectSpec,
    PrimitiveKind,
    PrimitiveSpec,
    RefSpec,
    TupleSpec,
    TypeSpec,
    UnionSpec,
    normalize_type,
    parse_type_spec,
)

__all__ = [
    # Specification models
    "TypeSpec",
    "BaseTypeSpec",
    "PrimitiveSpec",
    "ArraySpec",
    "MapSpec",
    "UnionSpec",
    "ObjectSpec",
    "RefSpec",
    "TupleSpec",
    "CustomSpec",
    "Constraint",
    "PrimitiveKind",
    # Kind tables
    "PRIMITIVE_KINDS",
    "CHECK_KINDS",
    "METADATA_KINDS",
    # Construction
    "Types",
    "normalize_type",
    "parse_type_spec",
]
