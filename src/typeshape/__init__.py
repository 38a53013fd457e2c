"""typeshape - runtime validation and JSON Schema generation for type specifications.

## Core Modules

### Type specifications (`typeshape.types`)
The closed `TypeSpec` variant, constraints and the fluent `Types` builders.

### Validation (`typeshape.validator`)
Recursive validator with coercion, constraint checks and path-qualified errors.

### JSON Schema (`typeshape.json_schema`)
Schema rendering, reference store, document generation and resolution for
API clients and LLM structured-output modes.

## Quick Start

```python
from typeshape import SchemaRegistry, Types, generate_schema, validate

registry = SchemaRegistry({
    "User": Types.object({
        "name": Types.string().with_constraints(min_length=1),
        "age": Types.integer().with_constraints(gt=0, lt=150),
        "friends": Types.array(Types.ref("User")).with_default([]),
    })
}).freeze()

result = validate(Types.ref("User"), {"name": "Ada", "age": 36}, registry=registry)
assert result.ok

doc = generate_schema(Types.ref("User"), registry, resolve_refs=True)
```
"""

from typeshape.config import CoercionLevel, ExtraPolicy, ValidationPolicy
from typeshape.errors import (
    InvalidCustomTypeError,
    ReferenceStoreRequiredError,
    RegistryFrozenError,
    SchemaNotFoundError,
    ShapeError,
    StoreReleasedError,
    ValidationError,
)
from typeshape.json_schema import (
    ReferenceStore,
    SchemaGenerator,
    enforce_structured_output,
    flatten_schema,
    generate_schema,
    optimize_for_llm,
    resolve_references,
    to_json_schema,
)
from typeshape.registry import SchemaRegistry
from typeshape.types import Constraint, Types, TypeSpec, parse_type_spec
from typeshape.validator import ErrorDetail, ValidationResult, Validator, validate

__all__ = [
    # Types
    "TypeSpec",
    "Constraint",
    "Types",
    "parse_type_spec",
    "SchemaRegistry",
    # Validation
    "Validator",
    "validate",
    "ValidationResult",
    "ErrorDetail",
    "ValidationPolicy",
    "ExtraPolicy",
    "CoercionLevel",
    # JSON Schema
    "to_json_schema",
    "ReferenceStore",
    "SchemaGenerator",
    "generate_schema",
    "resolve_references",
    "flatten_schema",
    "enforce_structured_output",
    "optimize_for_llm",
    # Errors
    "ValidationError",
    "ShapeError",
    "SchemaNotFoundError",
    "RegistryFrozenError",
    "ReferenceStoreRequiredError",
    "StoreReleasedError",
    "InvalidCustomTypeError",
]
