"""typeshape JSON Schema - rendering, generation and resolution.

## Key Components

- `to_json_schema`: Render one type specification as a schema fragment
- `ReferenceStore`: Per-pass record of referenced identifiers and definitions
- `SchemaGenerator` / `generate_schema`: Complete documents with `definitions`
- `resolve_references`, `flatten_schema`: Inline local `$ref` pointers
- `enforce_structured_output`, `optimize_for_llm`: Provider post-processing
- `extract_computed_field_info`, `has_computed_fields`, `remove_computed_fields`
"""

from .computed import (
    ComputedFieldInfo,
    extract_computed_field_info,
    has_computed_fields,
    remove_computed_fields,
)
from .generator import SchemaGenerator, check_schema, generate_schema
from .reference_store import ReferenceStore
from .resolver import (
    UNSUPPORTED_FORMATS,
    Provider,
    enforce_structured_output,
    flatten_schema,
    optimize_for_llm,
    resolve_references,
)
from .type_mapper import COMPUTED_EXTENSION, to_json_schema

__all__ = [
    # Rendering
    "to_json_schema",
    "COMPUTED_EXTENSION",
    "ReferenceStore",
    # Documents
    "SchemaGenerator",
    "generate_schema",
    "check_schema",
    # Resolution
    "resolve_references",
    "flatten_schema",
    "enforce_structured_output",
    "optimize_for_llm",
    "Provider",
    "UNSUPPORTED_FORMATS",
    # Computed fields
    "ComputedFieldInfo",
    "extract_computed_field_info",
    "has_computed_fields",
    "remove_computed_fields",
]
