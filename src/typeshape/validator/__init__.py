"""typeshape validator - runtime validation of values against type specifications.

## Key Components

- `Validator`: Recursive validation engine, one instance per registry and policy
- `validate`: Functional form for one-off calls
- `TypeConverter`: Primitive kind checks and coercion
- `apply_constraints`: Constraint engine shared by every specification kind
- `ValidationResult` / `ErrorDetail`: Outcome of a validation call

## Quick Example

```python
from typeshape.types import Types
from typeshape.validator import validate

spec = Types.object({
    "name": Types.string().with_constraints(min_length=1),
    "age": Types.integer().with_constraints(gt=0),
})

result = validate(spec, {"name": "", "age": -1})
for error in result.errors:
    print(error.format())
# name: should have at least 1 characters
# age: must be greater than 0
```
"""

from typeshape.errors import ValidationError

from .coercion import CoercionError, TypeConverter
from .constraints import APPLICABILITY, Violation, apply_constraints, is_applicable, render_message
from .core import Validator, validate
from .result import ErrorDetail, PathSegment, ValidationResult

__all__ = [
    # Core validator
    "Validator",
    "validate",
    # Results
    "ErrorDetail",
    "PathSegment",
    "ValidationResult",
    "ValidationError",
    # Coercion
    "CoercionError",
    "TypeConverter",
    # Constraints
    "APPLICABILITY",
    "Violation",
    "apply_constraints",
    "is_applicable",
    "render_message",
]
