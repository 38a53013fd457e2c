"""Base Pydantic models for typeshape.

This module provides the base model class that all typeshape Pydantic models
inherit from. It establishes consistent configuration across all models:

- Strict field validation (no extra fields allowed)
- Immutable instances, so type specifications can be shared between threads
- Arbitrary payload types (compiled patterns, callables, custom type objects)

Example:
    >>> from typeshape.models import ShapeBaseModel
    >>>
    >>> class Point(ShapeBaseModel):
    ...     x: int
    ...     y: int = 0
    >>>
    >>> Point(x=1).model_dump()
    {'x': 1, 'y': 0}
"""

from pydantic import BaseModel, ConfigDict


class ShapeBaseModel(BaseModel):
    """Base model for all typeshape Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable; builders return modified copies
    - arbitrary_types_allowed=True: Constraint payloads may be any object
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)
