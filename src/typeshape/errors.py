"""Exception hierarchy for typeshape.

Two families of errors exist and must not be confused:

- ``ValidationError`` reports bad *input data*. It is raised only by
  ``ValidationResult.unwrap()`` and carries every ``ErrorDetail`` collected
  during one validation call.
- ``ShapeError`` and its subclasses report *usage bugs*: rendering a reference
  without a store, touching a released store, an object that claims to be a
  custom type but cannot render itself, or a reference that nothing registered.
  These are raised immediately and never folded into validation results.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typeshape.validator.result import ErrorDetail


class ValidationError(ValueError):
    """Raised when a validated value is unwrapped but validation failed.

    Attributes:
        errors: Every error collected during validation, in discovery order.
    """

    def __init__(self, errors: list[ErrorDetail]):
        self.errors = list(errors)
        super().__init__("\n".join(error.format() for error in self.errors))


class ShapeError(Exception):
    """Base class for programmer errors raised by typeshape."""


class SchemaNotFoundError(ShapeError, KeyError):
    """Raised when a reference identifier has no registered type specification."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"No schema registered for reference '{identifier}'")

    def __str__(self) -> str:
        return str(self.args[0])


class RegistryFrozenError(ShapeError):
    """Raised when registering into a registry that has been frozen."""


class ReferenceStoreRequiredError(ShapeError):
    """Raised when a reference is rendered without a reference store."""


class StoreReleasedError(ShapeError):
    """Raised when a released reference store is used."""


class InvalidCustomTypeError(ShapeError):
    """Raised when a custom type does not expose a usable ``json_schema()`` renderer."""
