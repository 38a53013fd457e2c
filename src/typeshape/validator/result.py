"""Validation result models."""

from typing import Any

from pydantic import Field

from typeshape.errors import ValidationError
from typeshape.models import ShapeBaseModel

PathSegment = str | int


class ErrorDetail(ShapeBaseModel):
    """A single path-qualified validation error.

    Attributes:
        path: Keys and indexes from the root value to the failing value; empty
            at the root.
        code: Structural code (``type``, ``coercion``, ``required``,
            ``additional_properties``, ``union``) or the failed constraint kind.
        message: Human-readable message, possibly a caller override.

    Example:
        >>> ErrorDetail(path=("users", 0, "age"), code="gt", message="must be greater than 0").format()
        'users.0.age: must be greater than 0'
    """

    path: tuple[PathSegment, ...] = ()
    code: str
    message: str

    def format(self) -> str:
        if not self.path:
            return self.message
        path_str = ".".join(str(segment) for segment in self.path)
        return f"{path_str}: {self.message}"


class ValidationResult(ShapeBaseModel):
    """Outcome of one validation call.

    ``value`` is the validated (and possibly coerced) value when ``errors`` is
    empty, and ``None`` otherwise.
    """

    value: Any = None
    errors: tuple[ErrorDetail, ...] = Field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.errors

    def unwrap(self) -> Any:
        """Return the validated value.

        Raises:
            ValidationError: If validation produced errors.
        """
        if self.errors:
            raise ValidationError(list(self.errors))
        return self.value
