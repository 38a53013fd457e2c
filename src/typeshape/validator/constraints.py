"""Constraint engine for typeshape.

Applies an ordered sequence of constraints to a value whose runtime kind has
already been checked by the validator. Every applicable constraint is
evaluated; failures accumulate instead of stopping at the first one.

Example:
    >>> from typeshape.types import Constraint
    >>> from typeshape.validator.constraints import apply_constraints
    >>>
    >>> value, violations = apply_constraints(
    ...     [Constraint(kind="gt", value=0), Constraint(kind="lt", value=150)], "integer", -5
    ... )
    >>> [v.code for v in violations]
    ['gt']
"""

import re
from collections.abc import Callable, Iterable
from typing import Any

from typeshape.models import ShapeBaseModel
from typeshape.types.models import BaseTypeSpec, Constraint

ALL_KINDS = frozenset(
    {
        "string",
        "integer",
        "float",
        "boolean",
        "atom",
        "any",
        "array",
        "map",
        "object",
        "tuple",
        "union",
        "ref",
        "custom",
    }
)

NUMERIC_KINDS = frozenset({"integer", "float"})

# Which specification kinds each constraint applies to; anything else is ignored
APPLICABILITY: dict[str, frozenset[str]] = {
    "min_length": frozenset({"string", "array"}),
    "max_length": frozenset({"string", "array"}),
    "format": frozenset({"string", "any"}),
    "choices": ALL_KINDS,
    "gt": NUMERIC_KINDS,
    "gteq": NUMERIC_KINDS,
    "lt": NUMERIC_KINDS,
    "lteq": NUMERIC_KINDS,
    "min_items": frozenset({"array"}),
    "max_items": frozenset({"array"}),
    "size": frozenset({"map"}),
    "validator": ALL_KINDS,
}

STRING_CHECKS = frozenset({"min_length", "max_length", "format"})


class Violation(ShapeBaseModel):
    """A failed constraint before it is attached to a path."""

    code: str
    message: str


def _unit(value: Any) -> str:
    return "characters" if isinstance(value, str) else "items"


def _pattern_source(pattern: Any) -> str:
    return pattern.pattern if isinstance(pattern, re.Pattern) else str(pattern)


_CHECKS: dict[str, Callable[[Any, Any], bool]] = {
    "min_length": lambda value, limit: len(value) >= limit,
    "max_length": lambda value, limit: len(value) <= limit,
    "format": lambda value, pattern: pattern.search(value) is not None,
    "choices": lambda value, allowed: value in allowed,
    "gt": lambda value, limit: value > limit,
    "gteq": lambda value, limit: value >= limit,
    "lt": lambda value, limit: value < limit,
    "lteq": lambda value, limit: value <= limit,
    "min_items": lambda value, limit: len(value) >= limit,
    "max_items": lambda value, limit: len(value) <= limit,
    "size": lambda value, size: len(value) == size,
}

_MESSAGES: dict[str, Callable[[Any, Any], str]] = {
    "min_length": lambda value, limit: f"should have at least {limit} {_unit(value)}",
    "max_length": lambda value, limit: f"should have at most {limit} {_unit(value)}",
    "format": lambda value, pattern: f"does not match pattern {_pattern_source(pattern)!r}",
    "choices": lambda value, allowed: f"must be one of: {list(allowed)}",
    "gt": lambda value, limit: f"must be greater than {limit}",
    "gteq": lambda value, limit: f"must be greater than or equal to {limit}",
    "lt": lambda value, limit: f"must be less than {limit}",
    "lteq": lambda value, limit: f"must be less than or equal to {limit}",
    "min_items": lambda value, limit: f"must have at least {limit} items",
    "max_items": lambda value, limit: f"must have at most {limit} items",
    "size": lambda value, size: f"must have exactly {size} entries",
}


def is_applicable(constraint_kind: str, spec_kind: str) -> bool:
    applicable = APPLICABILITY.get(constraint_kind)
    return applicable is not None and spec_kind in applicable


def apply_constraints(
    constraints: Iterable[Constraint],
    kind: str,
    value: Any,
    *,
    run_validators: bool = True,
) -> tuple[Any, list[Violation]]:
    """Evaluate ``constraints`` against ``value``.

    Args:
        constraints: Constraints in declaration order.
        kind: Kind of the carrying specification (``string``, ``array``, ...).
        value: Value already checked (and coerced) by the validator.
        run_validators: Whether ``validator`` constraints run. Containers skip
            them when one of their children failed.

    Returns:
        The value, possibly transformed by ``validator`` constraints, and the
        list of violations in evaluation order.
    """
    violations: list[Violation] = []
    string_checks_stopped = False

    for constraint in constraints:
        if not is_applicable(constraint.kind, kind):
            continue

        if constraint.kind == "validator":
            if not run_validators:
                continue
            try:
                value = constraint.value(value)
            except ValueError as e:
                violations.append(
                    Violation(code="custom_validation", message=str(e) or "custom validation failed")
                )
            continue

        if constraint.kind in STRING_CHECKS:
            if string_checks_stopped:
                continue
            if constraint.kind == "format" and not isinstance(value, str):
                # Not a constraint failure: the value is not a string at all
                violations.append(
                    Violation(
                        code="type",
                        message=f"expected string for format check, got {type(value).__name__}",
                    )
                )
                string_checks_stopped = True
                continue

        if not _CHECKS[constraint.kind](value, constraint.value):
            violations.append(
                Violation(
                    code=constraint.kind,
                    message=_MESSAGES[constraint.kind](value, constraint.value),
                )
            )

    return value, violations


def render_message(spec: BaseTypeSpec, code: str, default: str) -> str:
    """Apply the specification's message overrides to a default message."""
    return spec.messages.get(code) or spec.message or default
