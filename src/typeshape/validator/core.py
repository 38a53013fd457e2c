"""Core validation logic for typeshape."""

import copy
import logging
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from typeshape.config import ExtraPolicy, ValidationPolicy
from typeshape.registry import resolve_reference
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

from .coercion import CoercionError, TypeConverter
from .constraints import apply_constraints, render_message
from .result import ErrorDetail, PathSegment, ValidationResult

logger = logging.getLogger(__name__)

Path = tuple[PathSegment, ...]
Outcome = tuple[Any, list[ErrorDetail]]

_MISSING = object()


class Validator:
    """Recursive validator for type specifications.

    This class walks a type specification against a value and collects every
    independent error. It handles:
    - Primitive kind checks with optional coercion
    - Constraint evaluation with overridable messages
    - Arrays, maps, tuples and objects, descending with path tracking
    - First-match unions
    - Named references resolved through a registry

    Validation is synchronous and keeps no state between calls, so one
    instance can serve many threads at once as long as the registry is not
    modified concurrently.

    Example:
        >>> from typeshape.types import Types
        >>> from typeshape.validator import Validator
        >>>
        >>> spec = Types.integer().with_constraints(gt=0, lt=150)
        >>> Validator().validate(spec, 25).value
        25
        >>> [e.code for e in Validator().validate(spec, -5).errors]
        ['gt']
    """

    def __init__(
        self,
        registry: Mapping[str, BaseTypeSpec] | None = None,
        policy: ValidationPolicy | None = None,
    ):
        """Initialize the validator.

        Args:
            registry: Lookup table for ``ref`` specifications
            policy: Extra-key, coercion and union reporting settings
                (default: ``ValidationPolicy()``)
        """
        self.registry = registry
        self.policy = policy or ValidationPolicy()
        self._handlers: dict[str, Callable[[Any, Any, Path], Outcome]] = {
            "primitive": self._validate_primitive,
            "array": self._validate_array,
            "map": self._validate_map,
            "union": self._validate_union,
            "object": self._validate_object,
            "ref": self._validate_ref,
            "tuple": self._validate_tuple,
            "custom": self._validate_custom,
        }

    def validate(self, spec: BaseTypeSpec, value: Any) -> ValidationResult:
        """Validate ``value`` against ``spec``.

        Args:
            spec: Type specification to validate against
            value: Arbitrary input value

        Returns:
            ValidationResult with the validated value, or with every error found

        Raises:
            SchemaNotFoundError: If a reference cannot be resolved
        """
        validated, errors = self._validate(spec, value, ())
        if errors:
            return ValidationResult(value=None, errors=tuple(errors))
        return ValidationResult(value=validated)

    def _validate(self, spec: BaseTypeSpec, value: Any, path: Path) -> Outcome:
        handler = self._handlers.get(spec.kind)  # type: ignore[attr-defined]
        if handler is None:
            raise TypeError(f"Unsupported type specification: {spec!r}")
        return handler(spec, value, path)

    def _error(self, spec: BaseTypeSpec, path: Path, code: str, message: str) -> ErrorDetail:
        return ErrorDetail(path=path, code=code, message=render_message(spec, code, message))

    def _check_constraints(
        self,
        spec: BaseTypeSpec,
        kind: str,
        value: Any,
        path: Path,
        run_validators: bool = True,
    ) -> Outcome:
        value, violations = apply_constraints(
            spec.constraints, kind, value, run_validators=run_validators
        )
        return value, [self._error(spec, path, v.code, v.message) for v in violations]

    # ── Primitives ─────────────────────────────────────────────────────────────
    def _validate_primitive(self, spec: PrimitiveSpec, value: Any, path: Path) -> Outcome:
        kind = spec.type

        if not TypeConverter.matches_kind(kind, value):
            if not self.policy.should_coerce:
                return value, [
                    self._error(
                        spec,
                        path,
                        "type",
                        f"expected {kind}, got {TypeConverter.python_type_name(value)}",
                    )
                ]
            try:
                value = TypeConverter.coerce(kind, value, self.policy.coercion)
            except CoercionError as e:
                return value, [self._error(spec, path, "coercion", str(e))]

        return self._check_constraints(spec, kind, value, path)

    # ── Containers ─────────────────────────────────────────────────────────────
    def _validate_array(self, spec: ArraySpec, value: Any, path: Path) -> Outcome:
        if not isinstance(value, (list, tuple)):
            return value, [
                self._error(
                    spec, path, "type", f"expected array, got {TypeConverter.python_type_name(value)}"
                )
            ]

        errors: list[ErrorDetail] = []
        items = []
        for index, item in enumerate(value):
            validated, item_errors = self._validate(spec.element, item, path + (index,))
            errors.extend(item_errors)
            items.append(item if item_errors else validated)

        items, constraint_errors = self._check_constraints(
            spec, "array", items, path, run_validators=not errors
        )
        return items, errors + constraint_errors

    def _validate_tuple(self, spec: TupleSpec, value: Any, path: Path) -> Outcome:
        if not isinstance(value, (list, tuple)):
            return value, [
                self._error(
                    spec, path, "type", f"expected tuple, got {TypeConverter.python_type_name(value)}"
                )
            ]
        if len(value) != len(spec.elements):
            return value, [
                self._error(
                    spec,
                    path,
                    "type",
                    f"expected tuple of {len(spec.elements)} elements, got {len(value)}",
                )
            ]

        errors: list[ErrorDetail] = []
        items = []
        for index, (element, item) in enumerate(zip(spec.elements, value)):
            validated, item_errors = self._validate(element, item, path + (index,))
            errors.extend(item_errors)
            items.append(item if item_errors else validated)

        result, constraint_errors = self._check_constraints(
            spec, "tuple", tuple(items), path, run_validators=not errors
        )
        return result, errors + constraint_errors

    def _validate_map(self, spec: MapSpec, value: Any, path: Path) -> Outcome:
        if not isinstance(value, Mapping):
            return value, [
                self._error(
                    spec, path, "type", f"expected map, got {TypeConverter.python_type_name(value)}"
                )
            ]

        errors: list[ErrorDetail] = []
        entries: dict[Any, Any] = {}
        for key, item in value.items():
            entry_path = path + (_render_key(key),)
            validated_key, key_errors = self._validate(spec.key, key, entry_path)
            validated_item, item_errors = self._validate(spec.value, item, entry_path)
            errors.extend(key_errors)
            errors.extend(item_errors)
            entries[key if key_errors else validated_key] = item if item_errors else validated_item

        entries, constraint_errors = self._check_constraints(
            spec, "map", entries, path, run_validators=not errors
        )
        return entries, errors + constraint_errors

    def _validate_object(self, spec: ObjectSpec, value: Any, path: Path) -> Outcome:
        if not isinstance(value, Mapping):
            return value, [
                self._error(
                    spec,
                    path,
                    "type",
                    f"expected object, got {TypeConverter.python_type_name(value)}",
                )
            ]

        errors: list[ErrorDetail] = []
        result: dict[str, Any] = {}
        lookup = {_render_key(key): key for key in value}

        for name, field_spec in spec.properties.items():
            field_path = path + (name,)
            original_key = lookup.get(name, _MISSING)
            field_value = value[original_key] if original_key is not _MISSING else None

            if field_value is None:
                if field_spec.has_default:
                    result[name] = copy.deepcopy(field_spec.constraint_value("default"))
                    continue
                if not field_spec.is_required:
                    continue
                errors.append(self._error(field_spec, field_path, "required", "field is required"))
                continue

            validated, field_errors = self._validate(field_spec, field_value, field_path)
            errors.extend(field_errors)
            if not field_errors:
                result[name] = validated

        for rendered, key in lookup.items():
            if rendered in spec.properties:
                continue
            if self.policy.extra is ExtraPolicy.FORBID:
                errors.append(
                    self._error(
                        spec,
                        path + (rendered,),
                        "additional_properties",
                        f"unknown field: {rendered}",
                    )
                )
            elif self.policy.extra is ExtraPolicy.ALLOW:
                result[rendered] = value[key]

        result, constraint_errors = self._check_constraints(
            spec, "object", result, path, run_validators=not errors
        )
        return result, errors + constraint_errors

    # ── Unions and references ──────────────────────────────────────────────────
    def _validate_union(self, spec: UnionSpec, value: Any, path: Path) -> Outcome:
        if not spec.members:
            return value, [self._error(spec, path, "union", "union has no members")]

        attempts: list[list[ErrorDetail]] = []
        for member in spec.members:
            validated, member_errors = self._validate(member, value, path)
            if not member_errors:
                return self._check_constraints(spec, "union", validated, path)
            attempts.append(member_errors)

        if self.policy.union_errors == "all":
            return value, [error for member_errors in attempts for error in member_errors]
        return value, attempts[-1]

    def _validate_ref(self, spec: RefSpec, value: Any, path: Path) -> Outcome:
        target = resolve_reference(self.registry, spec.ref)
        validated, errors = self._validate(target, value, path)
        if errors:
            return value, errors
        return self._check_constraints(spec, "ref", validated, path)

    def _validate_custom(self, spec: CustomSpec, value: Any, path: Path) -> Outcome:
        validate_fn = getattr(spec.type, "validate", None)
        if callable(validate_fn):
            try:
                value = validate_fn(value)
            except ValueError as e:
                return value, [
                    self._error(spec, path, "custom_validation", str(e) or "invalid value")
                ]
        return self._check_constraints(spec, "custom", value, path)


def _render_key(key: Any) -> str:
    if isinstance(key, Enum):
        return str(key.value)
    return str(key)


def validate(
    spec: BaseTypeSpec,
    value: Any,
    policy: ValidationPolicy | None = None,
    registry: Mapping[str, BaseTypeSpec] | None = None,
) -> ValidationResult:
    """Validate ``value`` against ``spec`` with a one-off ``Validator``.

    Example:
        >>> from typeshape.types import Types
        >>> result = validate(Types.array(Types.string()), ["a", 1, "c"])
        >>> [(e.path, e.code) for e in result.errors]
        [((1,), 'type')]
    """
    return Validator(registry=registry, policy=policy).validate(spec, value)
