"""Validation policy for typeshape.

The policy is the opaque parameter bag that callers hand to the validator on
every call. It is never stored inside a ``TypeSpec`` and the validator keeps no
state derived from it between calls.

Example:
    >>> from typeshape.config import ValidationPolicy
    >>>
    >>> policy = ValidationPolicy.preset("api")
    >>> policy.extra
    <ExtraPolicy.FORBID: 'forbid'>
    >>> policy.merge(coercion="aggressive").coercion
    <CoercionLevel.AGGRESSIVE: 'aggressive'>
"""

from enum import Enum
from typing import Any, Literal

from typeshape.models import ShapeBaseModel


class ExtraPolicy(str, Enum):
    """How unknown keys on object values are handled.

    - ALLOW: Unknown keys are copied to the validated value unchanged
    - IGNORE: Unknown keys are dropped from the validated value
    - FORBID: Each unknown key is reported as an ``additional_properties`` error
    """

    ALLOW = "allow"
    IGNORE = "ignore"
    FORBID = "forbid"


class CoercionLevel(str, Enum):
    """How hard the validator tries to convert a value before checking its kind.

    - NONE: Values must already be of the expected kind
    - SAFE: Lossless conversions (numeric strings, token booleans, scalars to string)
    - AGGRESSIVE: SAFE plus integral floats to integers and 0/1 to booleans
    """

    NONE = "none"
    SAFE = "safe"
    AGGRESSIVE = "aggressive"


UnionErrorMode = Literal["last", "all"]


class ValidationPolicy(ShapeBaseModel):
    """Per-call validation settings.

    Attributes:
        extra: Handling of unknown object keys.
        coercion: Coercion level applied to primitive values.
        union_errors: On union exhaustion, report only the last member's errors
            ("last") or every member's errors ("all").
    """

    extra: ExtraPolicy = ExtraPolicy.ALLOW
    coercion: CoercionLevel = CoercionLevel.NONE
    union_errors: UnionErrorMode = "last"

    @property
    def should_coerce(self) -> bool:
        return self.coercion is not CoercionLevel.NONE

    def merge(self, **overrides: Any) -> "ValidationPolicy":
        """Return a new policy with the given fields replaced.

        Overrides are validated, so ``merge(extra="forbid")`` works as expected.

        Raises:
            pydantic.ValidationError: If an override has an invalid value or
                names an unknown field.
        """
        return ValidationPolicy.model_validate({**self.model_dump(), **overrides})

    @classmethod
    def preset(cls, name: str) -> "ValidationPolicy":
        """Build one of the named presets.

        Args:
            name: One of ``strict``, ``lenient``, ``api``, ``json_schema``,
                ``development`` or ``production``.

        Raises:
            ValueError: If the preset name is unknown.
        """
        try:
            settings = _PRESETS[name]
        except KeyError:
            raise ValueError(
                f"Unknown policy preset: {name}. Available presets: {', '.join(sorted(_PRESETS))}"
            ) from None
        return cls.model_validate(settings)


_PRESETS: dict[str, dict[str, Any]] = {
    "strict": {"extra": "forbid", "coercion": "none"},
    "lenient": {"extra": "allow", "coercion": "aggressive"},
    "api": {"extra": "forbid", "coercion": "safe"},
    "json_schema": {"extra": "forbid", "coercion": "none"},
    "development": {"extra": "allow", "coercion": "safe", "union_errors": "all"},
    "production": {"extra": "ignore", "coercion": "safe"},
}
