"""Primitive kind checks and coercion for typeshape."""

import math
from enum import Enum
from typing import Any

from typeshape.config import CoercionLevel

TRUTHY_TOKENS = frozenset({"true", "1", "yes", "on", "y", "t"})
FALSY_TOKENS = frozenset({"false", "0", "no", "off", "n", "f"})


class CoercionError(ValueError):
    """Raised when a value cannot be coerced to the requested primitive kind."""

    pass


class TypeConverter:
    """Utility class for primitive kind checks and coercion."""

    @staticmethod
    def python_type_name(value: Any) -> str:
        """Map a Python value to the kind name used in error messages."""
        type_map = {
            "str": "string",
            "int": "integer",
            "float": "float",
            "bool": "boolean",
            "list": "array",
            "tuple": "tuple",
            "dict": "map",
            "NoneType": "null",
        }
        if isinstance(value, Enum):
            return "atom"
        name = type(value).__name__
        return type_map.get(name, name)

    @staticmethod
    def matches_kind(kind: str, value: Any) -> bool:
        """Check the runtime kind of ``value`` without converting it."""
        if kind == "any":
            return True
        if kind == "string":
            return isinstance(value, str) and not isinstance(value, Enum)
        if kind == "integer":
            return isinstance(value, int) and not isinstance(value, bool)
        if kind == "float":
            # Integers are accepted where floats are expected, booleans are not
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        if kind == "boolean":
            return isinstance(value, bool)
        if kind == "atom":
            return isinstance(value, Enum) or (isinstance(value, str) and value != "")
        return False

    @staticmethod
    def coerce(kind: str, value: Any, level: CoercionLevel = CoercionLevel.SAFE) -> Any:
        """Convert ``value`` to the primitive ``kind``.

        Args:
            kind: Target primitive kind.
            value: Value that does not already match ``kind``.
            level: SAFE or AGGRESSIVE coercion.

        Returns:
            The converted value.

        Raises:
            CoercionError: If no conversion applies.
        """
        aggressive = level is CoercionLevel.AGGRESSIVE

        if kind == "string":
            if isinstance(value, Enum):
                return str(value.value) if isinstance(value.value, (str, int, float)) else value.name
            if isinstance(value, bool):
                if aggressive:
                    return "true" if value else "false"
                raise CoercionError(f"cannot coerce boolean {value!r} to string")
            if isinstance(value, (int, float)):
                return str(value)
            raise CoercionError(f"cannot coerce {TypeConverter.python_type_name(value)} to string")

        elif kind == "integer":
            if isinstance(value, str):
                try:
                    return int(value.strip())
                except ValueError:
                    raise CoercionError(f"invalid integer format: {value!r}")
            if isinstance(value, float) and aggressive:
                if math.isfinite(value) and value.is_integer():
                    return int(value)
                raise CoercionError(f"float {value!r} is not integral")
            if isinstance(value, bool) and aggressive:
                return int(value)
            raise CoercionError(f"cannot coerce {TypeConverter.python_type_name(value)} to integer")

        elif kind == "float":
            if isinstance(value, str):
                try:
                    result = float(value.strip())
                except ValueError:
                    raise CoercionError(f"invalid float format: {value!r}")
                if not math.isfinite(result):
                    raise CoercionError(f"invalid float format: {value!r}")
                return result
            raise CoercionError(f"cannot coerce {TypeConverter.python_type_name(value)} to float")

        elif kind == "boolean":
            token = value.value if isinstance(value, Enum) else value
            if isinstance(token, str):
                lowered = token.strip().lower()
                if lowered in TRUTHY_TOKENS:
                    return True
                if lowered in FALSY_TOKENS:
                    return False
                raise CoercionError(f"invalid boolean token: {token!r}")
            if aggressive and isinstance(token, int) and token in (0, 1):
                return bool(token)
            raise CoercionError(f"cannot coerce {TypeConverter.python_type_name(value)} to boolean")

        elif kind == "atom":
            if aggressive and isinstance(value, (int, float)) and not isinstance(value, bool):
                return str(value)
            raise CoercionError(f"cannot coerce {TypeConverter.python_type_name(value)} to atom")

        raise CoercionError(f"no coercion defined for kind {kind!r}")
