"""Traversal helpers for JSON Schema documents."""

import copy
from collections.abc import Callable
from typing import Any

# Keywords whose value is a single subschema
SINGLE_SCHEMA_KEYWORDS = ("additionalProperties", "not", "if", "then", "else", "contains")

# Keywords whose value is a list of subschemas
SCHEMA_LIST_KEYWORDS = ("oneOf", "anyOf", "allOf", "prefixItems")

# Keywords whose value maps names to subschemas
SCHEMA_MAP_KEYWORDS = ("properties", "patternProperties")


def map_subschemas(node: dict[str, Any], fn: Callable[[Any], Any]) -> dict[str, Any]:
    """Return a copy of ``node`` with ``fn`` applied to every direct subschema.

    Other values, definition sections included, are deep-copied so the result
    never shares mutable state with ``node``. Non-dictionary subschema values
    (``items: false``, ``additionalProperties: true``) are passed to ``fn`` as
    well; callers leave them alone.
    """
    result: dict[str, Any] = {}
    for keyword, value in node.items():
        if keyword in SCHEMA_MAP_KEYWORDS and isinstance(value, dict):
            result[keyword] = {name: fn(sub) for name, sub in value.items()}
        elif keyword in SCHEMA_LIST_KEYWORDS and isinstance(value, list):
            result[keyword] = [fn(sub) for sub in value]
        elif keyword in SINGLE_SCHEMA_KEYWORDS:
            result[keyword] = fn(value)
        elif keyword == "items":
            result[keyword] = [fn(sub) for sub in value] if isinstance(value, list) else fn(value)
        else:
            result[keyword] = copy.deepcopy(value)
    return result


def iter_subschemas(node: dict[str, Any]) -> list[Any]:
    """List the direct subschemas of ``node`` in document order."""
    found: list[Any] = []
    for keyword, value in node.items():
        if keyword in SCHEMA_MAP_KEYWORDS and isinstance(value, dict):
            found.extend(value.values())
        elif keyword in SCHEMA_LIST_KEYWORDS and isinstance(value, list):
            found.extend(value)
        elif keyword in SINGLE_SCHEMA_KEYWORDS:
            found.append(value)
        elif keyword == "items":
            found.extend(value if isinstance(value, list) else [value])
    return found


def contains_local_ref(node: Any) -> bool:
    """Whether ``node`` or any of its subschemas holds a local ``$ref``."""
    if not isinstance(node, dict):
        return False
    ref = node.get("$ref")
    if isinstance(ref, str) and ref.startswith("#/"):
        return True
    return any(contains_local_ref(sub) for sub in iter_subschemas(node))
