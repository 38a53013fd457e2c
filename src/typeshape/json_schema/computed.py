"""Helpers for computed (output-only) fields in generated documents.

Computed fields render as read-only properties carrying the
``x-typeshape-computed`` extension key. Input-facing documents usually want
them gone; ``remove_computed_fields`` does that.
"""

import copy
from typing import Any

from typeshape.models import ShapeBaseModel

from .type_mapper import COMPUTED_EXTENSION

_METADATA_KEYS = (COMPUTED_EXTENSION, "readOnly", "description", "examples")


class ComputedFieldInfo(ShapeBaseModel):
    """Computed field found in a document's top-level ``properties``.

    Attributes:
        name: Property name
        type_schema: The property schema without computed-field metadata
        function: Name of the computing function, when one was recorded
        read_only: Value of the ``readOnly`` keyword
        description: Property description
    """

    name: str
    type_schema: dict[str, Any]
    function: str | None = None
    read_only: bool = False
    description: str | None = None


def extract_computed_field_info(doc: dict[str, Any]) -> list[ComputedFieldInfo]:
    properties = doc.get("properties") if isinstance(doc, dict) else None
    if not isinstance(properties, dict):
        return []

    found = []
    for name, field_schema in properties.items():
        if not isinstance(field_schema, dict) or COMPUTED_EXTENSION not in field_schema:
            continue
        metadata = field_schema[COMPUTED_EXTENSION] or {}
        found.append(
            ComputedFieldInfo(
                name=name,
                type_schema={
                    key: copy.deepcopy(value)
                    for key, value in field_schema.items()
                    if key not in _METADATA_KEYS
                },
                function=metadata.get("function"),
                read_only=field_schema.get("readOnly") is True,
                description=field_schema.get("description"),
            )
        )
    return found


def has_computed_fields(doc: dict[str, Any]) -> bool:
    return bool(extract_computed_field_info(doc))


def remove_computed_fields(doc: dict[str, Any]) -> dict[str, Any]:
    """Drop read-only properties and prune ``required`` accordingly.

    ``required`` is removed altogether when nothing is left in it.
    """
    result = copy.deepcopy(doc)
    properties = result.get("properties") if isinstance(result, dict) else None
    if not isinstance(properties, dict):
        return result

    computed = {
        name
        for name, field_schema in properties.items()
        if isinstance(field_schema, dict) and field_schema.get("readOnly") is True
    }
    result["properties"] = {
        name: field_schema for name, field_schema in properties.items() if name not in computed
    }

    required = result.get("required")
    if isinstance(required, list):
        remaining = [name for name in required if name not in computed]
        if remaining:
            result["required"] = remaining
        else:
            del result["required"]
    return result
