"""JSON Schema reference resolution and provider post-processing.

Every function here is pure: it takes a JSON Schema document (a dictionary)
and returns a new one, leaving the input untouched. Unknown keywords are
carried through. Malformed or dangling references never raise; they are left
in place and logged at debug level.

Example:
    >>> from typeshape.json_schema import resolve_references
    >>>
    >>> resolve_references({
    ...     "properties": {"u": {"$ref": "#/definitions/U"}},
    ...     "definitions": {"U": {"type": "string"}},
    ... })
    {'properties': {'u': {'type': 'string'}}}
"""

import copy
import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any

from ._walk import contains_local_ref, map_subschemas

logger = logging.getLogger(__name__)

DEFINITION_SECTIONS = ("definitions", "$defs")
_REF_PREFIXES = ("#/definitions/", "#/$defs/")


class Provider(str, Enum):
    """LLM providers with structured-output rules."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GENERIC = "generic"


# Formats each provider rejects in structured-output mode; they are stripped
UNSUPPORTED_FORMATS: dict[Provider, frozenset[str]] = {
    Provider.OPENAI: frozenset({"date", "time", "email"}),
    Provider.ANTHROPIC: frozenset({"uri", "uuid"}),
}


def _collect_definitions(doc: dict[str, Any]) -> dict[str, Any]:
    definitions: dict[str, Any] = {}
    for section in DEFINITION_SECTIONS:
        value = doc.get(section)
        if isinstance(value, dict):
            definitions.update(value)
    return definitions


def _definition_name(ref: str) -> str | None:
    for prefix in _REF_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix) :]
    return None


class _Inliner:
    """Depth-bounded ``$ref`` inliner.

    ``depth`` counts the references already inlined on the current path and
    ``path`` holds their definition names. A reference met at
    ``depth >= max_depth`` stays a literal ``$ref``. With ``cycles_only`` the
    bound applies only to a name already on the path, so acyclic chains
    always resolve fully and only self-referential definitions are cut.
    """

    def __init__(
        self,
        definitions: dict[str, Any],
        max_depth: int,
        preserve_titles: bool,
        preserve_descriptions: bool,
        keep: Iterable[str] = (),
        unbounded: Iterable[str] = (),
        cycles_only: bool = False,
    ):
        self.definitions = definitions
        self.max_depth = max_depth
        self.preserve_titles = preserve_titles
        self.preserve_descriptions = preserve_descriptions
        self.keep = frozenset(keep)
        self.unbounded = frozenset(unbounded)
        self.cycles_only = cycles_only

    def _bounded(self, name: str, depth: int, path: frozenset[str]) -> bool:
        if name in self.unbounded or depth < self.max_depth:
            return False
        return name in path or not self.cycles_only

    def resolve(self, node: Any, depth: int = 0, path: frozenset[str] = frozenset()) -> Any:
        if not isinstance(node, dict):
            return copy.deepcopy(node)

        ref = node.get("$ref")
        if not isinstance(ref, str):
            return map_subschemas(node, lambda sub: self.resolve(sub, depth, path))

        name = _definition_name(ref)
        if name is None or name not in self.definitions:
            logger.debug(f"Leaving unresolvable reference '{ref}' in place")
            return copy.deepcopy(node)
        if name in self.keep:
            return copy.deepcopy(node)
        if self._bounded(name, depth, path):
            logger.debug(f"Reached max_depth {self.max_depth}; leaving '{ref}' in place")
            return copy.deepcopy(node)

        target = self.resolve(self.definitions[name], depth + 1, path | {name})
        if not isinstance(target, dict):
            return target
        if self.preserve_titles and "title" in node:
            target["title"] = node["title"]
        if self.preserve_descriptions and "description" in node:
            target["description"] = node["description"]
        return target


def _reattach_definitions(resolved: Any, original: dict[str, Any]) -> Any:
    if not isinstance(resolved, dict) or not contains_local_ref(resolved):
        return resolved
    for section in DEFINITION_SECTIONS:
        if section in original:
            resolved[section] = copy.deepcopy(original[section])
    return resolved


def _strip_definitions(doc: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in doc.items() if key not in DEFINITION_SECTIONS}


def resolve_references(
    doc: dict[str, Any],
    *,
    max_depth: int = 10,
    preserve_titles: bool = True,
    preserve_descriptions: bool = True,
) -> dict[str, Any]:
    """Inline every local ``$ref`` to ``#/definitions/X`` or ``#/$defs/X``.

    Args:
        doc: JSON Schema document
        max_depth: Maximum number of nested inlinings on any path before a
            definition already being inlined is left as a literal ``$ref``.
            Acyclic documents always resolve fully.
        preserve_titles: Copy a ``title`` written next to a ``$ref`` onto the
            inlined definition
        preserve_descriptions: Same for ``description``

    Returns:
        The resolved document. The definition sections are dropped when no
        local reference remains, and kept otherwise.
    """
    if not isinstance(doc, dict) or not doc:
        return copy.deepcopy(doc)

    inliner = _Inliner(
        _collect_definitions(doc),
        max_depth=max_depth,
        preserve_titles=preserve_titles,
        preserve_descriptions=preserve_descriptions,
        cycles_only=True,
    )
    resolved = inliner.resolve(_strip_definitions(doc))
    return _reattach_definitions(resolved, doc)  # type: ignore[no-any-return]


def _is_simple(definition: Any) -> bool:
    """A definition is simple when it is reference-free and not an object shape."""
    if not isinstance(definition, dict):
        return True
    if "properties" in definition or definition.get("type") == "object":
        return False
    return not contains_local_ref(definition)


def flatten_schema(
    doc: dict[str, Any],
    *,
    max_depth: int = 5,
    inline_simple_refs: bool = True,
    preserve_complex_refs: bool = False,
) -> dict[str, Any]:
    """Inline references aggressively to reduce indirection.

    Resolution runs with ``max_depth`` and without title preservation. Simple
    definitions (no ``$ref`` inside, not an object) are inlined past the depth
    bound when ``inline_simple_refs`` is set; complex definitions are kept as
    references when ``preserve_complex_refs`` is set.

    Example:
        >>> flatten_schema({
        ...     "type": "array",
        ...     "items": {"$ref": "#/definitions/Item"},
        ...     "definitions": {"Item": {"type": "string", "minLength": 1}},
        ... })
        {'type': 'array', 'items': {'type': 'string', 'minLength': 1}}
    """
    if not isinstance(doc, dict) or not doc:
        return copy.deepcopy(doc)

    definitions = _collect_definitions(doc)
    simple = {name for name, definition in definitions.items() if _is_simple(definition)}
    complex_names = set(definitions) - simple

    inliner = _Inliner(
        definitions,
        max_depth=max_depth,
        preserve_titles=False,
        preserve_descriptions=True,
        keep=complex_names if preserve_complex_refs else (),
        unbounded=simple if inline_simple_refs else (),
    )
    resolved = inliner.resolve(_strip_definitions(doc))
    return _reattach_definitions(resolved, doc)  # type: ignore[no-any-return]


def enforce_structured_output(
    doc: dict[str, Any],
    provider: Provider | str = Provider.GENERIC,
    *,
    remove_unsupported: bool = True,
    add_required_fields: bool = True,
    require_all_properties: bool = False,
    allowed_formats: Iterable[str] | None = None,
) -> dict[str, Any]:
    """Adjust a document to an LLM provider's structured-output rules.

    For ``openai`` and ``anthropic``, at every object level:

    - ``additionalProperties`` is forced to ``false`` (``remove_unsupported``),
      or defaulted to ``false`` when only ``add_required_fields`` is set
    - ``required`` is ensured, listing every property when
      ``require_all_properties`` is set (``add_required_fields``)
    - ``properties`` is ensured for ``openai`` (``add_required_fields``)
    - ``format`` values the provider rejects (``UNSUPPORTED_FORMATS``), or any
      format outside ``allowed_formats`` when given, are removed
      (``remove_unsupported``)

    ``generic`` and unknown providers return the document unchanged.

    Example:
        >>> enforce_structured_output(
        ...     {"type": "object", "additionalProperties": True}, "openai"
        ... )["additionalProperties"]
        False
    """
    try:
        target = Provider(provider)
    except ValueError:
        logger.debug(f"Unknown structured-output provider '{provider}'; leaving schema unchanged")
        return copy.deepcopy(doc)

    if target is Provider.GENERIC or not isinstance(doc, dict):
        return copy.deepcopy(doc)

    allowed = frozenset(allowed_formats) if allowed_formats is not None else None
    rejected = UNSUPPORTED_FORMATS[target]

    def unsupported(value: str) -> bool:
        if allowed is not None:
            return value not in allowed
        return value in rejected

    def enforce(node: Any) -> Any:
        if not isinstance(node, dict):
            return copy.deepcopy(node)
        node = dict(node)

        if node.get("type") == "object":
            if remove_unsupported:
                node["additionalProperties"] = False
            elif add_required_fields:
                node.setdefault("additionalProperties", False)
            if add_required_fields:
                if target is Provider.OPENAI:
                    node.setdefault("properties", {})
                if require_all_properties:
                    node["required"] = list(node.get("properties", {}))
                else:
                    node.setdefault("required", [])

        if remove_unsupported and isinstance(node.get("format"), str):
            if unsupported(node["format"]):
                logger.debug(f"Removing format '{node['format']}' unsupported by {target.value}")
                del node["format"]

        return _map_with_definitions(node, enforce)

    return enforce(doc)  # type: ignore[no-any-return]


def optimize_for_llm(
    doc: dict[str, Any],
    *,
    remove_descriptions: bool = False,
    simplify_unions: bool = True,
    max_union_members: int = 3,
    max_properties: int | None = None,
) -> dict[str, Any]:
    """Shrink a document for LLM prompts.

    Args:
        doc: JSON Schema document
        remove_descriptions: Drop every ``description`` keyword (properties
            that happen to be named ``description`` are kept)
        simplify_unions: Truncate ``oneOf``/``anyOf`` to ``max_union_members``
        max_union_members: Union truncation bound
        max_properties: Keep at most this many properties per object, in
            declaration order, pruning ``required`` to match

    Returns:
        The optimized document
    """

    def optimize(node: Any) -> Any:
        if not isinstance(node, dict):
            return copy.deepcopy(node)
        node = dict(node)

        if remove_descriptions:
            node.pop("description", None)

        if simplify_unions:
            for keyword in ("oneOf", "anyOf"):
                members = node.get(keyword)
                if isinstance(members, list) and len(members) > max_union_members:
                    node[keyword] = members[:max_union_members]

        properties = node.get("properties")
        if (
            max_properties is not None
            and isinstance(properties, dict)
            and len(properties) > max_properties
        ):
            kept = list(properties)[:max_properties]
            node["properties"] = {name: properties[name] for name in kept}
            required = node.get("required")
            if isinstance(required, list):
                node["required"] = [name for name in required if name in kept]

        return _map_with_definitions(node, optimize)

    if not isinstance(doc, dict):
        return copy.deepcopy(doc)
    return optimize(doc)  # type: ignore[no-any-return]


def _map_with_definitions(node: dict[str, Any], fn: Any) -> dict[str, Any]:
    result = map_subschemas(node, fn)
    for section in DEFINITION_SECTIONS:
        definitions = node.get(section)
        if isinstance(definitions, dict):
            result[section] = {name: fn(sub) for name, sub in definitions.items()}
    return result
