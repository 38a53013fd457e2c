"""Schema lookup table used to resolve ``ref`` specifications.

The registry maps reference identifiers to type specifications. It is owned by
whoever assembles the schemas and is read-only while validation or generation
runs; ``freeze()`` turns accidental late registration into a hard error.
"""

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from typeshape.errors import RegistryFrozenError, SchemaNotFoundError
from typeshape.types.models import BaseTypeSpec, parse_type_spec

logger = logging.getLogger(__name__)


class SchemaRegistry(Mapping[str, BaseTypeSpec]):
    """Identifier-indexed table of named type specifications.

    Example:
        >>> from typeshape.registry import SchemaRegistry
        >>> from typeshape.types import Types
        >>>
        >>> registry = SchemaRegistry()
        >>> registry.register("Node", Types.object({
        ...     "value": Types.integer(),
        ...     "children": Types.array(Types.ref("Node")).with_default([]),
        ... }))
        >>> registry.freeze()
    """

    def __init__(self, schemas: Mapping[str, Any] | None = None):
        self._schemas: dict[str, BaseTypeSpec] = {}
        self._frozen = False
        for identifier, spec in (schemas or {}).items():
            self.register(identifier, spec)

    def register(self, identifier: str, spec: Any) -> "SchemaRegistry":
        """Register (or replace) the specification for ``identifier``.

        Args:
            identifier: Reference identifier, possibly hierarchical (``a.b.C``).
            spec: A specification or any shorthand accepted by ``parse_type_spec``.

        Raises:
            RegistryFrozenError: If the registry has been frozen.
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register '{identifier}': the schema registry is frozen"
            )
        if not isinstance(spec, BaseTypeSpec):
            spec = parse_type_spec(spec)
        if identifier in self._schemas:
            logger.debug(f"Replacing registered schema '{identifier}'")
        self._schemas[identifier] = spec
        return self

    def freeze(self) -> "SchemaRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, identifier: str) -> BaseTypeSpec:
        """Return the specification for ``identifier``.

        Raises:
            SchemaNotFoundError: If nothing was registered under ``identifier``.
        """
        try:
            return self._schemas[identifier]
        except KeyError:
            raise SchemaNotFoundError(identifier) from None

    def __getitem__(self, identifier: str) -> BaseTypeSpec:
        return self.resolve(identifier)

    def __iter__(self) -> Iterator[str]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)


def resolve_reference(registry: Mapping[str, BaseTypeSpec] | None, identifier: str) -> BaseTypeSpec:
    """Look ``identifier`` up in any mapping, raising ``SchemaNotFoundError`` when absent."""
    if registry is None:
        raise SchemaNotFoundError(identifier)
    try:
        spec = registry[identifier]
    except KeyError:
        raise SchemaNotFoundError(identifier) from None
    if not isinstance(spec, BaseTypeSpec):
        spec = parse_type_spec(spec)
    return spec
