"""Assemble complete JSON Schema documents from type specifications.

``SchemaGenerator`` owns one ``ReferenceStore`` per generation pass. It renders
the root specification, then every identifier the rendering referenced, until
no referenced identifier is left without a definition. The definitions are
attached under ``definitions`` and the store is released.

Example:
    >>> from typeshape.registry import SchemaRegistry
    >>> from typeshape.types import Types
    >>> from typeshape.json_schema import SchemaGenerator
    >>>
    >>> registry = SchemaRegistry({
    ...     "Node": Types.object({
    ...         "value": Types.integer(),
    ...         "children": Types.array(Types.ref("Node")),
    ...     })
    ... })
    >>> doc = SchemaGenerator(registry).generate(Types.ref("Node"))
    >>> sorted(doc["definitions"])
    ['Node']
"""

import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import jsonschema

from typeshape.registry import resolve_reference
from typeshape.types.models import BaseTypeSpec

from .reference_store import ReferenceStore
from .resolver import resolve_references
from .type_mapper import to_json_schema

logger = logging.getLogger(__name__)


class SchemaGenerator:
    """Generates JSON Schema documents, resolving references through a registry.

    Generation never mutates the registry and keeps no state between calls, so
    one generator can be shared by several threads.
    """

    def __init__(
        self,
        registry: Mapping[str, BaseTypeSpec] | None = None,
        additional_properties: bool | None = None,
    ):
        """Initialize the generator.

        Args:
            registry: Lookup table for referenced identifiers
            additional_properties: Emitted as ``additionalProperties`` on every
                object shape when set
        """
        self.registry = registry
        self.additional_properties = additional_properties

    def _render(self, spec: BaseTypeSpec, store: ReferenceStore) -> dict[str, Any]:
        return to_json_schema(spec, store, additional_properties=self.additional_properties)

    def _render_referenced(self, store: ReferenceStore) -> None:
        """Render referenced identifiers until every one has a definition."""
        while True:
            pending = [ref for ref in store.get_references() if not store.has_definition(ref)]
            if not pending:
                return
            for identifier in pending:
                target = resolve_reference(self.registry, identifier)
                logger.debug(f"Rendering definition for '{identifier}'")
                store.add_definition(identifier, self._render(target, store))

    def generate(
        self,
        spec: BaseTypeSpec,
        *,
        title: str | None = None,
        description: str | None = None,
        resolve_refs: bool = False,
    ) -> dict[str, Any]:
        """Generate the document for one root specification.

        Args:
            spec: Root type specification
            title: Document ``title``
            description: Document ``description``; overrides the root
                specification's own description
            resolve_refs: Inline references with ``resolve_references`` before
                returning

        Returns:
            The JSON Schema document

        Raises:
            SchemaNotFoundError: If a referenced identifier is not registered
        """
        with ReferenceStore() as store:
            doc = self._render(spec, store)
            self._render_referenced(store)
            definitions = store.get_definitions()

        if title is not None:
            doc["title"] = title
        if description is not None:
            doc["description"] = description
        if definitions:
            doc["definitions"] = definitions

        logger.debug(f"Generated schema with {len(definitions)} definitions")

        if resolve_refs:
            return resolve_references(doc)
        return doc

    def generate_batch(
        self, specs: Mapping[str, BaseTypeSpec], *, max_workers: int | None = None
    ) -> dict[str, Any]:
        """Render several named specifications into one ``definitions`` document.

        The roots are rendered concurrently against one shared store, so every
        identifier ends up with exactly one definition.

        Args:
            specs: Definition name to root specification
            max_workers: Thread pool size (default: the executor's default)

        Returns:
            ``{"definitions": {...}}`` with one entry per root and per
            referenced identifier
        """
        with ReferenceStore() as store:

            def render_root(item: tuple[str, BaseTypeSpec]) -> None:
                name, spec = item
                store.add_reference(name)
                store.add_definition(name, self._render(spec, store))

            with ThreadPoolExecutor(
                max_workers=max_workers, thread_name_prefix="typeshape-schema"
            ) as executor:
                # list() re-raises the first rendering error
                list(executor.map(render_root, specs.items()))

            self._render_referenced(store)
            definitions = store.get_definitions()

        logger.debug(f"Generated batch of {len(specs)} roots, {len(definitions)} definitions")
        return {"definitions": definitions}


def generate_schema(
    spec: BaseTypeSpec,
    registry: Mapping[str, BaseTypeSpec] | None = None,
    *,
    title: str | None = None,
    description: str | None = None,
    resolve_refs: bool = False,
    additional_properties: bool | None = None,
) -> dict[str, Any]:
    """Functional form of ``SchemaGenerator(registry).generate(spec, ...)``."""
    generator = SchemaGenerator(registry, additional_properties=additional_properties)
    return generator.generate(
        spec, title=title, description=description, resolve_refs=resolve_refs
    )


def check_schema(doc: dict[str, Any]) -> None:
    """Check a document against the Draft 7 meta-schema.

    Raises:
        ValueError: If the document is not a valid JSON Schema
    """
    try:
        jsonschema.Draft7Validator.check_schema(doc)
    except jsonschema.SchemaError as e:
        if e.absolute_path:
            path = ".".join(str(p) for p in e.absolute_path)
            raise ValueError(f"Invalid JSON Schema at '{path}': {e.message}") from e
        raise ValueError(f"Invalid JSON Schema: {e.message}") from e
