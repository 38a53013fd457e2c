"""Reference store used while generating JSON Schema documents.

One store lives for exactly one generation pass:

1. created empty by the caller
2. populated while type specifications are rendered (possibly from several
   threads at once)
3. read once to assemble the ``definitions`` section
4. released; any later use raises ``StoreReleasedError``

Definitions are keyed by the last ``.``-separated segment of the reference
identifier, so ``billing.Invoice`` and ``legacy.Invoice`` share one slot.
"""

import copy
import logging
import threading
from types import TracebackType
from typing import Any

from typeshape.errors import StoreReleasedError

logger = logging.getLogger(__name__)


class ReferenceStore:
    """Lock-guarded registry of referenced identifiers and rendered definitions.

    Example:
        >>> from typeshape.json_schema import ReferenceStore
        >>>
        >>> with ReferenceStore() as store:
        ...     store.add_reference("billing.Invoice")
        ...     store.add_definition("billing.Invoice", {"type": "object"})
        ...     store.get_definitions()
        {'Invoice': {'type': 'object'}}
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._references: dict[str, None] = {}
        self._definitions: dict[str, dict[str, Any]] = {}
        self._owners: dict[str, str] = {}
        self._released = False

    # ── Lifecycle ──────────────────────────────────────────────────────────────
    def release(self) -> None:
        """Drop every entry; the store cannot be used afterwards."""
        with self._lock:
            self._references.clear()
            self._definitions.clear()
            self._owners.clear()
            self._released = True

    @property
    def released(self) -> bool:
        return self._released

    def __enter__(self) -> "ReferenceStore":
        self._ensure_active()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if not self._released:
            self.release()

    def _ensure_active(self) -> None:
        if self._released:
            raise StoreReleasedError("Reference store has been released")

    # ── Population ─────────────────────────────────────────────────────────────
    def add_reference(self, identifier: str) -> None:
        """Record that ``identifier`` was referenced. Idempotent."""
        with self._lock:
            self._ensure_active()
            if identifier in self._references:
                return
            self._references[identifier] = None
            name = self.definition_name(identifier)
            owner = self._owners.setdefault(name, identifier)
            if owner != identifier:
                logger.warning(
                    f"References '{owner}' and '{identifier}' share the definition name '{name}'"
                )

    def add_definition(self, identifier: str, definition: dict[str, Any]) -> None:
        """Store the rendered definition for ``identifier``; last write wins."""
        with self._lock:
            self._ensure_active()
            self._definitions[self.definition_name(identifier)] = copy.deepcopy(definition)

    # ── Queries ────────────────────────────────────────────────────────────────
    def get_references(self) -> list[str]:
        """Return referenced identifiers in first-seen order."""
        with self._lock:
            self._ensure_active()
            return list(self._references)

    def get_definitions(self) -> dict[str, dict[str, Any]]:
        """Return a snapshot of the definitions keyed by definition name."""
        with self._lock:
            self._ensure_active()
            return copy.deepcopy(self._definitions)

    def has_reference(self, identifier: str) -> bool:
        with self._lock:
            self._ensure_active()
            return identifier in self._references

    def has_definition(self, identifier: str) -> bool:
        with self._lock:
            self._ensure_active()
            return self.definition_name(identifier) in self._definitions

    # ── Naming ─────────────────────────────────────────────────────────────────
    @staticmethod
    def definition_name(identifier: str) -> str:
        return identifier.rsplit(".", 1)[-1]

    @staticmethod
    def ref_path(identifier: str) -> str:
        """Return the local JSON pointer used in ``$ref`` for ``identifier``."""
        return f"#/definitions/{ReferenceStore.definition_name(identifier)}"
