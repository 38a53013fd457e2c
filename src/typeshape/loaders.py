"""Loading utilities for type specifications and data files.

A *bundle* is a YAML or JSON document describing one root specification and
the named specifications it references:

```yaml
root: Tree
schemas:
  Tree:
    kind: object
    properties:
      value: integer
      children:
        kind: array
        element: Tree
        constraints: {default: []}
```
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from typeshape.registry import SchemaRegistry
from typeshape.types.models import BaseTypeSpec, parse_type_spec


@dataclass(frozen=True)
class SchemaBundle:
    """A root specification together with the registry its references resolve against."""

    root: BaseTypeSpec
    registry: SchemaRegistry


def load_document(content: str, format: str = "yaml") -> Any:
    """Parse YAML or JSON content.

    Raises:
        ValueError: If format is not supported or parsing fails
    """
    if format == "yaml":
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML: {e}") from e
    elif format == "json":
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON: {e}") from e
    else:
        raise ValueError(f"Unsupported format: {format}. Use 'yaml' or 'json'")


def _read_file(path: str | Path) -> Any:
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if path.suffix.lower() in [".yaml", ".yml"]:
        format = "yaml"
    elif path.suffix.lower() == ".json":
        format = "json"
    else:
        raise ValueError(f"Unsupported file extension: {path.suffix}. Use .yaml, .yml, or .json")

    return load_document(path.read_text(encoding="utf-8"), format=format)


def _parse(data: Any, where: str) -> BaseTypeSpec:
    try:
        return parse_type_spec(data)
    except PydanticValidationError as e:
        raise ValueError(f"Invalid type specification in {where}: {e}") from e


def load_spec(content: str, format: str = "yaml") -> BaseTypeSpec:
    """Load a single type specification from string content.

    Args:
        content: Specification as YAML or JSON text
        format: Format of the content ('yaml' or 'json')

    Returns:
        The parsed type specification

    Raises:
        ValueError: If parsing fails or the content is not a valid specification
    """
    return _parse(load_document(content, format), "content")


def load_spec_from_file(path: str | Path) -> BaseTypeSpec:
    """Load a single type specification from a YAML or JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file format is not supported or parsing fails
    """
    return _parse(_read_file(path), str(path))


def load_bundle(data: Any, where: str = "bundle") -> SchemaBundle:
    """Build a bundle from already-parsed data.

    Raises:
        ValueError: If the data has no ``root`` or a specification is invalid
    """
    if not isinstance(data, dict):
        raise ValueError(f"{where} must be a mapping with a 'root' entry")
    if "root" not in data:
        raise ValueError(f"{where} is missing the 'root' entry")

    schemas = data.get("schemas") or {}
    if not isinstance(schemas, dict):
        raise ValueError(f"'schemas' in {where} must be a mapping")

    registry = SchemaRegistry()
    for identifier, spec in schemas.items():
        registry.register(str(identifier), _parse(spec, f"{where} schema '{identifier}'"))

    return SchemaBundle(root=_parse(data["root"], f"{where} root"), registry=registry.freeze())


def load_bundle_from_file(path: str | Path) -> SchemaBundle:
    """Load a bundle from a YAML or JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file format is not supported or the bundle is invalid
    """
    return load_bundle(_read_file(path), str(path))


def load_data_from_file(path: str | Path) -> Any:
    """Load the value to validate from a YAML or JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file format is not supported or parsing fails
    """
    return _read_file(path)
