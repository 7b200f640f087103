"""
Type description files - explicit type declarations supplied as YAML or JSON.

Format:
```yaml
package: com.example.model
types:
  Person:
    name: String
    age: int
    address: Address
    pets: List<Pet>
  Address:
    city: String
```
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from swaggergen.introspection.type_descriptor import FieldDescriptor, TypeDescriptor, TypeRegistry
from swaggergen.introspection.type_strings import parse_type_string

logger = logging.getLogger(__name__)


class TypeDescriptionError(ValueError):
    """Raised when a type description file cannot be used"""


def parse_type_descriptions(data: Dict[str, Any]) -> List[TypeDescriptor]:
    """
    Build descriptors from an already parsed description mapping

    Args:
        data: Mapping with optional "package" and a "types" mapping

    Returns:
        List of TypeDescriptor, in file order

    Raises:
        TypeDescriptionError: If the mapping does not follow the format
    """
    if not isinstance(data, dict):
        raise TypeDescriptionError(f"Top-level description must be a mapping, got {type(data).__name__}")

    package = data.get("package") or ""
    types = data.get("types")
    if not isinstance(types, dict):
        raise TypeDescriptionError("Description must contain a 'types' mapping")

    descriptors = []
    for type_name, fields in types.items():
        fields = fields or {}
        if not isinstance(fields, dict):
            raise TypeDescriptionError(f"Fields of {type_name} must be a mapping of name -> type")

        qualified_name = type_name if "." in type_name else (f"{package}.{type_name}" if package else type_name)
        short_name = type_name.rsplit(".", 1)[-1]
        descriptors.append(TypeDescriptor(
            short_name,
            qualified_name,
            tuple(FieldDescriptor(str(name), parse_type_string(declared, package)) for name, declared in fields.items()),
        ))

    return descriptors


def load_type_descriptions(path: Path, registry: TypeRegistry = None) -> TypeRegistry:
    """
    Load a YAML/JSON description file into a registry

    Args:
        path: Description file (.yaml, .yml or .json)
        registry: Registry to extend (a new one is created if omitted)

    Returns:
        TypeRegistry with every described type
    """
    path = Path(path)
    registry = registry if registry is not None else TypeRegistry()

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TypeDescriptionError(f"Cannot read type description file {path}: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise TypeDescriptionError(f"Failed to parse {path}: {e}") from e

    for descriptor in parse_type_descriptions(data):
        registry.register(descriptor)

    logger.info(f"Loaded {len(registry)} type descriptions from {path}")
    return registry
