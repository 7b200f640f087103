"""Maps primitive field types to Swagger types."""
import logging
from dataclasses import dataclass
from typing import Dict

from swaggergen.schema.models import SchemaType

logger = logging.getLogger(__name__)


INT32 = SchemaType("integer", "int32")
INT64 = SchemaType("integer", "int64")
FLOAT = SchemaType("number", "float")
DOUBLE = SchemaType("number", "double")
NUMBER = SchemaType("number")
BOOLEAN = SchemaType("boolean")
STRING = SchemaType("string")
BYTE = SchemaType("string", "byte")
BINARY = SchemaType("string", "binary")
STRING_MAP = SchemaType("object", additional_properties="string")


# Keyed by the type's short name (case-sensitive)
PRIMITIVE_TYPES: Dict[str, SchemaType] = {
    "int": INT32,
    "Integer": INT32,
    "Date": INT64,
    "datetime": INT64,
    "long": INT64,
    "Long": INT64,
    "float": FLOAT,
    "Float": FLOAT,
    "double": DOUBLE,
    "Double": DOUBLE,
    "BigDecimal": NUMBER,
    "Decimal": NUMBER,
    "boolean": BOOLEAN,
    "Boolean": BOOLEAN,
    "bool": BOOLEAN,
    "String": STRING,
    "str": STRING,
    "Byte": BYTE,
    "Map": STRING_MAP,
    "dict": STRING_MAP,
    "byte[]": BINARY,
    "bytes": BINARY,
    "bytearray": BINARY,
}

BINARY_TYPE_NAMES = frozenset(name for name, schema_type in PRIMITIVE_TYPES.items() if schema_type == BINARY)


@dataclass(frozen=True)
class MappingResult:
    """Result of a primitive lookup. ``fallback`` is set for unmapped types."""

    schema_type: SchemaType
    fallback: bool = False


def map_primitive(type_name: str) -> MappingResult:
    """
    Map a primitive type short name to its Swagger type.

    Never fails: unknown names degrade to ``string`` with ``fallback=True``.

    Args:
        type_name: Short name of the field type (e.g. "Integer", "str")

    Returns:
        MappingResult with the Swagger type
    """
    schema_type = PRIMITIVE_TYPES.get(type_name)
    if schema_type is None:
        logger.warning(f"Type not found: {type_name}")
        return MappingResult(STRING, fallback=True)
    return MappingResult(schema_type)


def is_binary(type_name: str) -> bool:
    return type_name in BINARY_TYPE_NAMES


def is_known_primitive(type_name: str) -> bool:
    return type_name in PRIMITIVE_TYPES
