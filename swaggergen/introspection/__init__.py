"""
Type Introspection Module

Builds language-neutral type descriptors for the analyzer.
Supports:
- Python dataclasses and annotated classes
- YAML/JSON type description files
- Textual type declarations (List<Pet>, Optional[Node], byte[])
- A registry of discovered types (short or qualified name lookup)
"""

from .type_descriptor import TypeRef, FieldDescriptor, TypeDescriptor, TypeRegistry
from .python_types import describe_class, describe_annotation
from .description_file import load_type_descriptions, parse_type_descriptions, TypeDescriptionError

__all__ = [
    "TypeRef",
    "FieldDescriptor",
    "TypeDescriptor",
    "TypeRegistry",
    "describe_class",
    "describe_annotation",
    "load_type_descriptions",
    "parse_type_descriptions",
    "TypeDescriptionError",
]
