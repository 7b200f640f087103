"""
Python class introspection - builds TypeDescriptors from dataclasses and
annotated classes.

Supports:
- dataclass fields and plain class annotations (inherited ones included)
- Optional[X] / X | None unwrapping
- list/set/tuple/Sequence element types (one level)
- string annotations and unresolvable forward references
- Enum classes (string with the member names)
"""

import collections.abc as abc
import dataclasses
import enum
import logging
import sys
import typing
from types import UnionType
from typing import Any, Dict, List, Union, get_args, get_origin

from swaggergen.introspection.type_descriptor import FieldDescriptor, TypeDescriptor, TypeRef
from swaggergen.introspection.type_strings import parse_type_string
from swaggergen.mapper.type_mapper import BINARY_TYPE_NAMES

logger = logging.getLogger(__name__)

NONE_TYPE = type(None)

SEQUENCE_ORIGINS = (list, set, frozenset, tuple)

UNION_ORIGINS = (Union, UnionType)

STDLIB_MODULES = frozenset(getattr(sys, "stdlib_module_names", ())) | {
    "builtins", "typing", "datetime", "decimal", "uuid", "collections", "enum",
}


def qualified_name_of(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def is_standard_class(cls: type) -> bool:
    """Builtin or standard-library class (never a user model)"""
    module = getattr(cls, "__module__", "") or ""
    return module.split(".")[0] in STDLIB_MODULES


def _is_sequence_origin(origin: Any) -> bool:
    if origin in SEQUENCE_ORIGINS:
        return True
    return origin in (abc.Sequence, abc.MutableSequence, abc.Set, abc.MutableSet, abc.Collection, abc.Iterable)


def _is_mapping_origin(origin: Any) -> bool:
    return origin in (dict, abc.Mapping, abc.MutableMapping) or (
        isinstance(origin, type) and issubclass(origin, dict)
    )


def describe_annotation(annotation: Any, module: str = "", nested: bool = False) -> TypeRef:
    """
    Build a TypeRef from a type annotation

    Args:
        annotation: Annotation object (or string, for unresolved forward references)
        module: Module of the owning class, used to qualify string annotations
        nested: True when describing a sequence element

    Returns:
        TypeRef describing the annotation
    """
    if isinstance(annotation, str):
        return parse_type_string(annotation, module, nested)

    if isinstance(annotation, typing.ForwardRef):
        return parse_type_string(annotation.__forward_arg__, module, nested)

    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin in UNION_ORIGINS:
        remaining = [arg for arg in args if arg is not NONE_TYPE]
        if len(remaining) == 1:
            return describe_annotation(remaining[0], module, nested)
        return TypeRef("Union", "typing.Union", primitive=True)

    if origin is not None and _is_sequence_origin(origin):
        element = None
        if args and not nested and args[0] is not Ellipsis:
            element = describe_annotation(args[0], module, nested=True)
            if element.sequence:
                element = None
        return TypeRef(origin.__name__, qualified_name_of(origin), primitive=True, sequence=True, element=element)

    if origin is not None and _is_mapping_origin(origin):
        return TypeRef("dict", qualified_name_of(origin), primitive=True)

    if annotation in SEQUENCE_ORIGINS:
        return TypeRef(annotation.__name__, qualified_name_of(annotation), primitive=True, sequence=True)

    if isinstance(annotation, type):
        if issubclass(annotation, enum.Enum):
            return TypeRef(
                annotation.__name__,
                qualified_name_of(annotation),
                primitive=True,
                enum_values=tuple(member.name for member in annotation),
            )
        if annotation.__name__ in BINARY_TYPE_NAMES:
            return TypeRef(annotation.__name__, qualified_name_of(annotation), primitive=True)
        if _is_mapping_origin(annotation):
            return TypeRef("dict", qualified_name_of(annotation), primitive=True)
        return TypeRef(
            annotation.__name__,
            qualified_name_of(annotation),
            primitive=is_standard_class(annotation),
        )

    # Any, Literal[...], TypeVar...
    name = getattr(annotation, "_name", None) or getattr(annotation, "__name__", None) or str(annotation)
    return TypeRef(name, str(annotation), primitive=True)


def _class_annotations(cls: type) -> Dict[str, Any]:
    """Resolved annotations, falling back to raw ones when forward refs cannot be resolved"""
    try:
        return typing.get_type_hints(cls)
    except Exception as e:
        logger.debug(f"Could not resolve annotations of {cls.__name__}: {e}")

    annotations = {}
    for klass in reversed(cls.__mro__):
        annotations.update(getattr(klass, "__annotations__", {}) or {})
    return annotations


def describe_class(cls: type) -> TypeDescriptor:
    """
    Describe a Python class as a TypeDescriptor

    Dataclasses contribute their fields (ClassVar excluded by dataclasses);
    other classes contribute their annotated attributes.
    """
    if not isinstance(cls, type):
        raise TypeError(f"Expected a class, got {type(cls).__name__}")

    annotations = _class_annotations(cls)

    if dataclasses.is_dataclass(cls):
        names = [f.name for f in dataclasses.fields(cls)]
    else:
        names = [
            name for name, annotation in annotations.items()
            if not name.startswith("__") and get_origin(annotation) is not typing.ClassVar
            and not (isinstance(annotation, str) and annotation.startswith(("ClassVar", "typing.ClassVar")))
        ]

    fields = []
    for name in names:
        annotation = annotations.get(name, Any)
        fields.append(FieldDescriptor(name, describe_annotation(annotation, cls.__module__)))

    return TypeDescriptor(cls.__name__, qualified_name_of(cls), tuple(fields))


def describe_classes(*classes: type) -> List[TypeDescriptor]:
    return [describe_class(cls) for cls in classes]

