"""
Type descriptors - language-neutral view of a structured type.

The analyzer only consumes these objects; they are built by
``python_types.describe_class`` (Python classes) or by
``description_file.load_type_descriptions`` (explicit type descriptions).
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeRef:
    """Descriptor of a field's declared type"""
    name: str  # short name, e.g. "Integer", "Address", "List"
    qualified_name: str = ""
    primitive: bool = True
    sequence: bool = False
    element: Optional["TypeRef"] = None  # element type of a sequence, if resolvable
    enum_values: Tuple[str, ...] = ()  # member names of an enumeration

    @property
    def identity(self) -> str:
        return self.qualified_name or self.name


@dataclass(frozen=True)
class FieldDescriptor:
    """A declared field: name plus type"""
    name: str
    type: TypeRef


@dataclass(frozen=True)
class TypeDescriptor:
    """A structured type: identity plus declared fields, in declaration order"""
    name: str
    qualified_name: str
    fields: Tuple[FieldDescriptor, ...] = ()

    @property
    def identity(self) -> str:
        return self.qualified_name or self.name

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]


class TypeRegistry:
    """
    Registry of discovered types (name -> TypeDescriptor).

    Built once by discovery and injected into the analyzer. Lookups accept
    either the qualified name or the short name.
    """

    def __init__(self):
        self._types: Dict[str, TypeDescriptor] = {}
        self._short_names: Dict[str, str] = {}
        self.errors: List[str] = []

    def register(self, descriptor: TypeDescriptor) -> None:
        """Register a descriptor. A short name already taken by another type is not rebound."""
        self._types[descriptor.identity] = descriptor

        existing = self._short_names.get(descriptor.name)
        if existing and existing != descriptor.identity:
            logger.warning(
                f"Duplicate model name {descriptor.name}: keeping {existing}, ignoring {descriptor.identity}"
            )
            return
        self._short_names[descriptor.name] = descriptor.identity

    def add_error(self, message: str) -> None:
        logger.error(message)
        self.errors.append(message)

    def get(self, name: str) -> Optional[TypeDescriptor]:
        """Get descriptor by qualified name or short name"""
        if name in self._types:
            return self._types[name]
        qualified = self._short_names.get(name)
        if qualified:
            return self._types.get(qualified)
        return None

    def resolve(self, type_ref: TypeRef) -> Optional[TypeDescriptor]:
        """Resolve a field type to a registered descriptor"""
        if type_ref.qualified_name and type_ref.qualified_name in self._types:
            return self._types[type_ref.qualified_name]
        return self.get(type_ref.name)

    def names(self) -> Dict[str, str]:
        """Short name -> qualified name, for every registered model name"""
        return dict(self._short_names)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)
