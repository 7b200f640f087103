"""
Object Analyzer - Classifies the fields of structured types into Swagger models.

Supports:
- Primitive / wrapper types (through the type mapper)
- Nested objects ($ref to another definition)
- Sequences of objects or primitives (one level)
- Byte sequences and untyped maps
- Circular reference prevention (per-run visited set)
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set

from swaggergen.introspection.type_descriptor import FieldDescriptor, TypeDescriptor, TypeRef, TypeRegistry
from swaggergen.mapper.type_mapper import STRING, is_binary, map_primitive
from swaggergen.schema.models import FieldClassification, Model, SchemaType

logger = logging.getLogger(__name__)


def enum_type(type_ref: TypeRef) -> SchemaType:
    """Enumerations are strings restricted to their member names"""
    return SchemaType(STRING.type, enum=type_ref.enum_values)


class UnknownTypeError(ValueError):
    """Raised in strict mode when a field type has no Swagger mapping"""


@dataclass(frozen=True)
class TypeFallback:
    """A field whose type was degraded to string"""
    model: str
    field: str
    type_name: str

    def __str__(self) -> str:
        return f"{self.model}.{self.field}: unmapped type '{self.type_name}' rendered as string"


class VisitedSet:
    """Types in progress or already analyzed during one generation run"""

    def __init__(self):
        self._in_progress: Set[str] = set()
        self._completed: Set[str] = set()

    def start(self, identity: str) -> None:
        self._in_progress.add(identity)

    def finish(self, identity: str) -> None:
        self._in_progress.discard(identity)
        self._completed.add(identity)

    def is_in_progress(self, identity: str) -> bool:
        return identity in self._in_progress

    def is_completed(self, identity: str) -> bool:
        return identity in self._completed

    def clear(self) -> None:
        self._in_progress.clear()
        self._completed.clear()

    def __contains__(self, identity: str) -> bool:
        return identity in self._in_progress or identity in self._completed

    def __len__(self) -> int:
        return len(self._in_progress | self._completed)


class ObjectAnalyzer:
    """
    Analyzes structured types and builds their Swagger models

    One instance covers one generation run: the visited set, the analyzed
    models and the recorded fallbacks all live on the instance.

    Usage:
    ```python
    analyzer = ObjectAnalyzer(registry)
    models = analyzer.analyze_all(registry)
    for fallback in analyzer.fallbacks:
        print(fallback)
    ```
    """

    def __init__(
        self,
        registry: Optional[TypeRegistry] = None,
        transitive: bool = True,
        strict: bool = False,
    ):
        """
        Initialize ObjectAnalyzer

        Args:
            registry: Discovered types, used to follow references
            transitive: Analyze referenced types found in the registry
            strict: Raise UnknownTypeError instead of falling back to string
        """
        self.registry = registry
        self.transitive = transitive
        self.strict = strict
        self.visited = VisitedSet()
        self.models: Dict[str, Model] = {}
        self.fallbacks: List[TypeFallback] = []

    def analyze(self, type_descriptor: TypeDescriptor) -> Model:
        """
        Analyze a type and return its model

        A type already visited in this run yields a cycle stub model instead.

        Args:
            type_descriptor: Type to analyze

        Returns:
            Model mapping each declared field to its classification
        """
        identity = type_descriptor.identity

        # Avoids infinite recursion
        if identity in self.visited:
            return Model.stub(type_descriptor.name, identity)

        self.visited.start(identity)
        try:
            fields: Dict[str, FieldClassification] = {}
            for field in type_descriptor.fields:
                fields[field.name] = self._classify(type_descriptor, field)
        finally:
            self.visited.finish(identity)

        model = Model(type_descriptor.name, identity, fields)
        self._store(model)
        return model

    def analyze_all(self, types: Iterable[TypeDescriptor]) -> Dict[str, Model]:
        """
        Analyze every type (and, in transitive mode, every type they reference)

        Returns:
            Dict of model name -> Model for the whole run
        """
        for type_descriptor in types:
            if type_descriptor.identity in self.visited:
                continue
            self.analyze(type_descriptor)

        logger.info(f"Analyzed {len(self.models)} models ({len(self.fallbacks)} type fallbacks)")
        return dict(self.models)

    def _classify(self, owner: TypeDescriptor, field: FieldDescriptor) -> FieldClassification:
        """Classify a single field"""
        type_ref = field.type

        # Sequences: element type decides
        if type_ref.sequence:
            element = type_ref.element
            if element is None or element.sequence:
                self._record_fallback(owner, field, type_ref.name)
                return FieldClassification.primitive(STRING, fallback=True)

            if not element.primitive:
                self._follow(element)
                return FieldClassification.array_of_reference(element.name)

            if element.enum_values:
                return FieldClassification.array_of_primitive(enum_type(element))

            mapped = map_primitive(element.name)
            if mapped.fallback:
                self._record_fallback(owner, field, element.name)
            return FieldClassification.array_of_primitive(mapped.schema_type, mapped.fallback)

        # Special case for byte arrays
        if is_binary(type_ref.name):
            return FieldClassification.binary()

        # Objects reference their own definitions
        if not type_ref.primitive:
            if self.visited.is_in_progress(self._identity_of(type_ref)):
                return FieldClassification.cycle_stub(type_ref.name)
            self._follow(type_ref)
            return FieldClassification.reference(type_ref.name)

        if type_ref.enum_values:
            return FieldClassification.primitive(enum_type(type_ref))

        mapped = map_primitive(type_ref.name)
        if mapped.fallback:
            self._record_fallback(owner, field, type_ref.name)
            return FieldClassification.primitive(mapped.schema_type, fallback=True)
        if mapped.schema_type.is_map():
            return FieldClassification.opaque_map(mapped.schema_type)
        return FieldClassification.primitive(mapped.schema_type)

    def _identity_of(self, type_ref: TypeRef) -> str:
        if self.registry is not None:
            descriptor = self.registry.resolve(type_ref)
            if descriptor is not None:
                return descriptor.identity
        return type_ref.identity

    def _follow(self, type_ref: TypeRef) -> None:
        """Analyze a referenced type in transitive mode"""
        if not self.transitive or self.registry is None:
            return

        descriptor = self.registry.resolve(type_ref)
        if descriptor is None:
            logger.debug(f"Referenced type not registered: {type_ref.identity}")
            return

        if descriptor.identity not in self.visited:
            self.analyze(descriptor)

    def _record_fallback(self, owner: TypeDescriptor, field: FieldDescriptor, type_name: str) -> None:
        fallback = TypeFallback(owner.name, field.name, type_name)
        if self.strict:
            raise UnknownTypeError(str(fallback))
        logger.debug(str(fallback))
        self.fallbacks.append(fallback)

    def _store(self, model: Model) -> None:
        existing = self.models.get(model.name)
        if existing is not None and existing.qualified_name != model.qualified_name:
            logger.warning(
                f"Duplicate model name {model.name}: keeping {existing.qualified_name}, "
                f"ignoring {model.qualified_name}"
            )
            return
        self.models[model.name] = model
