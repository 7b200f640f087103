"""Modelos para representar definições Swagger geradas a partir de tipos."""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


class FieldKind(str, Enum):
    """Classification of a single field in a model"""
    PRIMITIVE = "primitive"
    REFERENCE = "reference"
    ARRAY_OF_REFERENCE = "array_of_reference"
    ARRAY_OF_PRIMITIVE = "array_of_primitive"
    BINARY = "binary"
    OPAQUE_MAP = "opaque_map"
    CYCLE_STUB = "cycle_stub"


@dataclass(frozen=True)
class SchemaType:
    """Swagger primitive type (type + optional format)."""

    type: str
    format: Optional[str] = None
    additional_properties: Optional[str] = None  # value type for maps
    enum: Tuple[str, ...] = ()

    def is_map(self) -> bool:
        return self.type == "object" and self.additional_properties is not None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        if self.format:
            data["format"] = self.format
        if self.additional_properties:
            data["additionalProperties"] = {"type": self.additional_properties}
        if self.enum:
            data["enum"] = list(self.enum)
        return data


@dataclass(frozen=True)
class FieldClassification:
    """Representa a classificação de um campo."""

    kind: FieldKind
    schema_type: Optional[SchemaType] = None
    model_name: Optional[str] = None
    fallback: bool = False

    @classmethod
    def primitive(cls, schema_type: SchemaType, fallback: bool = False) -> "FieldClassification":
        return cls(FieldKind.PRIMITIVE, schema_type=schema_type, fallback=fallback)

    @classmethod
    def reference(cls, model_name: str) -> "FieldClassification":
        return cls(FieldKind.REFERENCE, model_name=model_name)

    @classmethod
    def array_of_reference(cls, model_name: str) -> "FieldClassification":
        return cls(FieldKind.ARRAY_OF_REFERENCE, model_name=model_name)

    @classmethod
    def array_of_primitive(cls, schema_type: SchemaType, fallback: bool = False) -> "FieldClassification":
        return cls(FieldKind.ARRAY_OF_PRIMITIVE, schema_type=schema_type, fallback=fallback)

    @classmethod
    def binary(cls) -> "FieldClassification":
        return cls(FieldKind.BINARY, schema_type=SchemaType("string", "binary"))

    @classmethod
    def opaque_map(cls, schema_type: SchemaType) -> "FieldClassification":
        return cls(FieldKind.OPAQUE_MAP, schema_type=schema_type)

    @classmethod
    def cycle_stub(cls, model_name: str) -> "FieldClassification":
        return cls(FieldKind.CYCLE_STUB, model_name=model_name)

    def is_reference(self) -> bool:
        """True for fields rendered as a single $ref"""
        return self.kind in (FieldKind.REFERENCE, FieldKind.CYCLE_STUB)

    def is_array(self) -> bool:
        return self.kind in (FieldKind.ARRAY_OF_REFERENCE, FieldKind.ARRAY_OF_PRIMITIVE)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            "kind": self.kind.value,
            "schema_type": self.schema_type.to_dict() if self.schema_type else None,
            "model_name": self.model_name,
            "fallback": self.fallback,
        }


@dataclass(frozen=True)
class Model:
    """
    Field map of one analyzed type.

    ``fields`` is a read-only view; declaration order is preserved.
    A cycle stub model has a single entry keyed by the qualified name of the
    type, classified as CYCLE_STUB.
    """

    name: str
    qualified_name: str
    fields: Mapping[str, FieldClassification] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def stub(cls, name: str, qualified_name: str) -> "Model":
        return cls(name, qualified_name, {qualified_name: FieldClassification.cycle_stub(name)})

    @property
    def is_cycle_stub(self) -> bool:
        if len(self.fields) != 1:
            return False
        classification = self.fields.get(self.qualified_name)
        return classification is not None and classification.kind == FieldKind.CYCLE_STUB

    def is_empty(self) -> bool:
        return len(self.fields) == 0

    def references(self) -> Dict[str, str]:
        """Return field name -> referenced model name for every $ref field."""
        return {
            name: classification.model_name
            for name, classification in self.fields.items()
            if classification.model_name
        }

    def to_dict(self) -> Dict[str, Any]:
        """Converte para dicionário."""
        return {
            "name": self.name,
            "qualified_name": self.qualified_name,
            "fields": {k: v.to_dict() for k, v in self.fields.items()},
        }
