"""
Swagger Writer - Renders analyzed models as a Swagger 2.0 YAML document.

Supports:
- Fixed preamble (swagger version, info, empty paths)
- Verbatim external definitions fragment
- Model and field exclusion lists
- $ref, array, binary, enum and map schemas
- Optional field descriptions
- Atomic write (nothing is written if any field failed to render)
"""

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import yaml

from swaggergen.descriptions.lookup import DescriptionLookup
from swaggergen.schema.models import FieldClassification, FieldKind, Model

logger = logging.getLogger(__name__)

DEFINITIONS_PREFIX = "#/definitions/"
DEFINITIONS_INDENT = "  "


class SchemaWriteError(RuntimeError):
    """Raised when the schema document cannot be rendered or written"""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


def dump_yaml(data: Dict[str, Any]) -> str:
    """Block-style YAML keeping insertion order"""
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True)


def current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


class SwaggerWriter:
    """
    Writes Swagger model definitions

    Usage:
    ```python
    writer = SwaggerWriter(excluded_models=["Dates"], excluded_fields=["serialVersionUID"])
    writer.write(models, Path("swagger.yaml"))
    ```
    """

    def __init__(
        self,
        title: str = "API TRON Objects",
        description: str = "API TRON Objects",
        version: str = "1.0.0",
        excluded_models: Iterable[str] = (),
        excluded_fields: Iterable[str] = (),
        fragment: str = "",
        description_lookup: Optional[DescriptionLookup] = None,
    ):
        """
        Initialize SwaggerWriter

        Args:
            title: API title for the info block
            description: API description for the info block
            version: API version for the info block
            excluded_models: Model names never written
            excluded_fields: Field names never written, in any model
            fragment: Pre-existing definitions spliced verbatim after "definitions:"
            description_lookup: Source of field descriptions
        """
        self.title = title
        self.description = description
        self.version = version
        self.excluded_models = frozenset(excluded_models)
        self.excluded_fields = frozenset(excluded_fields)
        self.fragment = fragment or ""
        self.description_lookup = description_lookup
        self.errors: List[str] = []

    def render(self, models: Mapping[str, Model]) -> str:
        """
        Render the whole document

        Per-field failures do not stop rendering; they are collected in
        ``self.errors``.

        Args:
            models: Model name -> Model

        Returns:
            Document text
        """
        self.errors = []
        lines = dump_yaml(self._preamble()).splitlines()
        lines.append("definitions:")

        if self.fragment:
            lines.extend(self.fragment.rstrip("\n").splitlines())

        definitions = {}
        for model_name in sorted(models):
            model = models[model_name]
            if not self.is_model_included(model_name, model):
                continue
            definitions[model_name] = self._model_schema(model_name, model)

        if definitions:
            lines.extend(DEFINITIONS_INDENT + line for line in dump_yaml(definitions).splitlines())

        return "\n".join(lines) + "\n"

    def write(self, models: Mapping[str, Model], output_file: Path) -> str:
        """
        Render and write the document atomically

        The file gets the permissions of the file it replaces, or the
        default ones for a new file.

        Raises:
            SchemaWriteError: If any field failed to render or the target cannot be written
        """
        logger.info("SwaggerWriter running...")
        content = self.render(models)

        if self.errors:
            raise SchemaWriteError(
                f"{len(self.errors)} field(s) failed to render; {output_file} was not written",
                self.errors,
            )

        output_file = Path(output_file)
        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            if output_file.exists():
                mode = stat.S_IMODE(output_file.stat().st_mode)
            else:
                mode = 0o666 & ~current_umask()

            fd, temp_path = tempfile.mkstemp(prefix=".swagger-", suffix=".tmp", dir=output_file.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                os.chmod(temp_path, mode)
                os.replace(temp_path, output_file)
            except BaseException:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
                raise
        except OSError as e:
            raise SchemaWriteError(f"Cannot write schema document to {output_file}: {e}") from e

        logger.info(f"Swagger document written to {output_file}")
        return content

    def is_model_included(self, model_name: str, model: Model) -> bool:
        """Excluded, empty and cycle stub models are skipped"""
        if model_name in self.excluded_models:
            logger.debug(f"Skipping excluded model {model_name}")
            return False
        if model.is_empty():
            logger.debug(f"Skipping empty model {model_name}")
            return False
        if model.is_cycle_stub:
            logger.debug(f"Skipping cycle stub of {model_name}")
            return False
        return True

    def _preamble(self) -> Dict[str, Any]:
        return {
            "swagger": "2.0",
            "info": {
                "description": self.description,
                "version": self.version,
                "title": self.title,
            },
            "paths": {},
        }

    def _model_schema(self, model_name: str, model: Model) -> Dict[str, Any]:
        properties = {}

        for field_name, classification in model.fields.items():
            if field_name in self.excluded_fields:
                continue
            try:
                properties[field_name] = self._field_schema(field_name, classification)
            except Exception as e:
                message = f"{model_name}.{field_name}: {e}"
                logger.error(message)
                self.errors.append(message)

        # every field excluded still gives a valid definition
        return {"type": "object", "properties": properties}

    def _field_schema(self, field_name: str, classification: FieldClassification) -> Dict[str, Any]:
        """Schema of one property"""
        kind = classification.kind

        if kind == FieldKind.ARRAY_OF_REFERENCE:
            return {"type": "array", "items": {"$ref": DEFINITIONS_PREFIX + self._model_name(classification)}}

        if kind in (FieldKind.REFERENCE, FieldKind.CYCLE_STUB):
            return {"$ref": DEFINITIONS_PREFIX + self._model_name(classification)}

        schema_type = classification.schema_type
        if schema_type is None:
            raise ValueError(f"no schema type for {kind.value} field")

        if kind == FieldKind.ARRAY_OF_PRIMITIVE:
            schema = {"type": "array", "items": schema_type.to_dict()}
        else:
            schema = schema_type.to_dict()

        description = self._find_description(field_name)
        if description:
            schema["description"] = description
        return schema

    @staticmethod
    def _model_name(classification: FieldClassification) -> str:
        if not classification.model_name:
            raise ValueError(f"no model name for {classification.kind.value} field")
        return classification.model_name

    def _find_description(self, field_name: str) -> Optional[str]:
        if self.description_lookup is None:
            return None
        try:
            return self.description_lookup.find_description(field_name)
        except Exception as e:
            logger.warning(f"Description lookup failed for {field_name}: {e}")
            return None


def load_fragment(path: Optional[Path]) -> str:
    """Read the external definitions fragment; a missing file yields an empty fragment"""
    if not path:
        return ""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Cannot read definitions fragment {path}: {e}")
        return ""
