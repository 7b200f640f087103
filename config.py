"""Configuração da aplicação."""
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

DEFAULT_EXCLUDED_MODELS = [
    "AObjCPT",
    "ObjNwtPrcAux",
    "ObjNwtDto",
    "Dates",
    "CInsConstant",
    "AObjCCT",
]

DEFAULT_EXCLUDED_FIELDS = [
    "atrPT",  # internal list wrapper
    "serialVersionUID",
    "oTrnPrcS",
]


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.getenv(name)
    if value is None:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class DescriptionSourceConfig:
    """Configuração da fonte de descrições de campos."""

    database: Optional[str] = None  # sqlite file
    api_url: str = ""
    locale: str = "en_US"
    timeout: int = 10

    @classmethod
    def from_env(cls) -> "DescriptionSourceConfig":
        """Carrega config de variáveis de ambiente."""
        return cls(
            database=os.getenv("SWAGGERGEN_DESCRIPTIONS_DB") or None,
            api_url=os.getenv("SWAGGERGEN_DESCRIPTIONS_URL", ""),
            locale=os.getenv("SWAGGERGEN_DESCRIPTIONS_LOCALE", "en_US"),
            timeout=int(os.getenv("SWAGGERGEN_DESCRIPTIONS_TIMEOUT", "10")),
        )

    @property
    def enabled(self) -> bool:
        return bool(self.database or self.api_url)


@dataclass
class GeneratorConfig:
    """Configuração do gerador."""

    source_dir: str = "./model"
    types_file: str = ""
    output_file: str = "swagger.yaml"
    definitions_fragment: str = "source_definitions.txt"
    api_title: str = "API TRON Objects"
    api_description: str = "API TRON Objects"
    api_version: str = "1.0.0"
    excluded_models: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_MODELS))
    excluded_fields: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_FIELDS))
    transitive: bool = True
    strict: bool = False
    descriptions: DescriptionSourceConfig = None

    def __post_init__(self):
        """Inicializa valores padrão."""
        if self.descriptions is None:
            self.descriptions = DescriptionSourceConfig.from_env()
        elif isinstance(self.descriptions, dict):
            self.descriptions = DescriptionSourceConfig(**self.descriptions)

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Carrega config de variáveis de ambiente."""
        return cls(
            source_dir=os.getenv("SWAGGERGEN_SOURCE_DIR", "./model"),
            types_file=os.getenv("SWAGGERGEN_TYPES_FILE", ""),
            output_file=os.getenv("SWAGGERGEN_OUTPUT_FILE", "swagger.yaml"),
            definitions_fragment=os.getenv("SWAGGERGEN_FRAGMENT", "source_definitions.txt"),
            api_title=os.getenv("SWAGGERGEN_API_TITLE", "API TRON Objects"),
            api_description=os.getenv("SWAGGERGEN_API_DESCRIPTION", "API TRON Objects"),
            api_version=os.getenv("SWAGGERGEN_API_VERSION", "1.0.0"),
            excluded_models=_env_list("SWAGGERGEN_EXCLUDED_MODELS", DEFAULT_EXCLUDED_MODELS),
            excluded_fields=_env_list("SWAGGERGEN_EXCLUDED_FIELDS", DEFAULT_EXCLUDED_FIELDS),
            transitive=_env_bool("SWAGGERGEN_TRANSITIVE", True),
            strict=_env_bool("SWAGGERGEN_STRICT", False),
            descriptions=DescriptionSourceConfig.from_env(),
        )

    @classmethod
    def from_file(cls, path: Path) -> "GeneratorConfig":
        """
        Carrega config de um arquivo YAML.

        Keys mirror the dataclass fields; unknown keys are rejected.
        """
        with open(path, "r", encoding="utf-8") as f:
            data: Dict[str, Any] = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")

        return cls(**data)


# Instância global
app_config = GeneratorConfig.from_env()
