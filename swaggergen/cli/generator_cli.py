"""Command-line driver for Swagger generation."""
import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import click
from colorama import Fore, Style

from config import GeneratorConfig
from swaggergen.analyzer.object_analyzer import ObjectAnalyzer, TypeFallback
from swaggergen.api.description_client import DescriptionClient
from swaggergen.descriptions.lookup import DescriptionLookup, SqlDescriptionLookup
from swaggergen.discovery.source_scanner import build_registry
from swaggergen.exporter.swagger_writer import SwaggerWriter, load_fragment
from swaggergen.introspection.description_file import load_type_descriptions
from swaggergen.introspection.type_descriptor import TypeRegistry
from swaggergen.schema.models import Model
from swaggergen.validator.reference_validator import ReferenceValidator

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of one generation run."""

    models: Dict[str, Model] = field(default_factory=dict)
    fallbacks: List[TypeFallback] = field(default_factory=list)
    discovery_errors: List[str] = field(default_factory=list)
    dangling_references: List[str] = field(default_factory=list)
    output_file: Optional[Path] = None


def load_registry(config: GeneratorConfig) -> TypeRegistry:
    """Build the type registry from the description file, or else from the source tree."""
    if config.types_file:
        return load_type_descriptions(Path(config.types_file))
    return build_registry(Path(config.source_dir))


def create_description_lookup(config: GeneratorConfig) -> Optional[DescriptionLookup]:
    """Description lookup configured for this run, if any."""
    source = config.descriptions
    if not source.enabled:
        return None
    if source.database:
        return SqlDescriptionLookup(sqlite3.connect(source.database), locale=source.locale)
    if source.api_url:
        return DescriptionClient(source.api_url, locale=source.locale, timeout=source.timeout)
    return None


def run_generation(
    config: GeneratorConfig,
    registry: TypeRegistry,
    description_lookup: Optional[DescriptionLookup] = None,
    write: bool = True,
) -> GenerationResult:
    """
    Analyze every registered type and write the Swagger document.

    A fresh analyzer (and visited set) is created per call.

    Raises:
        UnknownTypeError: In strict mode, on the first unmapped type
        SchemaWriteError: If the document cannot be rendered or written
    """
    analyzer = ObjectAnalyzer(registry, transitive=config.transitive, strict=config.strict)
    models = analyzer.analyze_all(registry)

    fragment = load_fragment(Path(config.definitions_fragment)) if config.definitions_fragment else ""
    validator = ReferenceValidator(config.excluded_models, fragment)

    result = GenerationResult(
        models=models,
        fallbacks=list(analyzer.fallbacks),
        discovery_errors=list(registry.errors),
        dangling_references=validator.validate(models, config.excluded_fields),
    )
    for message in result.dangling_references:
        logger.warning(message)

    if write:
        writer = SwaggerWriter(
            title=config.api_title,
            description=config.api_description,
            version=config.api_version,
            excluded_models=config.excluded_models,
            excluded_fields=config.excluded_fields,
            fragment=fragment,
            description_lookup=description_lookup,
        )
        result.output_file = Path(config.output_file)
        writer.write(models, result.output_file)

    return result


class GeneratorCLI:
    """CLI interface for the generator."""

    def __init__(self, config: GeneratorConfig):
        """Initialize CLI."""
        self.config = config

    def print_header(self, title: str):
        """Print a section header."""
        click.echo(f"\n{Fore.CYAN}{'━' * 45}")
        click.echo(f"{Fore.CYAN}{title}")
        click.echo(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}\n")

    def generate(self) -> GenerationResult:
        """Run discovery, analysis and writing, reporting each step."""
        self.print_header("Step 1: Discover Types")
        registry = load_registry(self.config)
        click.echo(f"{Fore.GREEN}✅ {len(registry)} types discovered")
        for error in registry.errors:
            click.echo(f"{Fore.YELLOW}⚠ {error}")

        self.print_header("Step 2: Analyze & Write")
        description_lookup = create_description_lookup(self.config)
        try:
            result = run_generation(self.config, registry, description_lookup)
        finally:
            if description_lookup is not None:
                description_lookup.close()

        click.echo(f"{Fore.GREEN}✅ Swagger written to {result.output_file}")
        click.echo(f"   Models: {len(result.models)}")
        self._report(result)
        return result

    def list_types(self) -> TypeRegistry:
        """Print the discovered types."""
        self.print_header("Discovered Types")
        registry = load_registry(self.config)
        for name, qualified_name in sorted(registry.names().items()):
            descriptor = registry.get(qualified_name)
            click.echo(f"{name:30s} {qualified_name} ({len(descriptor.fields)} fields)")
        for error in registry.errors:
            click.echo(f"{Fore.YELLOW}⚠ {error}")
        return registry

    def check_references(self) -> GenerationResult:
        """Analyze without writing and report dangling references."""
        self.print_header("Reference Check")
        result = run_generation(self.config, load_registry(self.config), write=False)
        self._report(result)
        if not result.dangling_references:
            click.echo(f"{Fore.GREEN}✅ No dangling references")
        return result

    def _report(self, result: GenerationResult):
        if result.fallbacks:
            click.echo(f"{Fore.YELLOW}Type fallbacks ({len(result.fallbacks)}):")
            for fallback in result.fallbacks:
                click.echo(f"{Fore.YELLOW}   • {fallback}")
        if result.dangling_references:
            click.echo(f"{Fore.YELLOW}Dangling references ({len(result.dangling_references)}):")
            for message in result.dangling_references:
                click.echo(f"{Fore.YELLOW}   • {message}")
