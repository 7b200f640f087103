#!/usr/bin/env python3
"""Swagger model generator - Entry point."""
import logging
from dataclasses import replace

import click
from colorama import Fore, Style, init

from config import GeneratorConfig, app_config
from swaggergen.analyzer.object_analyzer import UnknownTypeError
from swaggergen.cli.generator_cli import GeneratorCLI
from swaggergen.exporter.swagger_writer import SchemaWriteError
from swaggergen.introspection.description_file import TypeDescriptionError

# Initialize colorama
init(autoreset=True)


def print_banner():
    """Print application banner."""
    click.echo(f"{Fore.CYAN}{'=' * 44}")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Swagger Model Generator{Fore.CYAN}              ║")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Model definitions from types{Fore.CYAN}         ║")
    click.echo(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    click.echo()


def apply_overrides(config: GeneratorConfig, **overrides) -> GeneratorConfig:
    """Set every option the user actually passed."""
    for name, value in overrides.items():
        if value is not None:
            setattr(config, name, value)
    return config


def run_safely(action):
    """Turn generation errors into a clean CLI failure."""
    try:
        return action()
    except SchemaWriteError as e:
        for error in e.errors:
            click.echo(f"{Fore.RED}   • {error}", err=True)
        raise click.ClickException(str(e))
    except (UnknownTypeError, TypeDescriptionError, FileNotFoundError) as e:
        raise click.ClickException(str(e))


@click.group()
@click.version_option(version="0.1.0")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False), help="YAML config file")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, config_file, verbose):
    """Swagger Model Generator - Build Swagger definitions from model types."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        ctx.obj = GeneratorConfig.from_file(config_file) if config_file else replace(app_config)
    except (ValueError, TypeError) as e:
        raise click.ClickException(f"Invalid config: {e}")


def source_options(command):
    """Options shared by every command that discovers types."""
    command = click.option("--source", "source_dir", type=click.Path(exists=True, file_okay=False),
                           help="Root directory of the model sources")(command)
    command = click.option("--types-file", type=click.Path(exists=True, dir_okay=False),
                           help="YAML/JSON type description file (used instead of --source)")(command)
    return command


@cli.command()
@source_options
@click.option("--output", "output_file", type=click.Path(dir_okay=False), help="Output Swagger file")
@click.option("--fragment", "definitions_fragment", type=click.Path(dir_okay=False),
              help="Pre-existing definitions spliced into the document")
@click.option("--strict/--lenient", default=None, help="Fail on unmapped field types")
@click.option("--transitive/--no-transitive", default=None, help="Analyze referenced types too")
@click.pass_obj
def generate(config, source_dir, types_file, output_file, definitions_fragment, strict, transitive):
    """Generate the Swagger document."""
    print_banner()
    apply_overrides(
        config,
        source_dir=source_dir,
        types_file=types_file,
        output_file=output_file,
        definitions_fragment=definitions_fragment,
        strict=strict,
        transitive=transitive,
    )
    run_safely(GeneratorCLI(config).generate)


@cli.command()
@source_options
@click.pass_obj
def list_types(config, source_dir, types_file):
    """List discovered types."""
    print_banner()
    apply_overrides(config, source_dir=source_dir, types_file=types_file)
    run_safely(GeneratorCLI(config).list_types)


@cli.command()
@source_options
@click.pass_obj
def check_refs(config, source_dir, types_file):
    """Report references to models that will not be written."""
    print_banner()
    apply_overrides(config, source_dir=source_dir, types_file=types_file)
    result = run_safely(GeneratorCLI(config).check_references)
    if result.dangling_references:
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
