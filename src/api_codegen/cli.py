"""CLI entry point for api-codegen."""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click
import yaml

from api_codegen.config import DEFAULT_OUTPUT_DIR, InputConfig, load_config, merge_with_cli_args
from api_codegen.errors import ApiCodegenError, ConfigError
from api_codegen.generator.base import default_generator_registry
from api_codegen.hooks import run_hook
from api_codegen.parser.registry import default_parser_registry
from api_codegen.pipeline import parse_input, resolve_format, run_generations


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Turn package errors into click errors (exit status 1, 'Error: ...')."""
    try:
        yield
    except ApiCodegenError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """API Codegen: generate typed clients and routes from OpenAPI documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("-s", "--spec", type=click.Path(path_type=Path), default=None, help="OpenAPI document (YAML or JSON). Overrides the configured input.")
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None, help="Output directory for generated files.")
@click.option("-c", "--config", "config_path", type=click.Path(path_type=Path), default=None, help="Path to the generator config file.")
def generate(spec: Path | None, output: Path | None, config_path: Path | None):
    """Full pipeline: before hooks -> parse -> every enabled generator -> after hooks."""
    with _reported_errors():
        config = merge_with_cli_args(load_config(config_path), spec, output)
        if config.input is None:
            raise ConfigError("No input source specified. Use --spec or configure input in the config file.")

        parser_registry = default_parser_registry()
        format_name = resolve_format(config.input, parser_registry)
        click.echo(f"Reading {config.input.source} (format: {format_name})...")
        schema_ir = parse_input(config.input, parser_registry)
        click.echo(
            f"Parsed {len(schema_ir.schemas)} schemas and {len(schema_ir.operations)} operations"
            f" ({len(schema_ir.warnings)} warnings)."
        )

        output_dir = config.output or DEFAULT_OUTPUT_DIR
        output_dir.mkdir(parents=True, exist_ok=True)

        for hook in config.hooks.before_generate:
            click.echo(f"Running before hook: {hook}")
            run_hook(hook)

        written = run_generations(schema_ir, config.generations, output_dir, default_generator_registry())
        for path in written:
            click.echo(f"  Created {path}")

        for hook in config.hooks.after_generate:
            click.echo(f"Running after hook: {hook}")
            run_hook(hook)

    if written:
        click.echo(f"Done! Generated {len(written)} file(s) in {output_dir}")
    else:
        click.echo("No generators were enabled. Check your configuration.")


@main.command("inspect")
@click.argument("doc_path", type=click.Path(path_type=Path))
@click.option("--format", "fmt", default=None, help="Input format. Detected from the file extension when omitted.")
@click.option("--as", "dump_as", default="json", type=click.Choice(["json", "yaml"]), help="Serialization of the dumped IR.")
def inspect_ir(doc_path: Path, fmt: str | None, dump_as: str):
    """Parse a document and print its intermediate representation."""
    with _reported_errors():
        schema_ir = parse_input(InputConfig(source=doc_path, format=fmt), default_parser_registry())

    data = schema_ir.model_dump(mode="json")
    if dump_as == "yaml":
        click.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True))
    else:
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@main.command("list-generators")
def list_generators():
    """List the registered generators."""
    registry = default_generator_registry()
    for name in registry.names():
        click.echo(f"{name} (.{registry.require(name).file_extension})")
