"""Parse one input document and run every enabled generation target against it."""

import logging
from pathlib import Path

from api_codegen.config import GenerationConfig, InputConfig
from api_codegen.generator.base import GeneratorRegistry
from api_codegen.parser.base import SchemaIR
from api_codegen.parser.openapi import FORMAT_NAME as DEFAULT_FORMAT
from api_codegen.parser.registry import ParserRegistry

logger = logging.getLogger(__name__)


def resolve_format(input_config: InputConfig, registry: ParserRegistry) -> str:
    """Explicit format first, then the file extension, then OpenAPI."""
    if input_config.format:
        return input_config.format
    return registry.detect_format(input_config.source) or DEFAULT_FORMAT


def parse_input(input_config: InputConfig, registry: ParserRegistry) -> SchemaIR:
    format_name = resolve_format(input_config, registry)
    parser = registry.require(format_name)
    logger.debug("Parsing %s as %s", input_config.source, format_name)
    return parser.parse(Path(input_config.source), input_config.options)


def run_generations(
    schema_ir: SchemaIR,
    generations: list[GenerationConfig],
    output_dir: Path,
    registry: GeneratorRegistry,
) -> list[Path]:
    """Generate and write every enabled target, in order. Returns the written paths."""
    written = []
    for gen_config in generations:
        if not gen_config.enabled:
            logger.info("Skipping disabled generator: %s", gen_config.generator)
            continue

        generator = registry.require(gen_config.generator)
        generator.validate_config(gen_config)
        output = generator.generate(schema_ir, gen_config)

        output_path = output_dir / output.filename
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(output.content, encoding="utf-8")
        logger.info("Generated %s with %s", output_path, gen_config.generator)
        written.append(output_path)
    return written
