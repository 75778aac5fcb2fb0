"""Generator interface, generated output model and the generator registry."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from api_codegen.config import GenerationConfig
from api_codegen.errors import UnknownGeneratorError
from api_codegen.parser.base import SchemaIR

_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0"}


class GeneratedOutput(BaseModel):
    """One rendered file. ``content`` is opaque text to everything but the writer."""

    filename: str
    content: str
    metadata: dict[str, str] = {}


class Generator(ABC):
    """Turns a shared, read-only SchemaIR into one output file."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key, e.g. 'typescript'."""

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Extension of the produced file, without the dot."""

    @abstractmethod
    def generate(self, schema_ir: SchemaIR, config: GenerationConfig) -> GeneratedOutput:
        """Render ``schema_ir`` according to ``config``."""

    def validate_config(self, config: GenerationConfig) -> None:
        """Reject a configuration before generating. Accepts everything by default."""

    def _output(self, schema_ir: SchemaIR, config: GenerationConfig, content: str) -> GeneratedOutput:
        return GeneratedOutput(
            filename=config.output_file,
            content=content,
            metadata={
                "generator": self.name,
                "schemas": str(len(schema_ir.schemas)),
                "operations": str(len(schema_ir.operations)),
            },
        )


def option_bool(options: dict[str, Any], key: str, default: bool) -> bool:
    """Read a loosely typed boolean option; unrecognized values fall back to ``default``."""
    value = options.get(key)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    if isinstance(value, int):
        return bool(value)
    return default


def option_str(options: dict[str, Any], key: str, default: str) -> str:
    value = options.get(key)
    return value if isinstance(value, str) and value else default


class GeneratorRegistry:
    """Maps generator names to instances; re-registering a name replaces it."""

    def __init__(self):
        self._generators: dict[str, Generator] = {}

    def register(self, generator: Generator) -> None:
        self._generators[generator.name] = generator

    def get(self, name: str) -> Generator | None:
        return self._generators.get(name)

    def require(self, name: str) -> Generator:
        generator = self.get(name)
        if generator is None:
            raise UnknownGeneratorError(name, self.names())
        return generator

    def names(self) -> list[str]:
        return sorted(self._generators)


def default_generator_registry() -> GeneratorRegistry:
    """Return a registry with the built-in generators registered."""
    from api_codegen.generator.golang import GolangGenerator
    from api_codegen.generator.python import PythonGenerator
    from api_codegen.generator.typescript import TypeScriptGenerator
    from api_codegen.generator.typescript_adi_http import TypeScriptAdiHttpGenerator

    registry = GeneratorRegistry()
    for generator in (
        TypeScriptGenerator(),
        TypeScriptAdiHttpGenerator(),
        PythonGenerator(),
        GolangGenerator(),
    ):
        registry.register(generator)
    return registry
