"""Go client with typed structs, rendered from a template."""

from api_codegen.config import GenerationConfig
from api_codegen.errors import ConfigError
from api_codegen.generator.templates import TemplateGenerator
from api_codegen.generator.types import TypeTarget


class GolangGenerator(TemplateGenerator):
    target = TypeTarget.GOLANG

    @property
    def name(self) -> str:
        return "golang"

    @property
    def file_extension(self) -> str:
        return "go"

    def validate_config(self, config: GenerationConfig) -> None:
        package = config.options.get("packageName")
        if package is not None and not (isinstance(package, str) and package.isidentifier()):
            raise ConfigError(f"golang: packageName must be a Go identifier, got {package!r}")
