"""TypeScript client with Zod schemas, rendered from a template."""

from api_codegen.generator.templates import TemplateGenerator
from api_codegen.generator.types import TypeTarget


class TypeScriptGenerator(TemplateGenerator):
    target = TypeTarget.ZOD

    @property
    def name(self) -> str:
        return "typescript"

    @property
    def file_extension(self) -> str:
        return "ts"
