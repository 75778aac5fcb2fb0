"""Python client with pydantic models, rendered from a template."""

from api_codegen.generator.templates import TemplateGenerator
from api_codegen.generator.types import TypeTarget


class PythonGenerator(TemplateGenerator):
    target = TypeTarget.PYTHON

    @property
    def name(self) -> str:
        return "python"

    @property
    def file_extension(self) -> str:
        return "py"
