"""Jinja2 rendering for template-driven generators.

Templates live in ``api_codegen/templates/<generator>/client.<ext>.j2``. A
generation target can point ``template`` at another directory holding a file
of the same name, or straight at a template file.
"""

import keyword
import logging
import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, TemplateNotFound

from api_codegen.config import GenerationConfig
from api_codegen.errors import GenerationError
from api_codegen.generator.base import GeneratedOutput, Generator
from api_codegen.generator.types import TypeTarget, project
from api_codegen.parser.base import OperationDefinition, SchemaIR, SchemaReference, TypeInfo

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
DEFAULT_BASE_URL = "http://localhost"


def _words(value: str) -> list[str]:
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", value)
    return [w for w in re.split(r"[^A-Za-z0-9]+", value) if w]


def snake_case(value: str) -> str:
    return "_".join(w.lower() for w in _words(value))


def pascal_case(value: str) -> str:
    return "".join(w[:1].upper() + w[1:] for w in _words(value))


def camel_case(value: str) -> str:
    pascal = pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


def python_name(value: str) -> str:
    """snake_case ``value``, with a trailing underscore when it is a Python keyword."""
    name = snake_case(value)
    return f"{name}_" if keyword.iskeyword(name) else name


def create_environment(template_dir: Path) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["snake_case"] = snake_case
    env.filters["pascal_case"] = pascal_case
    env.filters["camel_case"] = camel_case
    env.filters["python_name"] = python_name
    return env


def _link_type(link: SchemaReference) -> TypeInfo:
    base = TypeInfo.reference_to(link.name) if link.name else TypeInfo.primitive(link.schema_type)
    return TypeInfo.array_of(base) if link.is_array else base


def _parameter_type(schema_type: str) -> TypeInfo:
    if schema_type == "array":
        return TypeInfo.array_of(TypeInfo.primitive("string"))
    return TypeInfo.primitive(schema_type)


def _operation_context(operation: OperationDefinition, target: TypeTarget) -> dict[str, Any]:
    def link(ref: SchemaReference | None) -> dict[str, Any] | None:
        if ref is None:
            return None
        return {
            "name": ref.name,
            "schema_type": ref.schema_type,
            "is_array": ref.is_array,
            "type": project(_link_type(ref), target),
        }

    return {
        "id": operation.id,
        "method": operation.method.value,
        "path": operation.path,
        "description": operation.description,
        "tags": operation.tags,
        "parameters": [
            {
                "name": p.name,
                "location": p.location.value,
                "required": p.required,
                "schema_type": p.schema_type,
                "type": project(_parameter_type(p.schema_type), target),
                "description": p.description,
            }
            for p in operation.parameters
        ],
        "request_body": link(operation.request_body),
        "response": link(operation.response),
    }


def build_context(schema_ir: SchemaIR, config: GenerationConfig, target: TypeTarget) -> dict[str, Any]:
    """Flatten the IR into plain dicts with every type projected for ``target``."""
    metadata = schema_ir.metadata
    return {
        "api_title": metadata.title,
        "api_version": metadata.version,
        "api_description": metadata.description,
        "base_url": metadata.base_url or DEFAULT_BASE_URL,
        "schemas": [
            {
                "name": schema.name,
                "description": schema.description,
                "properties": [
                    {
                        "name": field.name,
                        "type": project(field.type_info, target),
                        "required": field.required,
                        "description": field.description,
                    }
                    for field in schema.fields
                ],
            }
            for schema in schema_ir.schemas
        ],
        "operations": [_operation_context(op, target) for op in schema_ir.operations],
        "options": config.options,
    }


class TemplateGenerator(Generator):
    """Generator that renders ``client.<ext>.j2`` with a projected IR context."""

    target: TypeTarget

    @property
    def template_name(self) -> str:
        return f"client.{self.file_extension}.j2"

    def resolve_template(self, config: GenerationConfig) -> tuple[Path, str]:
        if config.template is None:
            return TEMPLATES_DIR / self.name, self.template_name
        template = Path(config.template)
        if template.is_file():
            return template.parent, template.name
        return template, self.template_name

    def generate(self, schema_ir: SchemaIR, config: GenerationConfig) -> GeneratedOutput:
        template_dir, template_name = self.resolve_template(config)
        logger.debug("Rendering %s from %s", template_name, template_dir)

        env = create_environment(template_dir)
        context = build_context(schema_ir, config, self.target)
        try:
            content = env.get_template(template_name).render(**context)
        except TemplateNotFound as exc:
            raise GenerationError(self.name, f"template not found: {template_dir / str(exc)}") from exc
        except TemplateError as exc:
            raise GenerationError(self.name, f"template error: {exc}") from exc
        return self._output(schema_ir, config, content)
