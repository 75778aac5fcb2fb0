"""OpenAPI 3.x document parser.

Walks ``components.schemas`` and ``paths`` of an OpenAPI document and builds
the unified IR. References are resolved by name only; the target schema is
never inlined. A reference that cannot be resolved becomes ``"Unknown"`` and
is recorded on ``SchemaIR.warnings`` instead of failing the parse.
"""

import copy
import json
import logging
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from api_codegen.errors import MalformedInputError
from api_codegen.parser.base import (
    FieldDefinition,
    HttpMethod,
    Metadata,
    OperationDefinition,
    OriginalData,
    Parameter,
    ParameterLocation,
    SchemaDefinition,
    SchemaIR,
    SchemaReference,
    TypeInfo,
)
from api_codegen.parser.registry import InputParser

logger = logging.getLogger(__name__)

FORMAT_NAME = "openapi"
UNKNOWN_REFERENCE = "Unknown"
MAX_TYPE_DEPTH = 32

SCHEMA_TYPES = ("string", "number", "integer", "boolean", "object", "array")
PARAMETER_TYPES = ("string", "number", "integer", "boolean", "array")

HTTP_METHODS = {
    "get": HttpMethod.GET,
    "post": HttpMethod.POST,
    "put": HttpMethod.PUT,
    "delete": HttpMethod.DELETE,
    "patch": HttpMethod.PATCH,
    "head": HttpMethod.HEAD,
    "options": HttpMethod.OPTIONS,
}


# -- document shape ---------------------------------------------------------
# Only what parsing needs is checked here; everything else stays loose.


class _Info(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    title: str
    version: str
    description: str | None = None


class _Server(BaseModel):
    model_config = ConfigDict(extra="allow")

    url: str


class _Document(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    openapi: str
    info: _Info
    servers: list[_Server] | None = None
    paths: dict[str, Any] | None = None
    components: dict[str, Any] | None = None


class OpenApiParser(InputParser):
    """Parses OpenAPI 3.x documents written in YAML or JSON."""

    @property
    def format_name(self) -> str:
        return FORMAT_NAME

    @property
    def supported_extensions(self) -> list[str]:
        return ["yaml", "yml", "json"]

    def parse(self, source: Path, options: dict[str, Any] | None = None) -> SchemaIR:
        source = Path(source)
        self.validate(source)

        raw = load_document(source)
        try:
            document = _Document.model_validate(raw)
        except ValidationError as exc:
            raise MalformedInputError(source, _describe_validation_error(exc)) from exc

        extractor = _Extractor(raw)
        schemas = extractor.extract_schemas()
        operations = extractor.extract_operations()

        servers = document.servers or []
        metadata = Metadata(
            title=document.info.title,
            version=document.info.version,
            description=document.info.description,
            base_url=servers[0].url if servers else None,
            custom=vendor_extensions(raw["info"]),
        )
        original = OriginalData(
            format=FORMAT_NAME,
            data=copy.deepcopy(raw),
            extensions={
                f"{FORMAT_NAME}.{key}": value for key, value in vendor_extensions(raw).items()
            },
        )

        logger.info(
            "Parsed %s: %d schemas, %d operations, %d warnings",
            source, len(schemas), len(operations), len(extractor.warnings),
        )
        return SchemaIR(
            metadata=metadata,
            schemas=schemas,
            operations=operations,
            original=original,
            warnings=extractor.warnings,
        )


_BOOL_TAG = "tag:yaml.org,2002:bool"
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class DocumentLoader(yaml.SafeLoader):
    """SafeLoader that resolves plain scalars like YAML 1.2.

    Only ``true``/``false`` become booleans, so enum members such as ``NO``
    or ``on`` stay strings. Dates are never parsed; ``2024-01-15`` stays text.
    """


DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in (_BOOL_TAG, _TIMESTAMP_TAG)]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
DocumentLoader.add_implicit_resolver(
    _BOOL_TAG, re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"), list("tTfF")
)


def load_document(source: Path) -> dict[str, Any]:
    """Deserialize a document: strict JSON for ``.json``, YAML for everything else."""
    try:
        text = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MalformedInputError(source, f"cannot read file: {exc}") from exc

    try:
        if source.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.load(text, Loader=DocumentLoader)
    except json.JSONDecodeError as exc:
        raise MalformedInputError(source, f"invalid JSON: {exc}") from exc
    except yaml.YAMLError as exc:
        raise MalformedInputError(source, f"invalid YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise MalformedInputError(
            source, f"document must be a mapping, got {type(data).__name__}"
        )
    return data


def vendor_extensions(mapping: dict) -> dict[str, Any]:
    """Return the ``x-*`` keys of a mapping, values untouched."""
    return {
        key: value
        for key, value in mapping.items()
        if isinstance(key, str) and key.startswith("x-")
    }


def synthesize_operation_id(method: HttpMethod, path: str) -> str:
    """Build an id like ``get_users_id_posts`` from ``GET /users/{id}/posts``."""
    segments = [segment.replace("{", "").replace("}", "") for segment in path.split("/")]
    return "_".join([method.value.lower()] + [s for s in segments if s])


def _describe_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        problems.append(f"{location}: {error['msg']}")
    return "; ".join(problems)


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _schema_type(schema: dict) -> str:
    declared = schema.get("type")
    if isinstance(declared, list):  # OpenAPI 3.1: ["string", "null"]
        declared = next((t for t in declared if t != "null"), None)
    if declared is None and "properties" in schema:
        return "object"
    return declared if declared in SCHEMA_TYPES else "any"


def _enum_values(values: Any) -> list[str] | None:
    if not isinstance(values, list):
        return None
    members = [str(value) for value in values if value is not None]
    return members or None


def _parameter_type(schema: Any) -> str:
    if not isinstance(schema, dict) or "$ref" in schema:
        return "string"
    declared = _schema_type(schema)
    return declared if declared in PARAMETER_TYPES else "string"


class _Extractor:
    """Single-use walker over one loaded document."""

    def __init__(self, document: dict[str, Any]):
        self.document = document
        components = document.get("components") or {}
        schemas = components.get("schemas")
        self.component_schemas: dict = schemas if isinstance(schemas, dict) else {}
        self.warnings: list[str] = []

    def _warn(self, message: str) -> None:
        self.warnings.append(message)
        logger.warning("%s", message)

    # -- schemas ------------------------------------------------------------

    def extract_schemas(self) -> list[SchemaDefinition]:
        schemas = []
        for name, schema in self.component_schemas.items():
            if not isinstance(schema, dict) or "$ref" in schema:
                logger.debug("Skipping schema %s: not an inline definition", name)
                continue
            logger.debug("Extracting schema %s", name)
            schemas.append(
                SchemaDefinition(
                    name=str(name),
                    fields=self._extract_fields(str(name), schema),
                    description=_text(schema.get("description")),
                    original=copy.deepcopy(schema),
                )
            )
        return schemas

    def _extract_fields(self, owner: str, schema: dict) -> list[FieldDefinition]:
        if _schema_type(schema) != "object":
            return []

        properties = schema.get("properties")
        if not isinstance(properties, dict):
            return []
        required = schema.get("required")
        required_names = (
            {r for r in required if isinstance(r, str)} if isinstance(required, list) else set()
        )

        fields = []
        for field_name, field_schema in properties.items():
            if not isinstance(field_schema, dict):
                field_schema = {}
            is_reference = "$ref" in field_schema
            fields.append(
                FieldDefinition(
                    name=str(field_name),
                    type_info=self._type_info(field_schema, f"{owner}.{field_name}"),
                    required=field_name in required_names,
                    description=None if is_reference else _text(field_schema.get("description")),
                    original=copy.deepcopy(field_schema),
                )
            )
        return fields

    def _type_info(self, schema: dict, context: str, depth: int = 0) -> TypeInfo:
        if "$ref" in schema:
            return TypeInfo.reference_to(self._resolve_reference(schema["$ref"], context))

        openapi_type = _schema_type(schema)
        if openapi_type == "string":
            return TypeInfo(
                openapi_type="string",
                format=_text(schema.get("format")),
                enum_values=_enum_values(schema.get("enum")),
            )
        if openapi_type in ("number", "integer"):
            return TypeInfo.primitive(openapi_type, _text(schema.get("format")))
        if openapi_type in ("boolean", "object"):
            return TypeInfo.primitive(openapi_type)
        if openapi_type == "array":
            return TypeInfo.array_of(self._item_type(schema.get("items"), context, depth + 1))
        return TypeInfo.primitive("any")

    def _item_type(self, items: Any, context: str, depth: int) -> TypeInfo:
        if depth > MAX_TYPE_DEPTH:
            self._warn(
                f"{context}: array nesting deeper than {MAX_TYPE_DEPTH} levels, using 'any'"
            )
            return TypeInfo.primitive("any")
        if not isinstance(items, dict):
            return TypeInfo.primitive("any")
        return self._type_info(items, context, depth)

    def _resolve_reference(self, ref: Any, context: str) -> str:
        name = ref.rsplit("/", 1)[-1] if isinstance(ref, str) else ""
        name = name.replace("~1", "/").replace("~0", "~")
        if name and name in self.component_schemas:
            return name
        self._warn(f"{context}: unresolved reference {ref!r}, using '{UNKNOWN_REFERENCE}'")
        return UNKNOWN_REFERENCE

    # -- operations ---------------------------------------------------------

    def extract_operations(self) -> list[OperationDefinition]:
        operations = []
        paths = self.document.get("paths") or {}
        for path, path_item in paths.items():
            if not isinstance(path_item, dict) or "$ref" in path_item:
                logger.debug("Skipping path %s: not an inline path item", path)
                continue
            shared = path_item.get("parameters")
            for key, method in HTTP_METHODS.items():
                operation = path_item.get(key)
                if isinstance(operation, dict):
                    operations.append(self._extract_operation(str(path), method, operation, shared))
        return operations

    def _extract_operation(
        self, path: str, method: HttpMethod, operation: dict, shared_parameters: Any
    ) -> OperationDefinition:
        operation_id = operation.get("operationId")
        if not isinstance(operation_id, str) or not operation_id:
            operation_id = synthesize_operation_id(method, path)
        logger.debug("Extracting operation %s (%s %s)", operation_id, method.value, path)

        tags = operation.get("tags")
        return OperationDefinition(
            id=operation_id,
            method=method,
            path=path,
            parameters=self._extract_parameters(shared_parameters, operation.get("parameters")),
            request_body=self._extract_request_body(operation.get("requestBody"), operation_id),
            response=self._extract_response(operation.get("responses"), operation_id),
            description=_text(operation.get("description")) or _text(operation.get("summary")),
            tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
            original=copy.deepcopy(operation),
        )

    def _extract_parameters(self, shared: Any, own: Any) -> list[Parameter]:
        # Operation-level entries override path-level ones with the same name and location.
        merged: dict[tuple[str, str], Parameter] = {}
        for entries in (shared, own):
            if not isinstance(entries, list):
                continue
            for entry in entries:
                parameter = self._extract_parameter(entry)
                if parameter is not None:
                    merged[(parameter.name, parameter.location.value)] = parameter
        return list(merged.values())

    def _extract_parameter(self, entry: Any) -> Parameter | None:
        if not isinstance(entry, dict) or "$ref" in entry:
            return None
        name = entry.get("name")
        try:
            location = ParameterLocation(entry.get("in"))
        except ValueError:
            logger.debug("Skipping parameter %s: unsupported location %r", name, entry.get("in"))
            return None
        if not isinstance(name, str):
            return None
        return Parameter(
            name=name,
            location=location,
            required=bool(entry.get("required", False)),
            schema_type=_parameter_type(entry.get("schema")),
            description=_text(entry.get("description")),
        )

    def _extract_request_body(self, body: Any, operation_id: str) -> SchemaReference | None:
        if not isinstance(body, dict) or "$ref" in body:
            return None
        return self._content_reference(body.get("content"), f"{operation_id} request body")

    def _extract_response(self, responses: Any, operation_id: str) -> SchemaReference | None:
        if not isinstance(responses, dict):
            return None
        chosen = next(
            (resp for status, resp in responses.items() if str(status).startswith("2")),
            responses.get("default"),
        )
        if not isinstance(chosen, dict) or "$ref" in chosen:
            return None
        return self._content_reference(chosen.get("content"), f"{operation_id} response")

    def _content_reference(self, content: Any, context: str) -> SchemaReference | None:
        if not isinstance(content, dict) or not content:
            return None
        media = content.get("application/json")
        if media is None:
            media = next(iter(content.values()))
        schema = media.get("schema") if isinstance(media, dict) else None
        if not isinstance(schema, dict):
            return None

        type_info = self._type_info(schema, context)
        if type_info.is_array:
            item = type_info.array_item_type
            return SchemaReference(name=item.reference, schema_type=item.openapi_type, is_array=True)
        return SchemaReference(name=type_info.reference, schema_type=type_info.openapi_type)
