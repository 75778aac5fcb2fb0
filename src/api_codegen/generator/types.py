"""Type projection: render a TypeInfo tree as a target-language type expression.

There is one independent function per target type system. They share the
precedence rule through ``TypeInfo.kind`` (array, reference, enum, primitive)
but nothing else. The targets disagree on dates, integer width, references
and objects, so each keeps its own table.

- ``to_zod``: Zod validation schemas.
- ``to_python``: Python typing annotations.
- ``to_golang``: Go types with sized numbers.
- ``to_zod_strict``: the stricter Zod dialect used by the HTTP route
  generator. It appends ``Schema`` to reference names, uses datetime-only
  strings, integer-checked numbers and ``z.record`` for free-form objects.
"""

from enum import Enum
from typing import Callable

from api_codegen.parser.base import TypeInfo

REFERENCE_SUFFIX = "Schema"


class TypeTarget(str, Enum):
    ZOD = "zod"
    PYTHON = "python"
    GOLANG = "golang"
    ZOD_STRICT = "zod_strict"


def _zod_enum(values: list[str]) -> str:
    members = ", ".join(f'"{value}"' for value in values)
    return f"z.enum([{members}])"


# -- Zod ------------------------------------------------------------------------

_ZOD_STRING_FORMATS = {
    "date": "z.date().or(z.string())",
    "date-time": "z.date().or(z.string())",
    "email": "z.string().email()",
    "uuid": "z.string().uuid()",
    "uri": "z.string().url()",
}

_ZOD_PRIMITIVES = {
    "string": "z.string()",
    "integer": "z.number()",
    "number": "z.number()",
    "boolean": "z.boolean()",
    "object": "z.any()",
}


def to_zod(type_info: TypeInfo) -> str:
    kind = type_info.kind
    if kind == "array":
        item = type_info.array_item_type
        return f"z.array({to_zod(item) if item else 'z.any()'})"
    if kind == "reference":
        return type_info.reference
    if kind == "enum":
        return _zod_enum(type_info.enum_values)
    if type_info.openapi_type == "string" and type_info.format in _ZOD_STRING_FORMATS:
        return _ZOD_STRING_FORMATS[type_info.format]
    return _ZOD_PRIMITIVES.get(type_info.openapi_type, "z.any()")


# -- Python ---------------------------------------------------------------------

_PYTHON_PRIMITIVES = {
    "string": "str",
    "integer": "int",
    "number": "float",
    "boolean": "bool",
    "object": "Dict[str, Any]",
}


def to_python(type_info: TypeInfo) -> str:
    kind = type_info.kind
    if kind == "array":
        item = type_info.array_item_type
        return f"List[{to_python(item) if item else 'Any'}]"
    if kind == "reference":
        return type_info.reference
    if kind == "enum":
        return "str"
    if type_info.openapi_type == "string" and type_info.format in ("date", "date-time"):
        return "datetime"
    return _PYTHON_PRIMITIVES.get(type_info.openapi_type, "Any")


# -- Go -------------------------------------------------------------------------

_GO_INTEGER_FORMATS = {"int32": "int32", "int64": "int64"}
_GO_NUMBER_FORMATS = {"float": "float32", "double": "float64"}

_GO_PRIMITIVES = {
    "string": "string",
    "boolean": "bool",
    "object": "map[string]interface{}",
}


def to_golang(type_info: TypeInfo) -> str:
    kind = type_info.kind
    if kind == "array":
        item = type_info.array_item_type
        return f"[]{to_golang(item) if item else 'interface{}'}"
    if kind == "reference":
        return type_info.reference
    if kind == "enum":
        return "string"
    if type_info.openapi_type == "integer":
        return _GO_INTEGER_FORMATS.get(type_info.format, "int")
    if type_info.openapi_type == "number":
        return _GO_NUMBER_FORMATS.get(type_info.format, "float64")
    return _GO_PRIMITIVES.get(type_info.openapi_type, "interface{}")


# -- Zod, strict HTTP route dialect ----------------------------------------------

_ZOD_STRICT_STRING_FORMATS = {
    "date": "z.string().datetime()",
    "date-time": "z.string().datetime()",
    "email": "z.string().email()",
    "uuid": "z.string().uuid()",
    "uri": "z.string().url()",
    "url": "z.string().url()",
}

_ZOD_STRICT_PRIMITIVES = {
    "string": "z.string()",
    "integer": "z.number().int()",
    "number": "z.number()",
    "boolean": "z.boolean()",
    "object": "z.record(z.any())",
}

_ZOD_STRICT_PARAMETERS = {
    "integer": "z.coerce.number().int()",
    "number": "z.coerce.number()",
    "boolean": "z.coerce.boolean()",
}


def to_zod_strict(type_info: TypeInfo) -> str:
    kind = type_info.kind
    if kind == "array":
        item = type_info.array_item_type
        return f"z.array({to_zod_strict(item) if item else 'z.any()'})"
    if kind == "reference":
        return f"{type_info.reference}{REFERENCE_SUFFIX}"
    if kind == "enum":
        return _zod_enum(type_info.enum_values)
    if type_info.openapi_type == "string" and type_info.format in _ZOD_STRICT_STRING_FORMATS:
        return _ZOD_STRICT_STRING_FORMATS[type_info.format]
    return _ZOD_STRICT_PRIMITIVES.get(type_info.openapi_type, "z.any()")


def param_to_zod_strict(schema_type: str) -> str:
    """Project a coarse parameter type; query and path values arrive as strings."""
    return _ZOD_STRICT_PARAMETERS.get(schema_type, "z.string()")


_PROJECTIONS: dict[TypeTarget, Callable[[TypeInfo], str]] = {
    TypeTarget.ZOD: to_zod,
    TypeTarget.PYTHON: to_python,
    TypeTarget.GOLANG: to_golang,
    TypeTarget.ZOD_STRICT: to_zod_strict,
}


def project(type_info: TypeInfo, target: TypeTarget | str) -> str:
    """Render ``type_info`` for ``target`` (a TypeTarget or its string value)."""
    return _PROJECTIONS[TypeTarget(target)](type_info)
