"""Unified intermediate representation (IR) for parsed API documents.

Every input parser converts its source document into these models. Every
generator reads them. The IR is built once per run and never mutated
afterwards, so all models are frozen.
"""

from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class ParameterLocation(str, Enum):
    QUERY = "query"
    PATH = "path"
    HEADER = "header"
    COOKIE = "cookie"


class TypeInfo(_Frozen):
    """A recursive type node.

    Exactly one interpretation is active when a node is rendered. The checks
    run in a fixed order: array, then reference, then enum, then the plain
    primitive with its format. Use :attr:`kind` instead of re-deriving the order.
    """

    openapi_type: str  # string / number / integer / boolean / object / array / any
    format: str | None = None  # date-time, int64, email, ...
    is_array: bool = False
    array_item_type: "TypeInfo | None" = None
    reference: str | None = None  # name of another SchemaDefinition
    enum_values: list[str] | None = None

    @classmethod
    def primitive(cls, openapi_type: str, format: str | None = None) -> "TypeInfo":
        return cls(openapi_type=openapi_type, format=format)

    @classmethod
    def array_of(cls, item: "TypeInfo | None") -> "TypeInfo":
        return cls(openapi_type="array", is_array=True, array_item_type=item)

    @classmethod
    def reference_to(cls, name: str) -> "TypeInfo":
        return cls(openapi_type="object", reference=name)

    @property
    def kind(self) -> str:
        """Return the active interpretation: array, reference, enum or primitive."""
        if self.is_array:
            return "array"
        if self.reference is not None:
            return "reference"
        if self.enum_values:
            return "enum"
        return "primitive"

    def walk(self) -> Iterator["TypeInfo"]:
        """Yield this node followed by every nested array element node."""
        node: TypeInfo | None = self
        while node is not None:
            yield node
            node = node.array_item_type


class FieldDefinition(_Frozen):
    name: str
    type_info: TypeInfo
    required: bool
    description: str | None = None
    original: Any = None  # raw property fragment


class SchemaDefinition(_Frozen):
    name: str
    fields: list[FieldDefinition] = []
    description: str | None = None
    original: Any = None  # raw component schema fragment


class Parameter(_Frozen):
    name: str
    location: ParameterLocation
    required: bool
    schema_type: str = "string"  # coarse primitive classification only
    description: str | None = None


class SchemaReference(_Frozen):
    """Link from an operation body or response to its schema.

    ``name`` is ``None`` for inline schemas that are not declared under
    ``components.schemas``. ``is_array`` marks a collection of ``name``.
    """

    name: str | None = None
    schema_type: str = "object"
    is_array: bool = False


class OperationDefinition(_Frozen):
    id: str
    method: HttpMethod
    path: str  # /users/{id}
    parameters: list[Parameter] = []
    request_body: SchemaReference | None = None
    response: SchemaReference | None = None
    description: str | None = None
    tags: list[str] = []
    original: Any = None  # raw operation fragment


class Metadata(_Frozen):
    title: str
    version: str
    description: str | None = None
    base_url: str | None = None  # first declared server
    custom: dict[str, Any] = {}  # x-* keys from the info object


class OriginalData(_Frozen):
    """The source document kept verbatim for generators that need more than the IR."""

    format: str  # openapi
    data: Any
    extensions: dict[str, Any] = {}  # "<format>.<x-key>" -> raw value


class SchemaIR(_Frozen):
    metadata: Metadata
    schemas: list[SchemaDefinition] = []
    operations: list[OperationDefinition] = []
    original: OriginalData
    warnings: list[str] = []  # degradations recorded during extraction

    def get_schema(self, name: str) -> SchemaDefinition | None:
        for schema in self.schemas:
            if schema.name == name:
                return schema
        return None

    def iter_types(self) -> Iterator[TypeInfo]:
        """Yield every TypeInfo node reachable from the schema fields."""
        for schema in self.schemas:
            for field in schema.fields:
                yield from field.type_info.walk()
