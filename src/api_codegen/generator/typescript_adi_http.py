"""TypeScript routes, server router and client for the ``@adi-family/http`` runtime.

Unlike the template generators this one assembles its output directly. Types
use the strict Zod dialect (``to_zod_strict``), where every schema constant
is named ``<Name>Schema``.

Options:
    includeServer (bool, default true): emit the server-side router.
    routerName (str, default "apiRouter"): name of the router constant.
    includeClient (bool, default true): emit the client and usage examples.
    clientName (str, default "apiClient"): name of the client constant.
    baseUrlEnvVar (str, default "API_BASE_URL"): env var holding the base URL.
"""

from api_codegen.config import GenerationConfig
from api_codegen.generator.base import GeneratedOutput, Generator, option_bool, option_str
from api_codegen.generator.types import REFERENCE_SUFFIX, param_to_zod_strict, to_zod_strict
from api_codegen.parser.base import (
    OperationDefinition,
    ParameterLocation,
    SchemaIR,
    SchemaReference,
    TypeInfo,
)

DEFAULT_CLIENT_BASE_URL = "http://localhost:3000"
RULE = "// " + "=" * 76


def _section(title: str) -> list[str]:
    return [RULE, f"// {title}", RULE, ""]


def _link_schema(link: SchemaReference) -> str:
    if link.name:
        base = TypeInfo.reference_to(link.name)
    else:
        base = TypeInfo.primitive(link.schema_type)
    return to_zod_strict(TypeInfo.array_of(base) if link.is_array else base)


class TypeScriptAdiHttpGenerator(Generator):

    @property
    def name(self) -> str:
        return "typescript_adi_http"

    @property
    def file_extension(self) -> str:
        return "ts"

    def generate(self, schema_ir: SchemaIR, config: GenerationConfig) -> GeneratedOutput:
        options = config.options
        lines = [
            f"// Generated ADI HTTP Routes for {schema_ir.metadata.title}",
            f"// Version: {schema_ir.metadata.version}",
            "",
            "import { z } from 'zod';",
            "import { createRoute, createRouter, createClient } from '@adi-family/http';",
            "",
        ]
        lines += self._render_schemas(schema_ir)
        lines += self._render_routes(schema_ir)

        if option_bool(options, "includeServer", True):
            lines += self._render_server(schema_ir, option_str(options, "routerName", "apiRouter"))

        if option_bool(options, "includeClient", True):
            lines += self._render_client(
                schema_ir,
                option_str(options, "clientName", "apiClient"),
                option_str(options, "baseUrlEnvVar", "API_BASE_URL"),
            )

        return self._output(schema_ir, config, "\n".join(lines).rstrip("\n") + "\n")

    def _render_schemas(self, schema_ir: SchemaIR) -> list[str]:
        lines = _section("Schema Definitions")
        for schema in schema_ir.schemas:
            if schema.description:
                lines.append(f"// {schema.description}")
            lines.append(f"export const {schema.name}{REFERENCE_SUFFIX} = z.object({{")
            for field in schema.fields:
                if field.description:
                    lines.append(f"  /** {field.description} */")
                optional = "" if field.required else ".optional()"
                lines.append(f"  {field.name}: {to_zod_strict(field.type_info)}{optional},")
            lines += [
                "});",
                "",
                f"export type {schema.name} = z.infer<typeof {schema.name}{REFERENCE_SUFFIX}>;",
                "",
            ]
        return lines

    def _render_routes(self, schema_ir: SchemaIR) -> list[str]:
        lines = _section("Route Definitions")
        lines.append("export const routes = {")
        for operation in schema_ir.operations:
            lines += self._render_route(operation)
        lines += ["};", ""]
        return lines

    def _render_route(self, operation: OperationDefinition) -> list[str]:
        lines = []
        if operation.description:
            lines.append(f"  // {operation.description}")
        lines += [
            f"  {operation.id}: createRoute({{",
            f"    method: '{operation.method.value}',",
            f"    path: '{operation.path}',",
        ]

        query = [p for p in operation.parameters if p.location is ParameterLocation.QUERY]
        if query:
            lines.append("    query: z.object({")
            for param in query:
                optional = "" if param.required else ".optional()"
                lines.append(f"      {param.name}: {param_to_zod_strict(param.schema_type)}{optional},")
            lines.append("    }).optional(),")

        path_params = [p for p in operation.parameters if p.location is ParameterLocation.PATH]
        if path_params:
            lines.append("    params: z.object({")
            for param in path_params:
                lines.append(f"      {param.name}: {param_to_zod_strict(param.schema_type)},")
            lines.append("    }),")

        if operation.request_body is not None:
            lines.append(f"    body: {_link_schema(operation.request_body)},")
        if operation.response is not None:
            lines.append(f"    response: {_link_schema(operation.response)},")
        else:
            lines.append("    response: z.void(),")

        lines += ["  }),", ""]
        return lines

    def _render_server(self, schema_ir: SchemaIR, router_name: str) -> list[str]:
        lines = _section("Server-side Router")
        lines.append(f"export const {router_name} = createRouter(routes, {{")
        for operation in schema_ir.operations:
            lines.append(f"  {operation.id}: async (req) => {{")
            lines.append("    // TODO: Implement handler")
            if operation.parameters:
                lines.append("    // Request parameters:")
                for param in operation.parameters:
                    lines.append(f"    //   req.{param.location.value}: {param.schema_type}")
            if operation.response is not None:
                lines.append(f"    // Must return: {_link_schema(operation.response)}")
            lines += [
                "    throw new Error('Not implemented');",
                "  },",
                "",
            ]
        lines += ["});", ""]
        return lines

    def _render_client(self, schema_ir: SchemaIR, client_name: str, base_url_env: str) -> list[str]:
        base_url = schema_ir.metadata.base_url or DEFAULT_CLIENT_BASE_URL
        lines = _section("Client-side API")
        lines += [
            f"export const {client_name} = createClient(routes, {{",
            f"  baseUrl: process.env.{base_url_env} || '{base_url}',",
            "});",
            "",
            "// Usage examples:",
        ]
        for operation in schema_ir.operations[:2]:
            args = ""
            if operation.parameters:
                args = f"{{ {operation.parameters[0].name}: value }}"
            elif operation.request_body is not None:
                args = "{ body }"
            lines.append(f"// const result = await {client_name}.{operation.id}({args});")
        return lines
