import ast
from pathlib import Path

import pytest

from api_codegen.config import GenerationConfig
from api_codegen.errors import ConfigError, GenerationError, UnknownGeneratorError
from api_codegen.generator.base import (
    GeneratorRegistry,
    default_generator_registry,
    option_bool,
    option_str,
)
from api_codegen.generator.golang import GolangGenerator
from api_codegen.generator.python import PythonGenerator
from api_codegen.generator.templates import (
    DEFAULT_BASE_URL,
    build_context,
    camel_case,
    pascal_case,
    python_name,
    snake_case,
)
from api_codegen.generator.types import TypeTarget
from api_codegen.generator.typescript import TypeScriptGenerator
from api_codegen.generator.typescript_adi_http import TypeScriptAdiHttpGenerator
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
    TypeInfo,
)
from api_codegen.parser.openapi import OpenApiParser

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="module")
def petstore():
    return OpenApiParser().parse(FIXTURES / "petstore.yaml")


def _config(generator, output_file="out", **kwargs):
    return GenerationConfig(generator=generator, output_file=output_file, **kwargs)


class TestRegistry:
    def test_default_generators(self):
        assert default_generator_registry().names() == [
            "golang",
            "python",
            "typescript",
            "typescript_adi_http",
        ]

    def test_require_unknown(self):
        with pytest.raises(UnknownGeneratorError) as exc_info:
            default_generator_registry().require("rust")
        assert exc_info.value.generator_name == "rust"
        assert "typescript" in str(exc_info.value)

    def test_register_replaces_same_name(self):
        registry = GeneratorRegistry()
        first, second = PythonGenerator(), PythonGenerator()
        registry.register(first)
        registry.register(second)
        assert registry.get("python") is second
        assert registry.names() == ["python"]


class TestOptions:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (True, True),
            (False, False),
            ("false", False),
            ("No", False),
            ("on", True),
            ("OFF", False),
            (2, True),
            (" yes ", True),
            (0, False),
            (1, True),
            ("maybe", True),
            (None, True),
            ([], True),
        ],
    )
    def test_option_bool(self, value, expected):
        assert option_bool({"flag": value}, "flag", True) is expected

    def test_option_bool_missing_key(self):
        assert option_bool({}, "flag", False) is False

    def test_option_str(self):
        assert option_str({"name": "x"}, "name", "d") == "x"
        assert option_str({"name": ""}, "name", "d") == "d"
        assert option_str({"name": 3}, "name", "d") == "d"
        assert option_str({}, "name", "d") == "d"


class TestCaseFilters:
    @pytest.mark.parametrize(
        "value, snake, pascal, camel",
        [
            ("createdAt", "created_at", "CreatedAt", "createdAt"),
            ("get_pets_petId", "get_pets_pet_id", "GetPetsPetId", "getPetsPetId"),
            ("X-Request-Id", "x_request_id", "XRequestId", "xRequestId"),
            ("id", "id", "Id", "id"),
        ],
    )
    def test_filters(self, value, snake, pascal, camel):
        assert snake_case(value) == snake
        assert pascal_case(value) == pascal
        assert camel_case(value) == camel

    @pytest.mark.parametrize(
        "value, expected",
        [("from", "from_"), ("class", "class_"), ("import", "import_"), ("createdAt", "created_at")],
    )
    def test_python_name_escapes_keywords(self, value, expected):
        assert python_name(value) == expected


class TestBuildContext:
    def test_projects_types_for_target(self, petstore):
        context = build_context(petstore, _config("python"), TypeTarget.PYTHON)
        pet = next(s for s in context["schemas"] if s["name"] == "Pet")
        types = {p["name"]: p["type"] for p in pet["properties"]}
        assert types["friends"] == "List[Pet]"
        assert types["createdAt"] == "datetime"

    def test_operation_links(self, petstore):
        context = build_context(petstore, _config("golang"), TypeTarget.GOLANG)
        list_pets = context["operations"][0]
        assert list_pets["method"] == "GET"
        assert list_pets["response"]["type"] == "[]Pet"
        assert list_pets["parameters"][1]["type"] == "int"

    def test_default_base_url(self):
        schema_ir = SchemaIR(
            metadata=Metadata(title="T", version="1"),
            original=OriginalData(format="openapi", data={}),
        )
        context = build_context(schema_ir, _config("typescript"), TypeTarget.ZOD)
        assert context["base_url"] == DEFAULT_BASE_URL


class TestTypeScriptGenerator:
    def test_output(self, petstore):
        output = TypeScriptGenerator().generate(petstore, _config("typescript", "api.ts"))
        assert output.filename == "api.ts"
        assert output.metadata == {"generator": "typescript", "schemas": "4", "operations": "5"}
        content = output.content
        assert "import { z } from 'zod';" in content
        assert "export const BASE_URL = 'https://api.petstore.example/v1';" in content
        assert "export const Pet = z.object({" in content
        assert "  'id': z.number()," in content
        assert "  'friends': z.array(Pet).optional()," in content
        assert "  'status': z.enum([\"available\", \"pending\", \"sold\"]).optional()," in content
        assert "export type Pet = z.infer<typeof Pet>;" in content
        assert "export const listPetsResponse = z.array(Pet);" in content
        assert "export async function createPet(params: Query = {}, body?: unknown)" in content
        assert "export async function deletePet(params: Query = {}): Promise<void>" in content

    def test_without_client(self, petstore):
        output = TypeScriptGenerator().generate(
            petstore, _config("typescript", options={"includeClient": False})
        )
        assert "export const Pet = z.object({" in output.content
        assert "async function request" not in output.content


class TestPythonGenerator:
    def test_output_is_valid_python(self, petstore):
        output = PythonGenerator().generate(petstore, _config("python", "client.py"))
        ast.parse(output.content)

    def test_models(self, petstore):
        content = PythonGenerator().generate(petstore, _config("python")).content
        assert "class Pet(BaseModel):" in content
        assert "    id: int\n" in content
        assert '    created_at: Optional[datetime] = Field(default=None, alias="createdAt")' in content
        assert "    friends: Optional[List[Pet]] = None" in content
        assert "    attributes: Optional[Dict[str, Any]] = None" in content

    def test_client_methods(self, petstore):
        content = PythonGenerator().generate(petstore, _config("python")).content
        assert "class ApiClient:" in content
        assert "    def list_pets(self, limit: Optional[int] = None) -> List[Pet]:" in content
        assert "    def get_pets_pet_id(self, pet_id: str) -> Pet:" in content
        assert 'f"/pets/{pet_id}"' in content
        assert "    def create_pet(self, body: Any = None) -> Pet:" in content
        assert "    def delete_pet(self, pet_id: str) -> None:" in content

    def test_client_name_option(self, petstore):
        content = PythonGenerator().generate(
            petstore, _config("python", options={"clientName": "PetstoreClient"})
        ).content
        assert "class PetstoreClient:" in content
        ast.parse(content)

    def test_without_client(self, petstore):
        content = PythonGenerator().generate(
            petstore, _config("python", options={"includeClient": False})
        ).content
        assert "class ApiClient" not in content
        ast.parse(content)


class TestPythonKeywordNames:
    @pytest.fixture
    def keyword_ir(self):
        return SchemaIR(
            metadata=Metadata(title="Keywords", version="1"),
            schemas=[
                SchemaDefinition(
                    name="Range",
                    fields=[
                        FieldDefinition(name="class", type_info=TypeInfo.primitive("string"), required=True),
                        FieldDefinition(name="from", type_info=TypeInfo.primitive("string"), required=False),
                    ],
                )
            ],
            operations=[
                OperationDefinition(
                    id="import",
                    method=HttpMethod.GET,
                    path="/imports/{import}",
                    parameters=[
                        Parameter(name="import", location=ParameterLocation.PATH, required=True),
                        Parameter(name="from", location=ParameterLocation.QUERY, required=False),
                    ],
                )
            ],
            original=OriginalData(format="openapi", data={}),
        )

    def test_keyword_names_compile(self, keyword_ir):
        content = PythonGenerator().generate(keyword_ir, _config("python")).content
        ast.parse(content)
        assert '    class_: str = Field(alias="class")' in content
        assert '    from_: Optional[str] = Field(default=None, alias="from")' in content
        assert "    def import_(self, import_: str, from_: Optional[str] = None) -> None:" in content
        assert 'f"/imports/{import_}"' in content
        assert '"from": from_,' in content


class TestGolangGenerator:
    def test_output(self, petstore):
        content = GolangGenerator().generate(petstore, _config("golang", "client.go")).content
        assert "package client\n" in content
        assert "type Pet struct {" in content
        assert '\tId int64 `json:"id"`' in content
        assert '\tCreatedAt string `json:"createdAt,omitempty"`' in content
        assert '\tWeight float32 `json:"weight,omitempty"`' in content
        assert '\tFriends []Pet `json:"friends,omitempty"`' in content
        assert "func (c *Client) ListPets(limit int) (*[]Pet, error) {" in content
        assert "func (c *Client) GetPetsPetId(petId string) (*Pet, error) {" in content
        assert "func (c *Client) DeletePet(petId string) error {" in content

    def test_package_name_option(self, petstore):
        content = GolangGenerator().generate(
            petstore, _config("golang", options={"packageName": "petstore"})
        ).content
        assert "package petstore\n" in content

    def test_invalid_package_name(self):
        with pytest.raises(ConfigError):
            GolangGenerator().validate_config(_config("golang", options={"packageName": "pet-store"}))

    def test_valid_package_name(self):
        GolangGenerator().validate_config(_config("golang", options={"packageName": "petstore"}))


class TestTypeScriptAdiHttpGenerator:
    def test_header_and_schemas(self, petstore):
        output = TypeScriptAdiHttpGenerator().generate(petstore, _config("typescript_adi_http", "api.ts"))
        content = output.content
        assert content.startswith("// Generated ADI HTTP Routes for Petstore\n// Version: 1.0.0\n")
        assert "import { createRoute, createRouter, createClient } from '@adi-family/http';" in content
        assert "export const PetSchema = z.object({" in content
        assert "  id: z.number().int()," in content
        assert "  createdAt: z.string().datetime().optional()," in content
        assert "  friends: z.array(PetSchema).optional()," in content
        assert "  attributes: z.record(z.any()).optional()," in content
        assert "  owner: OwnerSchema.optional()," in content
        assert "export type Pet = z.infer<typeof PetSchema>;" in content
        assert content.endswith("\n") and not content.endswith("\n\n")

    def test_routes(self, petstore):
        content = TypeScriptAdiHttpGenerator().generate(petstore, _config("typescript_adi_http")).content
        assert "export const routes = {" in content
        assert "  listPets: createRoute({" in content
        assert "    method: 'GET'," in content
        assert "      limit: z.coerce.number().int().optional()," in content
        assert "    response: z.array(PetSchema)," in content
        assert "    body: NewPetSchema," in content
        assert "      petId: z.string()," in content
        assert "    response: z.void()," in content
        assert "    response: z.record(z.any())," in content

    def test_server_and_client_by_default(self, petstore):
        content = TypeScriptAdiHttpGenerator().generate(petstore, _config("typescript_adi_http")).content
        assert "export const apiRouter = createRouter(routes, {" in content
        assert "export const apiClient = createClient(routes, {" in content
        assert "  baseUrl: process.env.API_BASE_URL || 'https://api.petstore.example/v1'," in content
        assert "// const result = await apiClient.createPet({ body });" in content

    def test_options(self, petstore):
        config = _config(
            "typescript_adi_http",
            options={
                "includeServer": False,
                "clientName": "petClient",
                "baseUrlEnvVar": "PETSTORE_URL",
            },
        )
        content = TypeScriptAdiHttpGenerator().generate(petstore, config).content
        assert "createRouter(routes" not in content
        assert "export const petClient = createClient(routes, {" in content
        assert "process.env.PETSTORE_URL" in content

    def test_client_disabled_with_string_flag(self, petstore):
        config = _config(
            "typescript_adi_http",
            options={"includeClient": "false", "routerName": "petRouter"},
        )
        content = TypeScriptAdiHttpGenerator().generate(petstore, config).content
        assert "createClient(routes" not in content
        assert "export const petRouter = createRouter(routes, {" in content

    def test_default_client_base_url(self):
        schema_ir = SchemaIR(
            metadata=Metadata(title="T", version="1"),
            original=OriginalData(format="openapi", data={}),
        )
        content = TypeScriptAdiHttpGenerator().generate(schema_ir, _config("typescript_adi_http")).content
        assert "|| 'http://localhost:3000'," in content


class TestTemplateOverride:
    def test_template_directory(self, petstore, tmp_path):
        (tmp_path / "client.ts.j2").write_text("// {{ api_title }} has {{ schemas | length }} schemas\n")
        output = TypeScriptGenerator().generate(petstore, _config("typescript", template=tmp_path))
        assert output.content == "// Petstore has 4 schemas\n"

    def test_template_file(self, petstore, tmp_path):
        template = tmp_path / "custom.j2"
        template.write_text("{% for op in operations %}{{ op.id | snake_case }}\n{% endfor %}")
        output = PythonGenerator().generate(petstore, _config("python", template=template))
        assert output.content.splitlines()[0] == "list_pets"

    def test_missing_template(self, petstore, tmp_path):
        with pytest.raises(GenerationError) as exc_info:
            GolangGenerator().generate(petstore, _config("golang", template=tmp_path))
        assert exc_info.value.generator_name == "golang"
        assert "template not found" in str(exc_info.value)

    def test_undefined_variable(self, petstore, tmp_path):
        (tmp_path / "client.py.j2").write_text("{{ no_such_value }}")
        with pytest.raises(GenerationError) as exc_info:
            PythonGenerator().generate(petstore, _config("python", template=tmp_path))
        assert "template error" in str(exc_info.value)
