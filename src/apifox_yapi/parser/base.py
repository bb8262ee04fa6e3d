"""Data models for the documents served by Apifox shared docs.

Three documents are consumed: the folder tree (``http-api-tree``), the flat
schema list (``data-schemas``) and one descriptor per endpoint
(``http-apis/{id}``). They are validated here, once, at the boundary.
"""

from dataclasses import dataclass
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from apifox_yapi.errors import DocumentShapeError, SchemaShapeError

SUCCESS_CODE = 200


class _SourceModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


# -- folder tree -------------------------------------------------------------


class Leaf(_SourceModel):
    """A tree node pointing at one endpoint descriptor."""

    kind: Literal["leaf"] = "leaf"
    key: str = ""
    name: str = ""
    endpoint_id: int
    method: str = ""
    path: str = ""


class Folder(_SourceModel):
    """A category node. ``folder_id`` is the category identity."""

    kind: Literal["folder"] = "folder"
    key: str = ""
    name: str = ""
    folder_id: int
    children: tuple["FolderNode", ...] = ()


FolderNode = Union[Folder, Leaf]

Folder.model_rebuild()


# -- schema list ---------------------------------------------------------------


class SchemaEntry(_SourceModel):
    """One reusable schema from ``data-schemas``."""

    id: int
    name: str = ""
    json_schema: dict = Field(default_factory=dict, alias="jsonSchema")
    project_id: int = Field(0, alias="projectId")


# -- endpoint descriptor ---------------------------------------------------------


class Parameter(_SourceModel):
    name: str
    description: str | None = ""
    required: bool = False
    type: str | None = None
    param_schema: dict = Field(default_factory=dict, alias="schema")

    @property
    def declared_type(self) -> str:
        return self.type or self.param_schema.get("type", "")


class Parameters(_SourceModel):
    path: list[Parameter] = []
    query: list[Parameter] = []

    @field_validator("path", "query", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class RequestBody(_SourceModel):
    type: str | None = ""
    json_schema: dict | None = Field(None, alias="jsonSchema")


class Response(_SourceModel):
    code: int
    name: str = ""
    json_schema: dict = Field(default_factory=dict, alias="jsonSchema")

    @field_validator("json_schema", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v


class EndpointDescriptor(_SourceModel):
    """Full description of a single HTTP endpoint as Apifox exports it."""

    id: int
    name: str = ""
    method: str
    path: str
    tags: list[str] = []
    status: str = ""
    operation_id: str | None = Field("", alias="operationId")
    project_id: int = Field(0, alias="projectId")
    folder_id: int = Field(0, alias="folderId")
    parameters: Parameters = Field(default_factory=Parameters)
    request_body: RequestBody = Field(default_factory=RequestBody, alias="requestBody")
    responses: list[Response] = []
    created_at: str | None = Field(None, alias="createdAt")
    updated_at: str | None = Field(None, alias="updatedAt")

    @field_validator("parameters", "request_body", mode="before")
    @classmethod
    def _none_is_default(cls, v: Any) -> Any:
        return {} if v is None else v

    def success_response(self) -> Response | None:
        """Return the first response declared with status 200."""
        for response in self.responses:
            if response.code == SUCCESS_CODE:
                return response
        return None


def parse_schema_list(data: Any) -> list[SchemaEntry]:
    """Validate the ``data-schemas`` payload."""
    if not isinstance(data, list):
        raise DocumentShapeError(f"Schema list must be an array, got {type(data).__name__}")
    try:
        return [SchemaEntry.model_validate(item) for item in data]
    except ValidationError as e:
        raise DocumentShapeError(f"Invalid schema entry: {e}") from e


def parse_endpoint(data: Any) -> EndpointDescriptor:
    """Validate one ``http-apis/{id}`` payload."""
    try:
        return EndpointDescriptor.model_validate(data)
    except ValidationError as e:
        raise DocumentShapeError(f"Invalid endpoint descriptor: {e}") from e


# -- schema nodes ----------------------------------------------------------------


@dataclass(frozen=True)
class RefNode:
    ref: str
    raw: dict


@dataclass(frozen=True)
class ArrayNode:
    items: dict | list
    raw: dict


@dataclass(frozen=True)
class ObjectNode:
    properties: dict[str, Any]
    raw: dict


@dataclass(frozen=True)
class PrimitiveNode:
    raw: dict


SchemaNode = Union[RefNode, ArrayNode, ObjectNode, PrimitiveNode]


def classify_schema(schema: Any) -> SchemaNode:
    """Classify a JSON-Schema dict into one of the known node variants.

    A ``$ref`` wins over everything else. ``type: array`` or an ``items`` key
    makes an array, ``type: object`` or a ``properties`` key makes an object.
    """
    if not isinstance(schema, dict):
        raise SchemaShapeError(f"Schema must be an object, got {type(schema).__name__}")

    if "$ref" in schema:
        ref = schema["$ref"]
        if not isinstance(ref, str):
            raise SchemaShapeError(f"$ref must be a string, got {ref!r}")
        return RefNode(ref=ref, raw=schema)

    if schema.get("type") == "array" or "items" in schema:
        items = schema.get("items", {})
        # a list is the tuple form
        if not isinstance(items, (dict, list)):
            raise SchemaShapeError("Array 'items' must be a schema object or a list of them")
        return ArrayNode(items=items, raw=schema)

    if schema.get("type") == "object" or "properties" in schema:
        properties = schema.get("properties", {})
        if not isinstance(properties, dict):
            raise SchemaShapeError("Object 'properties' must be an object")
        return ObjectNode(properties=properties, raw=schema)

    return PrimitiveNode(raw=schema)
