"""YApi data models produced by the converter.

Field names follow YApi's export format (``_id``, ``catid``, ``req_query``,
...), so records are serialized with ``model_dump(by_alias=True)``.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"


class Required(str, Enum):
    false = "0"
    true = "1"


class RequestParamType(str, Enum):
    string = "string"
    number = "number"


class RequestQueryType(str, Enum):
    string = "string"
    number = "number"


class RequestBodyType(str, Enum):
    query = "query"
    form = "form"
    json = "json"
    text = "text"
    file = "file"
    raw = "raw"
    none = "none"


class ResponseBodyType(str, Enum):
    json = "json"
    text = "text"
    xml = "xml"
    raw = "raw"
    json_schema = "json-schema"


class _YapiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, use_enum_values=True)


class Env(_YapiModel):
    name: str = ""
    domain: str = ""


class Project(_YapiModel):
    id: int = Field(0, alias="_id")
    url: str = Field("", alias="_url")
    name: str = "ApifoxProject"
    desc: str = ""
    basepath: str = ""
    tag: list[str] = []
    env: list[Env] = [Env()]


class Category(_YapiModel):
    id: int = Field(alias="_id")
    url: str = Field("", alias="_url")
    name: str
    desc: str = ""
    interfaces: list = Field(default_factory=list, alias="list")
    add_time: int = 0
    up_time: int = 0


class Header(_YapiModel):
    name: str
    value: str = ""
    desc: str = ""
    example: str = ""
    required: Required = Required.true


class PathParam(_YapiModel):
    name: str
    desc: str = ""
    example: str = ""
    required: Required = Required.true
    type: RequestParamType = RequestParamType.string


class QueryParam(_YapiModel):
    name: str
    desc: str = ""
    example: str = ""
    required: Required = Required.false
    type: RequestQueryType = RequestQueryType.string


class Interface(_YapiModel):
    """One endpoint in YApi shape, ready for code generation."""

    id: int = Field(alias="_id")
    category: Category = Field(alias="_category")
    project: Project = Field(alias="_project")
    url: str = Field("", alias="_url")
    title: str = ""
    status: str = "undone"
    markdown: str = ""
    path: str
    method: Method
    project_id: int
    catid: int
    tag: list[str] = []
    req_headers: list[Header] = []
    req_params: list[PathParam] = []
    req_query: list[QueryParam] = []
    req_body_type: RequestBodyType = RequestBodyType.raw
    req_body_is_json_schema: bool = False
    req_body_form: list = []
    req_body_other: str = ""
    res_body_type: ResponseBodyType = ResponseBodyType.json
    res_body_is_json_schema: bool = True
    res_body: str = ""
    add_time: int = 0
    up_time: int = 0
    uid: int = 0


class CategoryConfig(BaseModel):
    """Which categories to select. No ids selects every category."""

    ids: list[int] = []


class SyntheticalConfig(BaseModel):
    """The category whose interfaces should be listed."""

    id: int
