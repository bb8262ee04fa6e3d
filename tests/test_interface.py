import json

import pytest

from apifox_yapi.errors import DocumentShapeError, MissingSuccessResponseError, UnresolvedReferenceError
from apifox_yapi.generator.interface import synthesize, to_epoch_seconds, to_json
from apifox_yapi.generator.models import Category, Project
from apifox_yapi.parser.base import EndpointDescriptor, parse_endpoint, parse_schema_list
from apifox_yapi.resolver.registry import build_registry


@pytest.fixture
def registry(schema_data):
    return build_registry(parse_schema_list(schema_data))


@pytest.fixture
def category():
    return Category(id=1, name="用户", desc="apiDetailFolder.1")


@pytest.fixture
def project():
    return Project(id=3001)


def _minimal(**overrides):
    data = {
        "id": 1,
        "method": "get",
        "path": "/ping",
        "responses": [{"code": 200, "jsonSchema": {"type": "object", "properties": {}}}],
    }
    data.update(overrides)
    return EndpointDescriptor.model_validate(data)


class TestSynthesize:
    def test_list_endpoint(self, endpoint_data, registry, category, project):
        iface = synthesize(parse_endpoint(endpoint_data["101"]), registry, category, project)
        assert iface.id == 101
        assert iface.title == "获取用户列表"
        assert iface.markdown == "listUsers"
        assert iface.method == "GET"
        assert iface.path == "/users"
        assert iface.catid == 1
        assert iface.project_id == 3001
        assert iface.tag == ["user"]
        assert iface.status == "undone"
        assert iface.category.id == 1
        assert iface.category.name == "用户"

    def test_response_array_ref_inlined(self, endpoint_data, registry, category, project, schema_data):
        iface = synthesize(parse_endpoint(endpoint_data["101"]), registry, category, project)
        res = json.loads(iface.res_body)
        assert res["properties"]["data"]["items"] == schema_data[0]["jsonSchema"]
        assert iface.res_body_type == "json"
        assert iface.res_body_is_json_schema is True

    def test_query_params(self, endpoint_data, registry, category, project):
        iface = synthesize(parse_endpoint(endpoint_data["101"]), registry, category, project)
        page, keyword = iface.req_query
        assert page.name == "page"
        assert page.desc == "页码"
        assert page.required == "0"
        assert page.type == "number"
        assert keyword.required == "1"
        assert keyword.type == "string"

    def test_no_body_schema_is_raw(self, endpoint_data, registry, category, project):
        iface = synthesize(parse_endpoint(endpoint_data["101"]), registry, category, project)
        assert iface.req_headers == []
        assert iface.req_body_type == "raw"
        assert iface.req_body_is_json_schema is False
        assert iface.req_body_other == ""

    def test_composed_request_body(self, endpoint_data, registry, category, project, schema_data):
        iface = synthesize(parse_endpoint(endpoint_data["102"]), registry, category, project)
        body = json.loads(iface.req_body_other)
        assert body["properties"] == schema_data[2]["jsonSchema"]["properties"]
        assert body["required"] == ["name"]
        assert "x-apifox-refs" not in body
        assert "x-apifox-orders" not in body
        assert iface.req_body_type == "json"
        assert iface.req_body_is_json_schema is True

    def test_content_type_header(self, endpoint_data, registry, category, project):
        iface = synthesize(parse_endpoint(endpoint_data["102"]), registry, category, project)
        assert len(iface.req_headers) == 1
        header = iface.req_headers[0]
        assert header.name == "Content-Type"
        assert header.value == "application/json"
        assert header.required == "1"

    def test_picks_200_among_several_responses(self, endpoint_data, registry, category, project):
        iface = synthesize(parse_endpoint(endpoint_data["102"]), registry, category, project)
        assert json.loads(iface.res_body)["properties"]["data"]["properties"] == {"id": {"type": "integer"}}

    def test_path_params_and_nested_refs(self, endpoint_data, registry, category, project, schema_data):
        iface = synthesize(parse_endpoint(endpoint_data["111"]), registry, category, project)
        (param,) = iface.req_params
        assert param.name == "id"
        assert param.required == "1"
        assert param.type == "number"

        data = json.loads(iface.res_body)["properties"]["data"]["properties"]
        assert data["orders"]["items"] == schema_data[1]["jsonSchema"]
        assert data["owner"] == {"$ref": "#/definitions/7"}
        assert data["meta"]["properties"]["friends"]["items"] == {"$ref": "#/definitions/7"}

    def test_missing_200_response(self, endpoint_data, registry, category, project):
        with pytest.raises(MissingSuccessResponseError) as exc_info:
            synthesize(parse_endpoint(endpoint_data["201"]), registry, category, project)
        assert exc_info.value.endpoint_id == 201

    def test_unresolved_reference(self, registry, category, project):
        ep = _minimal(responses=[{
            "code": 200,
            "jsonSchema": {"type": "object", "properties": {"data": {"type": "array", "items": {"$ref": "#/definitions/77"}}}},
        }])
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            synthesize(ep, registry, category, project)
        assert exc_info.value.endpoint_id == 1
        assert exc_info.value.ref == "#/definitions/77"

    def test_unknown_method(self, registry, category, project):
        with pytest.raises(DocumentShapeError):
            synthesize(_minimal(method="connect"), registry, category, project)

    def test_project_is_a_snapshot(self, registry, category):
        project = Project(id=3001, tag=["v1"])
        iface = synthesize(_minimal(), registry, category, project)
        project.tag.append("v2")
        assert iface.project.tag == ["v1"]
        assert iface.project.id == 3001

    def test_timestamps(self, endpoint_data, registry, category, project):
        iface = synthesize(parse_endpoint(endpoint_data["101"]), registry, category, project)
        assert iface.add_time == 1683706353
        assert iface.up_time == 1683795600

    def test_yapi_field_names(self, registry, category, project):
        dumped = synthesize(_minimal(), registry, category, project).model_dump(by_alias=True)
        assert dumped["_id"] == 1
        assert dumped["_category"]["_id"] == 1
        assert dumped["_category"]["list"] == []
        assert dumped["_project"]["_id"] == 3001
        assert dumped["res_body_type"] == "json"
        assert dumped["uid"] == 0


class TestToEpochSeconds:
    def test_truncates_fraction(self):
        assert to_epoch_seconds("1970-01-01T00:00:01.999Z") == 1

    def test_offset(self):
        assert to_epoch_seconds("2023-07-02T12:00:00+08:00") == 1688270400

    def test_naive_is_utc(self):
        assert to_epoch_seconds("2023-07-01T12:00:00") == 1688212800

    def test_missing(self):
        assert to_epoch_seconds(None) == 0
        assert to_epoch_seconds("") == 0

    def test_invalid(self):
        with pytest.raises(DocumentShapeError):
            to_epoch_seconds("yesterday")


class TestToJson:
    def test_compact_and_unicode(self):
        assert to_json({"a": [1, 2], "名": "值"}) == '{"a":[1,2],"名":"值"}'
