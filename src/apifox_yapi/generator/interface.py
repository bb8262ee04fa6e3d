"""Interface synthesizer: converts one Apifox endpoint into a YApi Interface."""

import json
from datetime import datetime, timezone

from pydantic import ValidationError

from apifox_yapi.errors import DocumentShapeError, MissingSuccessResponseError
from apifox_yapi.generator.models import (
    Category,
    Header,
    Interface,
    PathParam,
    Project,
    QueryParam,
    RequestBodyType,
    RequestParamType,
    RequestQueryType,
    Required,
    ResponseBodyType,
)
from apifox_yapi.parser.base import EndpointDescriptor, Parameter
from apifox_yapi.resolver.refs import resolve_request_schema, resolve_response_schema
from apifox_yapi.resolver.registry import SchemaRegistry


def synthesize(
    descriptor: EndpointDescriptor,
    registry: SchemaRegistry,
    category: Category,
    project: Project,
) -> Interface:
    """Build the Interface record for ``descriptor``.

    References in the 200 response and in the request body are inlined from
    ``registry`` first. ``project`` and ``category`` are copied into the
    record, so later changes to either do not leak into it.
    """
    success = descriptor.success_response()
    if success is None:
        raise MissingSuccessResponseError(descriptor.id)

    res_schema = resolve_response_schema(success.json_schema, registry, descriptor.id)

    body = descriptor.request_body
    req_schema = None
    if body.json_schema is not None:
        req_schema = resolve_request_schema(body.json_schema, registry, descriptor.id)

    try:
        return Interface(
            id=descriptor.id,
            category=Category(id=category.id, name=category.name),
            project=project.model_copy(deep=True),
            title=descriptor.name,
            markdown=descriptor.operation_id or "",
            path=descriptor.path,
            method=descriptor.method.upper(),
            project_id=descriptor.project_id,
            catid=category.id,
            tag=list(descriptor.tags),
            req_headers=_headers(body.type),
            req_params=[_path_param(p) for p in descriptor.parameters.path],
            req_query=[_query_param(p) for p in descriptor.parameters.query],
            req_body_type=RequestBodyType.json if req_schema is not None else RequestBodyType.raw,
            req_body_is_json_schema=req_schema is not None,
            req_body_other=to_json(req_schema) if req_schema is not None else "",
            res_body_type=ResponseBodyType.json,
            res_body_is_json_schema=True,
            res_body=to_json(res_schema),
            add_time=to_epoch_seconds(descriptor.created_at),
            up_time=to_epoch_seconds(descriptor.updated_at),
        )
    except ValidationError as e:
        raise DocumentShapeError(f"Cannot convert endpoint {descriptor.id}: {e}") from e


def _headers(body_type: str | None) -> list[Header]:
    if not body_type:
        return []
    return [Header(name="Content-Type", value=body_type, required=Required.true)]


def _path_param(param: Parameter) -> PathParam:
    return PathParam(
        name=param.name,
        desc=param.description or "",
        required=Required.true if param.required else Required.false,
        type=RequestParamType.string if param.declared_type == "string" else RequestParamType.number,
    )


def _query_param(param: Parameter) -> QueryParam:
    return QueryParam(
        name=param.name,
        desc=param.description or "",
        required=Required.true if param.required else Required.false,
        type=RequestQueryType.string if param.declared_type == "string" else RequestQueryType.number,
    )


def to_json(value) -> str:
    """Serialize the way ``JSON.stringify`` does: compact, non-ASCII kept."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def to_epoch_seconds(value: str | None) -> int:
    """Convert an ISO-8601 instant to whole seconds since the epoch.

    Fractions are truncated. Instants without an offset are read as UTC.
    """
    if not value:
        return 0
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        instant = datetime.fromisoformat(text)
    except ValueError as e:
        raise DocumentShapeError(f"Invalid timestamp {value!r}") from e
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return int(instant.timestamp())
