"""Single-hop ``$ref`` resolution against the schema registry.

YApi has no notion of shared schemas, so every reference has to be inlined
before an endpoint can be converted. Only three places are rewritten:

1. ``data.items`` of the 200 response, when ``data`` is an array.
2. ``data.<prop>.items`` of the 200 response, for each property of an object
   ``data`` declared ``type: array``. Deeper nesting is left alone.
3. The request body's ``x-apifox-refs`` / ``x-apifox-orders`` composition.
   Only the first ordering key is used.

Inlined bodies are copied verbatim and never scanned for further references.
"""

import copy

from apifox_yapi.errors import CyclicReferenceError, SchemaShapeError, UnresolvedReferenceError
from apifox_yapi.parser.base import ArrayNode, ObjectNode, RefNode, classify_schema
from apifox_yapi.resolver.registry import SchemaRegistry

REFS_KEY = "x-apifox-refs"
ORDERS_KEY = "x-apifox-orders"


def ref_key(ref: str) -> str:
    """Registry key of a reference: its trailing path segment."""
    return ref.split("/")[-1]


def resolve(
    ref: str,
    registry: SchemaRegistry,
    *,
    endpoint_id: int | None = None,
    max_hops: int = 1,
) -> dict:
    """Look up ``ref`` and return a copy of the schema it points to.

    Follows at most ``max_hops`` references. With the default of one hop the
    body is returned as stored, even if it is itself a reference.
    """
    if max_hops < 1:
        raise ValueError("max_hops must be at least 1")

    visited: set[str] = set()
    current = ref
    body: dict | None = None
    for _ in range(max_hops):
        key = ref_key(current)
        if key in visited:
            raise CyclicReferenceError(current, endpoint_id)
        visited.add(key)

        body = registry.lookup(key)
        if body is None:
            raise UnresolvedReferenceError(current, endpoint_id)

        next_ref = body.get("$ref")
        if not isinstance(next_ref, str):
            break
        current = next_ref
    return copy.deepcopy(body)


def resolve_response_schema(schema: dict, registry: SchemaRegistry, endpoint_id: int | None = None) -> dict:
    """Inline the references under ``properties.data`` of a response schema."""
    schema = copy.deepcopy(schema)
    root = classify_schema(schema)
    if not isinstance(root, ObjectNode) or "data" not in root.properties:
        return schema

    raw_data = root.properties["data"]
    if not isinstance(raw_data, dict):
        return schema

    data = classify_schema(raw_data)
    if isinstance(data, ArrayNode):
        _inline_items(data.raw, registry, endpoint_id)
    elif isinstance(data, ObjectNode):
        for prop in data.properties.values():
            # declared arrays only
            if isinstance(prop, dict) and prop.get("type") == "array":
                _inline_items(prop, registry, endpoint_id)
    return schema


def _inline_items(array: dict, registry: SchemaRegistry, endpoint_id: int | None) -> None:
    items = array.get("items")
    if not isinstance(items, dict) or "$ref" not in items:
        return
    node = classify_schema(items)
    if isinstance(node, RefNode):
        array["items"] = resolve(node.ref, registry, endpoint_id=endpoint_id)


def resolve_request_schema(schema: dict, registry: SchemaRegistry, endpoint_id: int | None = None) -> dict:
    """Replace a composed request body with the properties of its first reference."""
    schema = copy.deepcopy(schema)
    refs = schema.get(REFS_KEY)
    if not refs:
        return schema
    if not isinstance(refs, dict):
        raise SchemaShapeError(f"{REFS_KEY} must be an object")

    orders = schema.get(ORDERS_KEY)
    if not isinstance(orders, list) or not orders:
        raise SchemaShapeError(f"{REFS_KEY} present without a non-empty {ORDERS_KEY}")

    first = orders[0]
    if first not in refs:
        raise SchemaShapeError(f"First ordering key {first!r} is not in {REFS_KEY}")
    entry = classify_schema(refs[first])
    if not isinstance(entry, RefNode):
        raise SchemaShapeError(f"{REFS_KEY}[{first!r}] is not a reference")

    body = resolve(entry.ref, registry, endpoint_id=endpoint_id)
    if "properties" in body:
        schema["properties"] = body["properties"]
    else:
        schema.pop("properties", None)

    schema.pop("required", None)
    if "required" in entry.raw:
        schema["required"] = copy.deepcopy(entry.raw["required"])

    del schema[REFS_KEY]
    del schema[ORDERS_KEY]
    return schema
