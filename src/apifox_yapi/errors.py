"""Error types raised while converting Apifox documents."""


class ApifoxYapiError(Exception):
    """Base class for all conversion errors."""


class DocumentShapeError(ApifoxYapiError):
    """A fetched document does not have the expected structure."""


class SchemaShapeError(DocumentShapeError):
    """A JSON-Schema fragment cannot be classified or substituted."""


class UnresolvedReferenceError(ApifoxYapiError):
    """A $ref points at an id missing from the schema registry."""

    def __init__(self, ref: str, endpoint_id: int | None = None):
        self.ref = ref
        self.endpoint_id = endpoint_id
        where = f" in endpoint {endpoint_id}" if endpoint_id is not None else ""
        super().__init__(f"Unresolved reference {ref!r}{where}")


class CyclicReferenceError(ApifoxYapiError):
    """A chain of $ref lookups came back to an id it already visited."""

    def __init__(self, ref: str, endpoint_id: int | None = None):
        self.ref = ref
        self.endpoint_id = endpoint_id
        super().__init__(f"Cyclic reference {ref!r}")


class MissingSuccessResponseError(ApifoxYapiError):
    """An endpoint declares no response with status code 200."""

    def __init__(self, endpoint_id: int):
        self.endpoint_id = endpoint_id
        super().__init__(f"Endpoint {endpoint_id} has no 200 response")


class GatewayResponseError(ApifoxYapiError):
    """Apifox answered with ``success: false``."""

    def __init__(self, url: str, message: str = ""):
        self.url = url
        super().__init__(f"Apifox request failed for {url}: {message or 'success=false'}")
