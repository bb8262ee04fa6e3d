import asyncio
import json
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"

TOKEN = "share-abc"


def load_fixture(name: str):
    return json.loads((FIXTURES / name).read_text(encoding="utf-8"))


class FakeGateway:
    """In-memory stand-in for ApifoxGateway.

    ``delays`` maps endpoint ids to seconds to sleep before answering,
    ``failures`` maps endpoint ids to the exception to raise.
    """

    def __init__(self, tree=None, schemas=None, endpoints=None, delays=None, failures=None):
        self.tree = load_fixture("http-api-tree.json") if tree is None else tree
        self.schemas = load_fixture("data-schemas.json") if schemas is None else schemas
        self.endpoints = load_fixture("http-apis.json") if endpoints is None else endpoints
        self.delays = delays or {}
        self.failures = failures or {}
        self.calls: list[tuple] = []
        self.completed: list[int] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def fetch_folder_tree(self, token):
        self.calls.append(("tree", token))
        return self.tree

    async def fetch_schema_list(self, token):
        self.calls.append(("schemas", token))
        return self.schemas

    async def fetch_endpoint(self, token, endpoint_id):
        self.calls.append(("endpoint", token, endpoint_id))
        await asyncio.sleep(self.delays.get(endpoint_id, 0))
        if endpoint_id in self.failures:
            raise self.failures[endpoint_id]
        self.completed.append(endpoint_id)
        return self.endpoints[str(endpoint_id)]


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def tree_data():
    return load_fixture("http-api-tree.json")


@pytest.fixture
def schema_data():
    return load_fixture("data-schemas.json")


@pytest.fixture
def endpoint_data():
    return load_fixture("http-apis.json")


@pytest.fixture
def make_gateway():
    return FakeGateway
