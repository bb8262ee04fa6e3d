"""Schema registry built from the Apifox ``data-schemas`` list."""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from apifox_yapi.parser.base import SchemaEntry


class SchemaRegistry:
    """Read-only mapping of schema id (as a string) to its JSON-Schema body."""

    def __init__(self, schemas: Mapping[str, dict], project_id: int = 0):
        self._schemas = MappingProxyType(dict(schemas))
        self.project_id = project_id

    @property
    def schemas(self) -> Mapping[str, dict]:
        return self._schemas

    def lookup(self, key: str | int) -> dict | None:
        """Return the body stored under ``key``, or None when absent."""
        return self._schemas.get(str(key))

    def __contains__(self, key: object) -> bool:
        return str(key) in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def __repr__(self) -> str:
        return f"SchemaRegistry(project_id={self.project_id}, size={len(self)})"


def build_registry(entries: Iterable[SchemaEntry]) -> SchemaRegistry:
    """Index ``entries`` by id in one pass.

    The first entry's project id is taken as the project of the whole
    document. Duplicate ids are not detected; the last one wins.
    """
    schemas: dict[str, dict] = {}
    project_id = None
    for entry in entries:
        if project_id is None:
            project_id = entry.project_id
        schemas[str(entry.id)] = entry.json_schema
    return SchemaRegistry(schemas, project_id=project_id or 0)
