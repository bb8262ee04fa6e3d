"""Public entry points: load a project, pick categories, list interfaces.

All state lives in an immutable :class:`ProjectContext` returned by
:func:`load_project_info` and passed back into the other operations.
"""

import asyncio
from dataclasses import dataclass, field

import structlog

from apifox_yapi.gateway import DocumentGateway
from apifox_yapi.generator.interface import synthesize
from apifox_yapi.generator.models import Category, CategoryConfig, Interface, Project, SyntheticalConfig
from apifox_yapi.parser.base import FolderNode, Leaf, parse_endpoint, parse_schema_list
from apifox_yapi.parser.tree import find_folder, leaf_children, parse_tree, select_folders, top_level_folders
from apifox_yapi.resolver.registry import SchemaRegistry, build_registry

logger = structlog.get_logger()


@dataclass(frozen=True)
class ProjectContext:
    """Everything loaded for one share token."""

    token: str
    project: Project
    registry: SchemaRegistry
    tree: tuple[FolderNode, ...]


@dataclass(frozen=True)
class ProjectInfo:
    """Project summary plus the context needed by the other operations."""

    project: Project
    cats: list[Category]
    context: ProjectContext = field(repr=False)

    # URL derivation is not supported for Apifox projects.
    def get_mock_url(self) -> str:
        return ""

    def get_dev_url(self, env: str = "") -> str:
        return ""

    def get_prod_url(self, env: str = "") -> str:
        return ""


async def load_project_info(gateway: DocumentGateway, token: str) -> ProjectInfo:
    """Fetch the folder tree and schema list and build the project context."""
    raw_tree, raw_schemas = await asyncio.gather(
        gateway.fetch_folder_tree(token),
        gateway.fetch_schema_list(token),
    )

    tree = parse_tree(raw_tree)
    registry = build_registry(parse_schema_list(raw_schemas))
    logger.info("project_loaded", project_id=registry.project_id, folders=len(tree), schemas=len(registry))

    project = Project(id=registry.project_id)
    cats = [
        Category(id=folder.folder_id, name=folder.name, desc=folder.key)
        for folder in top_level_folders(tree)
    ]
    context = ProjectContext(token=token, project=project, registry=registry, tree=tree)
    return ProjectInfo(project=project, cats=cats, context=context)


def select_categories(context: ProjectContext, config: CategoryConfig) -> list[int]:
    """Ids of the folders selected by ``config``, in ascending order."""
    return sorted(select_folders(config.ids, context.tree))


async def list_interfaces(
    gateway: DocumentGateway,
    context: ProjectContext,
    config: SyntheticalConfig,
) -> list[Interface]:
    """Convert every endpoint directly under category ``config.id``.

    Returns an empty list when the category does not exist. Endpoints are
    fetched concurrently; the result keeps the folder's order. The first
    failure is raised and the fetches still in flight are cancelled.
    """
    folder = find_folder(config.id, context.tree)
    if folder is None:
        logger.info("category_not_found", category_id=config.id)
        return []

    category = Category(id=folder.folder_id, name=folder.name)

    async def convert(leaf: Leaf) -> Interface:
        raw = await gateway.fetch_endpoint(context.token, leaf.endpoint_id)
        return synthesize(parse_endpoint(raw), context.registry, category, context.project)

    tasks = [asyncio.ensure_future(convert(leaf)) for leaf in leaf_children(folder)]
    try:
        interfaces = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise
    logger.info("interfaces_synthesized", category_id=config.id, count=len(interfaces))
    return list(interfaces)
