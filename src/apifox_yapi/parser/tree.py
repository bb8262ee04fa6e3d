"""Apifox folder tree ingestion and traversal.

The tree from ``http-api-tree`` is parsed into immutable :class:`Folder` /
:class:`Leaf` nodes. Traversals use an explicit stack so that deep trees
never hit the recursion limit.
"""

from collections.abc import Iterable, Iterator
from typing import Any

import structlog
from pydantic import ValidationError

from apifox_yapi.errors import DocumentShapeError
from apifox_yapi.parser.base import Folder, FolderNode, Leaf

logger = structlog.get_logger()

_END = object()


def parse_tree(data: Any) -> tuple[FolderNode, ...]:
    """Parse the raw ``http-api-tree`` payload into folder/leaf nodes.

    Folders are built bottom-up from an explicit stack of open folders, so
    nesting depth is limited only by memory. Kinds that are neither folder
    nor endpoint are dropped.
    """
    if not isinstance(data, list):
        raise DocumentShapeError(f"Folder tree must be an array, got {type(data).__name__}")

    top: list[FolderNode] = []
    # each frame: (remaining raw children, parsed children, raw folder or None for the root)
    stack: list[tuple[Iterator, list[FolderNode], dict | None]] = [(iter(data), top, None)]
    while stack:
        pending, parsed, owner = stack[-1]
        item = next(pending, _END)
        if item is _END:
            stack.pop()
            if owner is not None:
                stack[-1][1].append(_make_folder(owner, tuple(parsed)))
            continue

        if not isinstance(item, dict):
            raise DocumentShapeError(f"Tree node must be an object, got {type(item).__name__}")

        if item.get("folder") is not None:
            children = item.get("children") or []
            if not isinstance(children, list):
                raise DocumentShapeError(f"Children of folder {item.get('name')!r} must be an array")
            stack.append((iter(children), [], item))
        elif item.get("api") is not None:
            parsed.append(_make_leaf(item))
        else:
            logger.debug("tree_node_skipped", key=item.get("key"), type=item.get("type"))
    return tuple(top)


def _make_folder(item: dict, children: tuple[FolderNode, ...]) -> Folder:
    try:
        return Folder(
            key=str(item.get("key", "")),
            name=item.get("name", ""),
            folder_id=item["folder"]["id"],
            children=children,
        )
    except (KeyError, TypeError, ValidationError) as e:
        raise DocumentShapeError(f"Malformed tree node {item.get('key')!r}: {e}") from e


def _make_leaf(item: dict) -> Leaf:
    try:
        api = item["api"]
        return Leaf(
            key=str(item.get("key", "")),
            name=item.get("name", ""),
            endpoint_id=api["id"],
            method=api.get("method", ""),
            path=api.get("path", ""),
        )
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise DocumentShapeError(f"Malformed tree node {item.get('key')!r}: {e}") from e


def select_folders(selection: Iterable[int], tree: Iterable[FolderNode]) -> set[int]:
    """Return the ids of every folder kept by ``selection``.

    An empty selection keeps every folder. Otherwise a folder whose id is
    not selected is pruned together with its whole subtree, even when a
    descendant id is selected.
    """
    wanted = set(selection)
    result: set[int] = set()
    stack = list(tree)
    while stack:
        node = stack.pop()
        if not isinstance(node, Folder):
            continue
        if wanted and node.folder_id not in wanted:
            continue
        result.add(node.folder_id)
        stack.extend(node.children)
    return result


def find_folder(folder_id: int, tree: Iterable[FolderNode]) -> Folder | None:
    """Depth-first search for the folder with ``folder_id``.

    Every sibling on a level is checked before descending into any of them.
    """
    stack = [tuple(tree)]
    while stack:
        level = stack.pop()
        folders = [node for node in level if isinstance(node, Folder)]
        for node in folders:
            if node.folder_id == folder_id:
                return node
        # reversed so the first sibling's subtree is searched first
        for node in reversed(folders):
            if node.children:
                stack.append(node.children)
    return None


def leaf_children(folder: Folder) -> list[Leaf]:
    """Direct endpoint children of ``folder`` in document order."""
    return [node for node in folder.children if isinstance(node, Leaf)]


def top_level_folders(tree: Iterable[FolderNode]) -> list[Folder]:
    return [node for node in tree if isinstance(node, Folder)]
