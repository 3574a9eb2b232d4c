"""Pure category path helpers.

A path is the tuple of nodes from the top level down to the current
position. Nothing here fetches; the resolver combines these helpers with
its single async boundary.
"""

from collections.abc import Iterable, Mapping

from listing_engine.domain.categories import CategoryNode

CategoryPath = tuple[CategoryNode, ...]

PATH_SEPARATOR = " > "


def push(path: CategoryPath, node: CategoryNode) -> CategoryPath:
    """Append a node to the path."""
    return (*path, node)


def pop(path: CategoryPath) -> tuple[CategoryPath, CategoryNode | None]:
    """Remove the last node.

    Returns:
        Tuple of (shortened path, removed node or None if the path was empty).
    """
    if not path:
        return path, None
    return path[:-1], path[-1]


def tail_id(path: CategoryPath) -> str | None:
    """Id of the last node, or None at the top level."""
    return path[-1].id if path else None


def without_leaf(path: CategoryPath, leaf: CategoryNode | None) -> CategoryPath:
    """Drop a selected leaf from the end of the path, if it is there."""
    if leaf is not None and path and path[-1] == leaf:
        return path[:-1]
    return path


def path_to(node: CategoryNode, known: Mapping[str, CategoryNode]) -> CategoryPath:
    """Rebuild the path to a node by walking its parent chain.

    Args:
        node: Target node.
        known: Nodes discovered so far, keyed by id.

    Returns:
        Path from the top level to ``node`` (inclusive). The walk stops
        at the first unknown ancestor.
    """
    chain = [node]
    seen = {node.id}
    parent_id = node.parent_id
    while parent_id is not None and parent_id in known and parent_id not in seen:
        parent = known[parent_id]
        chain.append(parent)
        seen.add(parent_id)
        parent_id = parent.parent_id
    return tuple(reversed(chain))


def path_label(path: Iterable[CategoryNode]) -> str:
    """Breadcrumb text (e.g., "Moda > Erkek Giyim > Gömlekler")."""
    return PATH_SEPARATOR.join(node.name for node in path)


def search(query: str, known: Mapping[str, CategoryNode]) -> list[CategoryNode]:
    """Match discovered nodes by name or full path.

    Only nodes that have already been loaded are searched.

    Args:
        query: Free text; blank queries match nothing.
        known: Nodes discovered so far, keyed by id.

    Returns:
        Matching nodes in discovery order.
    """
    needle = query.strip().lower()
    if not needle:
        return []
    return [
        node for node in known.values()
        if needle in node.name.lower() or needle in path_label(path_to(node, known)).lower()
    ]
