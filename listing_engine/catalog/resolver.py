"""Category tree resolver.

Navigates a marketplace taxonomy one level at a time. Levels are fetched
lazily through a ``CategoryDataSource`` and cached per parent id for the
lifetime of the resolver. Leaf-ness is never taken from a precomputed
flag: selecting a node first asks for that node's children.

Only one render of the visible list wins: every navigation takes a new
generation number, and results that arrive for an older generation are
dropped. Fetches themselves are not cancelled; concurrent requests for
the same parent share one fetch.
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

import structlog

from listing_engine.catalog import navigation
from listing_engine.catalog.navigation import CategoryPath
from listing_engine.catalog.sources import CategoryDataSource
from listing_engine.domain.categories import Attribute, CategoryNode
from listing_engine.domain.exceptions import CategoryFetchError

logger = structlog.get_logger()


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of selecting a category.

    Attributes:
        is_leaf: Whether the node has no children.
        required_attributes: Attributes of a selected leaf (None otherwise).
        attribute_error: Why attributes could not be loaded, if they failed.
        error: Why the leaf check failed; the selection was not applied.
        superseded: A newer navigation started before this one finished.
    """

    is_leaf: bool
    required_attributes: tuple[Attribute, ...] | None = None
    attribute_error: str | None = None
    error: str | None = None
    superseded: bool = False

    @property
    def applied(self) -> bool:
        """Check if the selection changed the resolver state."""
        return self.error is None and not self.superseded


class CategoryTreeResolver:
    """Lazy, cached navigator over one marketplace's taxonomy.

    State read by the UI:
        path: Nodes from the top level to the current position.
        visible: Categories currently listed for picking.
        selected: Selected leaf category, if any.
        required_attributes: Attributes of the selected leaf.
        attribute_error: Attribute load failure for the selected leaf.
        load_error: Last list load failure; ``retry()`` repeats it.
        is_loading: A list load is in progress.

    Example usage:
        resolver = CategoryTreeResolver(StaticCategorySource(), "trendyol")
        await resolver.load_root()
        result = await resolver.select(resolver.visible[0])
    """

    def __init__(self, source: CategoryDataSource, marketplace_id: str) -> None:
        """Initialize resolver.

        Args:
            source: Category data source.
            marketplace_id: Marketplace whose taxonomy is navigated.
        """
        self._source = source
        self.marketplace_id = marketplace_id

        self._cache: dict[str | None, list[CategoryNode]] = {}
        self._known: dict[str, CategoryNode] = {}
        self._inflight: dict[str | None, asyncio.Task[list[CategoryNode]]] = {}
        self._generation = 0
        self._retry: Callable[[], Awaitable[Any]] | None = None

        self.path: CategoryPath = ()
        self.visible: list[CategoryNode] = []
        self.selected: CategoryNode | None = None
        self.required_attributes: tuple[Attribute, ...] = ()
        self.attribute_error: str | None = None
        self.load_error: str | None = None
        self.is_loading = False

    # -------------------------------------------------------------------------
    # Fetching
    # -------------------------------------------------------------------------

    async def children(
        self, parent_id: str | None = None, refresh: bool = False
    ) -> list[CategoryNode]:
        """Get direct children of a category.

        Cached per parent id; pending fetches for the same parent are
        shared.

        Args:
            parent_id: Parent category id, or None for the top level.
            refresh: Bypass the cache.

        Returns:
            Child categories (empty for a leaf).

        Raises:
            CategoryFetchError: If the data source fails.
        """
        if not refresh and parent_id in self._cache:
            return list(self._cache[parent_id])

        task = self._inflight.get(parent_id)
        if task is None:
            task = asyncio.ensure_future(self._fetch(parent_id))
            self._inflight[parent_id] = task
            task.add_done_callback(lambda done: self._forget(parent_id, done))

        return list(await asyncio.shield(task))

    def _forget(self, parent_id: str | None, task: asyncio.Task[list[CategoryNode]]) -> None:
        if self._inflight.get(parent_id) is task:
            del self._inflight[parent_id]

    async def _fetch(self, parent_id: str | None) -> list[CategoryNode]:
        logger.debug(
            "Fetching categories",
            marketplace_id=self.marketplace_id,
            parent_id=parent_id,
        )
        try:
            fetched = await self._source.fetch_children(self.marketplace_id, parent_id)
        except CategoryFetchError as e:
            logger.warning(
                "Category fetch failed",
                marketplace_id=self.marketplace_id,
                parent_id=parent_id,
                error=e.message,
                status_code=e.status_code,
            )
            raise

        nodes = [self._remember(node, parent_id) for node in fetched]
        self._cache[parent_id] = nodes
        if parent_id in self._known:
            self._known[parent_id] = self._known[parent_id].as_leaf(not nodes)
        return nodes

    def _remember(self, node: CategoryNode, parent_id: str | None) -> CategoryNode:
        parent = self._known.get(parent_id) if parent_id is not None else None
        path = node.path
        if not path:
            path = (*parent.path_parts, node.name) if parent is not None else (node.name,)
        normalized = CategoryNode(
            id=node.id,
            name=node.name,
            parent_id=node.parent_id if node.parent_id is not None else parent_id,
            is_leaf=node.is_leaf,
            path=path,
        )
        self._known[normalized.id] = normalized
        return normalized

    async def _load_attributes(
        self, leaf: CategoryNode
    ) -> tuple[tuple[Attribute, ...], str | None]:
        try:
            attributes = await self._source.fetch_attributes(self.marketplace_id, leaf.id)
        except CategoryFetchError as e:
            logger.warning(
                "Attribute fetch failed",
                marketplace_id=self.marketplace_id,
                category_id=leaf.id,
                error=e.message,
            )
            return (), e.message
        return tuple(attributes), None

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    async def load_root(self) -> bool:
        """Show the top-level categories.

        Returns:
            True if the list was rendered.
        """
        return await self._show(None)

    async def select(self, node: CategoryNode) -> SelectionResult:
        """Select a category from the visible list.

        Navigates into non-leaf categories. Leaves become the selected
        category and their attributes are loaded; an attribute failure
        does not undo the selection.

        Args:
            node: Category to select.

        Returns:
            SelectionResult.
        """
        base = navigation.without_leaf(self.path, self.selected)
        return await self._select(node, base)

    async def select_search_result(self, node: CategoryNode) -> SelectionResult:
        """Jump straight to a search result.

        The path is rebuilt from the node's ancestors without fetching
        the intermediate levels.

        Args:
            node: A node returned by ``search``.

        Returns:
            SelectionResult.
        """
        known = self._known.get(node.id, node)
        base = navigation.path_to(known, self._known)[:-1]
        return await self._select(known, base)

    async def _select(self, node: CategoryNode, base: CategoryPath) -> SelectionResult:
        self._generation += 1
        generation = self._generation
        self.is_loading = True

        try:
            # Targeted leaf check
            children = await self.children(node.id)
        except CategoryFetchError as e:
            if generation == self._generation:
                self.is_loading = False
                self.load_error = e.message
                self._retry = lambda: self._select(node, base)
            return SelectionResult(is_leaf=False, error=e.message)

        is_leaf = not children
        if generation != self._generation:
            return SelectionResult(is_leaf=is_leaf, superseded=True)

        node = self._known.get(node.id, node).as_leaf(is_leaf)
        self.path = navigation.push(base, node)
        self.load_error = None
        self._retry = None
        self.is_loading = False

        if not is_leaf:
            self._clear_selection()
            self.visible = children
            return SelectionResult(is_leaf=False)

        self.selected = node
        self.required_attributes = ()
        self.attribute_error = None
        self.visible = list(self._cache.get(node.parent_id, self.visible))

        attributes, error = await self._load_attributes(node)
        if self.selected is not node:
            return SelectionResult(is_leaf=True, superseded=True)

        self.required_attributes = attributes
        self.attribute_error = error
        return SelectionResult(
            is_leaf=True,
            required_attributes=attributes,
            attribute_error=error,
        )

    async def back(self) -> bool:
        """Go up one level.

        Clears the leaf selection when the selected leaf is removed and
        shows the children of the new tail (or the top level).

        Returns:
            True if the list was rendered.
        """
        self.path, popped = navigation.pop(self.path)
        if popped is not None and popped == self.selected:
            self._clear_selection()
        return await self._show(navigation.tail_id(self.path))

    async def reset(self) -> bool:
        """Return to the top level and clear the selection."""
        self.path = ()
        self._clear_selection()
        return await self._show(None)

    async def refresh(self, parent_ids: Iterable[str | None] | None = None) -> bool:
        """Drop cached levels and reload the current one.

        Args:
            parent_ids: Levels to drop; every level when omitted.

        Returns:
            True if the list was rendered.
        """
        if parent_ids is None:
            self._cache.clear()
        else:
            for parent_id in parent_ids:
                self._cache.pop(parent_id, None)

        current = navigation.without_leaf(self.path, self.selected)
        return await self._show(navigation.tail_id(current))

    async def retry(self) -> Any:
        """Repeat the last failed load.

        Returns:
            Result of the repeated operation, or None if nothing failed.
        """
        if self._retry is None:
            return None
        operation, self._retry = self._retry, None
        return await operation()

    async def _show(self, parent_id: str | None) -> bool:
        self._generation += 1
        generation = self._generation
        self.is_loading = True

        try:
            nodes = await self.children(parent_id)
        except CategoryFetchError as e:
            if generation == self._generation:
                self.is_loading = False
                self.load_error = e.message
                self._retry = lambda: self._show(parent_id)
            return False

        if generation != self._generation:
            return False

        self.visible = nodes
        self.is_loading = False
        self.load_error = None
        self._retry = None
        return True

    def _clear_selection(self) -> None:
        self.selected = None
        self.required_attributes = ()
        self.attribute_error = None

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def search(self, query: str) -> list[CategoryNode]:
        """Search categories loaded so far by name or path.

        Args:
            query: Free text (case-insensitive).

        Returns:
            Matching nodes.
        """
        return navigation.search(query, self._known)

    @property
    def path_label(self) -> str:
        """Breadcrumb of the current path."""
        return navigation.path_label(self.path)
