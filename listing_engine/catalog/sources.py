"""Category data sources.

A data source answers two questions for a marketplace: which categories
sit directly under a parent, and which attributes a leaf declares. The
resolver only ever talks to the ``CategoryDataSource`` protocol.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

import httpx
import structlog

from listing_engine.catalog.taxonomy import TaxonomyParser
from listing_engine.domain.categories import Attribute, AttributeValue, CategoryNode
from listing_engine.domain.exceptions import CategoryFetchError
from listing_engine.infrastructure.config import Settings, get_settings

logger = structlog.get_logger()


class CategoryDataSource(Protocol):
    """Source of category levels and leaf attributes."""

    async def fetch_children(
        self, marketplace_id: str, parent_id: str | None
    ) -> list[CategoryNode]:
        """Fetch direct children of a category (None for top level)."""
        ...

    async def fetch_attributes(
        self, marketplace_id: str, category_id: str
    ) -> list[Attribute]:
        """Fetch the attributes declared by a leaf category."""
        ...


# ============================================================================
# Static Source
# ============================================================================


def _values(*names: str) -> tuple[AttributeValue, ...]:
    return tuple(AttributeValue(id=str(i), name=name) for i, name in enumerate(names, start=1))


_COLOR = Attribute(
    id="color",
    name="Renk",
    required=True,
    allow_custom=True,
    values=_values("Siyah", "Beyaz", "Kırmızı", "Mavi", "Yeşil", "Lacivert", "Gri"),
)
_SIZE = Attribute(
    id="size",
    name="Beden",
    required=True,
    values=_values("XS", "S", "M", "L", "XL", "XXL"),
)
_MATERIAL = Attribute(id="material", name="Materyal", allow_custom=True)
_BRAND_MODEL = Attribute(id="model", name="Model", required=True, allow_custom=True)
_WARRANTY = Attribute(
    id="warranty",
    name="Garanti Süresi",
    values=_values("Yok", "1 Yıl", "2 Yıl", "3 Yıl"),
)
_CONNECTION = Attribute(
    id="connectionType",
    name="Bağlantı Tipi",
    required=True,
    values=_values("Kablolu", "Bluetooth", "Wi-Fi"),
)
_DIMENSIONS = Attribute(id="dimensions", name="Ölçüler", allow_custom=True)

# Attributes declared by the embedded fallback leaves
STATIC_ATTRIBUTES: dict[str, tuple[Attribute, ...]] = {
    "1-1-1": (_COLOR, _SIZE, _MATERIAL),
    "1-1-2": (_COLOR, _SIZE, _MATERIAL),
    "1-1-3": (_COLOR, _SIZE, _MATERIAL),
    "1-2-1": (_COLOR, _SIZE, _MATERIAL),
    "1-2-2": (_COLOR, _SIZE, _MATERIAL),
    "2-1": (_COLOR, _MATERIAL, _DIMENSIONS),
    "2-2": (_MATERIAL,),
    "2-3": (_MATERIAL, _DIMENSIONS),
    "3-1": (_BRAND_MODEL, _WARRANTY),
    "3-2": (_BRAND_MODEL, _WARRANTY),
    "3-3": (_BRAND_MODEL, _CONNECTION, _WARRANTY),
}


class StaticCategorySource:
    """Category source backed by a parsed line-format taxonomy.

    Used for marketplaces without an API connection. The same tree is
    served for every marketplace id.
    """

    def __init__(
        self,
        parser: TaxonomyParser | None = None,
        attributes: Mapping[str, Sequence[Attribute]] | None = None,
    ) -> None:
        """Initialize static source.

        Args:
            parser: Parsed taxonomy; the embedded fallback tree if omitted.
            attributes: Leaf attributes keyed by category id.
        """
        if parser is None:
            parser = TaxonomyParser()
            parser.parse_embedded()
        self._parser = parser
        self._attributes = dict(STATIC_ATTRIBUTES if attributes is None else attributes)

    async def fetch_children(
        self, marketplace_id: str, parent_id: str | None
    ) -> list[CategoryNode]:
        """Return children from the parsed taxonomy."""
        return self._parser.get_children(parent_id)

    async def fetch_attributes(
        self, marketplace_id: str, category_id: str
    ) -> list[Attribute]:
        """Return the attribute table entry for a leaf."""
        return list(self._attributes.get(category_id, ()))


# ============================================================================
# HTTP Source
# ============================================================================


class HttpCategorySource:
    """Category source backed by a remote taxonomy API.

    Endpoints:
        GET /marketplaces/{marketplace_id}/categories?parent_id=...
            -> {"categories": [{"id", "name", "parentId"?, "path"?}, ...]}
        GET /marketplaces/{marketplace_id}/categories/{category_id}/attributes
            -> {"attributes": [...]}
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize HTTP source.

        Args:
            base_url: API base URL.
            api_key: Optional bearer token.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used in tests).
        """
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_children(
        self, marketplace_id: str, parent_id: str | None
    ) -> list[CategoryNode]:
        """Fetch one level of the taxonomy.

        Raises:
            CategoryFetchError: On API error or a malformed response.
        """
        params: dict[str, Any] = {}
        if parent_id is not None:
            params["parent_id"] = parent_id

        path = f"/marketplaces/{marketplace_id}/categories"
        data = await self._get_json(marketplace_id, path, params)
        try:
            return [CategoryNode.from_api_response(c) for c in data.get("categories", [])]
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise self._malformed(marketplace_id, path, e) from e

    async def fetch_attributes(
        self, marketplace_id: str, category_id: str
    ) -> list[Attribute]:
        """Fetch leaf attributes.

        A 404 means the category declares no attributes.

        Raises:
            CategoryFetchError: On API error or a malformed response.
        """
        path = f"/marketplaces/{marketplace_id}/categories/{category_id}/attributes"
        data = await self._get_json(marketplace_id, path, allow_missing=True)
        try:
            return [Attribute.from_api_response(a) for a in data.get("attributes", [])]
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise self._malformed(marketplace_id, path, e) from e

    @staticmethod
    def _malformed(marketplace_id: str, path: str, error: Exception) -> CategoryFetchError:
        logger.error(
            "Malformed category API response",
            marketplace_id=marketplace_id,
            path=path,
            error=repr(error),
        )
        return CategoryFetchError(marketplace_id, f"Malformed response from {path}")

    async def _get_json(
        self,
        marketplace_id: str,
        path: str,
        params: dict[str, Any] | None = None,
        allow_missing: bool = False,
    ) -> dict[str, Any]:
        try:
            client = await self._get_client()
            response = await client.get(path, params=params)

            if response.status_code == 404 and allow_missing:
                return {}

            if response.status_code != 200:
                raise CategoryFetchError(
                    marketplace_id,
                    f"Failed to fetch {path}: {response.text}",
                    response.status_code,
                )

            try:
                return response.json()
            except ValueError as e:
                raise self._malformed(marketplace_id, path, e) from e

        except httpx.RequestError as e:
            logger.error(
                "Category API request failed",
                marketplace_id=marketplace_id,
                path=path,
                error=str(e),
            )
            raise CategoryFetchError(marketplace_id, f"Request failed: {str(e)}") from e


def create_category_source(config: Settings | None = None) -> CategoryDataSource:
    """Build the configured category source.

    Uses the HTTP source when ``category_api_url`` is set, the embedded
    static taxonomy otherwise.

    Args:
        config: Settings; the global settings if omitted.

    Returns:
        Category data source.
    """
    config = config or get_settings()
    if config.category_api_url:
        return HttpCategorySource(
            base_url=config.category_api_url,
            api_key=config.category_api_key,
            timeout=config.category_api_timeout,
        )
    return StaticCategorySource()
