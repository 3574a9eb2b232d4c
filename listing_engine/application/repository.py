"""Listing repository.

Persistence port for listing documents plus an in-memory implementation.
"""

from typing import Protocol

import structlog

from listing_engine.application.schemas import ListingPayload
from listing_engine.domain.base import Identifier
from listing_engine.domain.exceptions import PersistenceError

logger = structlog.get_logger()


class ListingRepository(Protocol):
    """Storage for listing documents."""

    async def create_listing(self, payload: ListingPayload) -> str:
        """Store a new listing and return its id.

        Raises:
            PersistenceError: If the write fails.
        """
        ...

    async def update_listing(self, listing_id: str, payload: ListingPayload) -> None:
        """Overwrite an existing listing.

        Raises:
            PersistenceError: If the write fails or the listing is unknown.
        """
        ...


class InMemoryListingRepository:
    """In-memory repository for listings."""

    def __init__(self) -> None:
        self._listings: dict[str, ListingPayload] = {}

    async def create_listing(self, payload: ListingPayload) -> str:
        """Store a new listing."""
        listing_id = str(Identifier.generate())
        self._listings[listing_id] = payload
        logger.debug("Listing stored", listing_id=listing_id, platform=payload.platform)
        return listing_id

    async def update_listing(self, listing_id: str, payload: ListingPayload) -> None:
        """Overwrite a stored listing."""
        if listing_id not in self._listings:
            raise PersistenceError(
                f"Listing {listing_id} not found",
                details={"listing_id": listing_id},
            )
        self._listings[listing_id] = payload
        logger.debug("Listing updated", listing_id=listing_id, platform=payload.platform)

    def get(self, listing_id: str) -> ListingPayload | None:
        """Get listing by ID."""
        return self._listings.get(listing_id)

    def list_all(self) -> list[tuple[str, ListingPayload]]:
        """List stored listings in insertion order."""
        return list(self._listings.items())


# Global repository instance
_listing_repo: InMemoryListingRepository | None = None


def get_listing_repository() -> InMemoryListingRepository:
    """Get listing repository singleton."""
    global _listing_repo
    if _listing_repo is None:
        _listing_repo = InMemoryListingRepository()
    return _listing_repo
