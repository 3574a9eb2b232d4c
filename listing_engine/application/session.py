"""Editor session.

Owns one listing draft for the lifetime of an editor. Actions go through
the reducer, category picks go through the resolver, images go through
media storage, and save/publish hand a ListingPayload to the listing
repository. Failures come back as result objects.
"""

from dataclasses import dataclass, field, replace

import structlog

from listing_engine.application.media import (
    InMemoryMediaStorage,
    MediaFile,
    MediaStorage,
    UploadReport,
    upload_files,
)
from listing_engine.application.reducer import (
    Action,
    AddImages,
    ClearCategory,
    RemoveImage,
    SelectCategory,
    reduce,
)
from listing_engine.application.repository import ListingRepository, get_listing_repository
from listing_engine.application.schemas import ListingPayload
from listing_engine.catalog.resolver import CategoryTreeResolver, SelectionResult
from listing_engine.catalog.sources import create_category_source
from listing_engine.domain.categories import CategoryNode
from listing_engine.domain.draft import ListingDraft
from listing_engine.domain.exceptions import MediaUploadError, PersistenceError
from listing_engine.domain.platforms import get_platform_registry
from listing_engine.infrastructure.config import get_settings
from listing_engine.validation.engine import ValidationErrors, is_publishable, validate

logger = structlog.get_logger()


# ============================================================================
# Result Types
# ============================================================================


@dataclass
class SaveResult:
    """Result of saving a draft."""

    success: bool = True
    listing_id: str | None = None
    error: str | None = None
    error_code: str | None = None


@dataclass
class PublishResult:
    """Result of publishing a draft."""

    success: bool = True
    listing_id: str | None = None
    errors: ValidationErrors = field(default_factory=dict)
    error: str | None = None
    error_code: str | None = None


# ============================================================================
# Session
# ============================================================================


class EditorSession:
    """Single-owner editing session for one listing draft.

    Example usage:
        session = EditorSession(draft, resolver, get_listing_repository(), storage)
        session.dispatch(SetField("title", "Handmade mug"))
        await session.select_category(leaf)
        result = await session.publish()
    """

    def __init__(
        self,
        draft: ListingDraft,
        resolver: CategoryTreeResolver,
        repository: ListingRepository,
        storage: MediaStorage,
    ) -> None:
        """Initialize editor session.

        Args:
            draft: Initial draft.
            resolver: Category navigator for the draft's marketplace.
            repository: Listing persistence.
            storage: Image storage.
        """
        self.draft = draft
        self.resolver = resolver
        self.repository = repository
        self.storage = storage

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def dispatch(self, action: Action) -> ListingDraft:
        """Apply an action to the draft.

        Args:
            action: Edit to apply.

        Returns:
            The updated draft.
        """
        self.draft = reduce(self.draft, action)
        return self.draft

    async def select_category(self, node: CategoryNode) -> SelectionResult:
        """Navigate to a category and assign it when it is a leaf.

        Selecting a parent opens its children and clears the draft's
        category. A superseded or failed selection leaves the draft alone.
        """
        return self._apply_selection(await self.resolver.select(node))

    async def select_search_result(self, node: CategoryNode) -> SelectionResult:
        """Jump to a category found by search."""
        return self._apply_selection(await self.resolver.select_search_result(node))

    def _apply_selection(self, result: SelectionResult) -> SelectionResult:
        if not result.applied:
            return result
        if result.is_leaf and self.resolver.selected is not None:
            self.dispatch(
                SelectCategory(self.resolver.selected, result.required_attributes or ())
            )
        else:
            self.dispatch(ClearCategory())
        return result

    async def upload_images(self, files: list[MediaFile]) -> UploadReport:
        """Upload files and append the ones that succeeded.

        Args:
            files: Files to upload.

        Returns:
            UploadReport with per-file outcomes.
        """
        report = await upload_files(self.storage, files)
        if report.urls:
            self.dispatch(AddImages(tuple(report.urls)))
        return report

    async def remove_image(self, url: str) -> bool:
        """Delete an image from storage and the draft.

        Returns:
            True if removed; False if storage refused (draft unchanged).
        """
        try:
            await self.storage.remove(url)
        except MediaUploadError as e:
            logger.warning(
                "Image removal failed",
                platform=self.draft.platform.id,
                url=url,
                error=e.message,
            )
            return False
        self.dispatch(RemoveImage(url))
        return True

    def validate(self) -> ValidationErrors:
        """Validate the draft against its platform."""
        return validate(self.draft)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    async def save_draft(self) -> SaveResult:
        """Save without validation.

        Returns:
            SaveResult with the listing id.
        """
        try:
            listing_id = await self._write(ListingPayload.from_draft(self.draft))
        except PersistenceError as e:
            logger.error("Draft save failed", platform=self.draft.platform.id, error=e.message)
            return SaveResult(success=False, error=e.message, error_code="PERSISTENCE_ERROR")

        logger.info("Draft saved", platform=self.draft.platform.id, listing_id=listing_id)
        return SaveResult(listing_id=listing_id)

    async def publish(self) -> PublishResult:
        """Validate and write the listing as active.

        Returns:
            PublishResult. Validation errors block the write and are
            returned in ``errors``.
        """
        errors = self.validate()
        if not is_publishable(errors):
            logger.info("Publish blocked", platform=self.draft.platform.id, fields=sorted(errors))
            return PublishResult(
                success=False,
                errors=errors,
                error=f"{len(errors)} field(s) need attention",
                error_code="VALIDATION_FAILED",
            )

        try:
            listing_id = await self._write(ListingPayload.from_draft(self.draft, status="active"))
        except PersistenceError as e:
            logger.error("Publish failed", platform=self.draft.platform.id, error=e.message)
            return PublishResult(success=False, error=e.message, error_code="PERSISTENCE_ERROR")

        logger.info("Listing published", platform=self.draft.platform.id, listing_id=listing_id)
        return PublishResult(listing_id=listing_id)

    async def _write(self, payload: ListingPayload) -> str:
        listing_id = self.draft.listing_id
        if listing_id is None:
            listing_id = await self.repository.create_listing(payload)
            self.draft = replace(self.draft, listing_id=listing_id)
        else:
            await self.repository.update_listing(listing_id, payload)
        return listing_id


def create_editor_session(
    platform_id: str | None = None,
    marketplace_id: str | None = None,
    repository: ListingRepository | None = None,
    storage: MediaStorage | None = None,
) -> EditorSession:
    """Create an editor session for a new draft.

    Args:
        platform_id: Platform to edit for (configured default if None).
        marketplace_id: Marketplace whose taxonomy is browsed (platform id if None).
        repository: Listing persistence (in-memory singleton if None).
        storage: Image storage (in-memory if None).

    Returns:
        EditorSession wired to the configured category source.
    """
    settings = get_settings()
    platform = get_platform_registry().get(platform_id or settings.default_platform)
    marketplace = marketplace_id or platform.id

    return EditorSession(
        draft=ListingDraft.create(
            platform, marketplace_id, settings.default_variant_quantity
        ),
        resolver=CategoryTreeResolver(create_category_source(settings), marketplace),
        repository=repository or get_listing_repository(),
        storage=storage or InMemoryMediaStorage(),
    )
