"""Application layer module.

Contains the draft reducer and the editor session that orchestrate the
engines, media storage and listing persistence.
"""

from listing_engine.application.media import (
    InMemoryMediaStorage,
    MediaFile,
    MediaStorage,
    UploadFailure,
    UploadReport,
    upload_files,
)
from listing_engine.application.reducer import (
    Action,
    AddDimension,
    AddImages,
    AddTag,
    AddVariantValue,
    ApplyToAll,
    AssignSkuSequence,
    ChangePlatform,
    ClearCategory,
    GenerateSkus,
    RemoveDimension,
    RemoveImage,
    RemoveTag,
    RemoveVariantValue,
    SelectCategory,
    SetAttributeValue,
    SetCustomField,
    SetField,
    UpdateCombination,
    reduce,
    reduce_all,
)
from listing_engine.application.repository import (
    InMemoryListingRepository,
    ListingRepository,
    get_listing_repository,
)
from listing_engine.application.schemas import ListingPayload
from listing_engine.application.session import (
    EditorSession,
    PublishResult,
    SaveResult,
    create_editor_session,
)

__all__ = [
    # Reducer
    "Action",
    "AddDimension",
    "AddImages",
    "AddTag",
    "AddVariantValue",
    "ApplyToAll",
    "AssignSkuSequence",
    "ChangePlatform",
    "ClearCategory",
    "GenerateSkus",
    "RemoveDimension",
    "RemoveImage",
    "RemoveTag",
    "RemoveVariantValue",
    "SelectCategory",
    "SetAttributeValue",
    "SetCustomField",
    "SetField",
    "UpdateCombination",
    "reduce",
    "reduce_all",
    # Media
    "InMemoryMediaStorage",
    "MediaFile",
    "MediaStorage",
    "UploadFailure",
    "UploadReport",
    "upload_files",
    # Persistence
    "InMemoryListingRepository",
    "ListingPayload",
    "ListingRepository",
    "get_listing_repository",
    # Session
    "EditorSession",
    "PublishResult",
    "SaveResult",
    "create_editor_session",
]
