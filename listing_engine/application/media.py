"""Listing media upload.

Uploads image files to a storage backend concurrently. Each file succeeds
or fails on its own: successful URLs are returned in input order, failures
are logged and reported without aborting the rest of the batch.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Protocol

import structlog

from listing_engine.domain.exceptions import MediaUploadError

logger = structlog.get_logger()


@dataclass(frozen=True)
class MediaFile:
    """A file selected for upload."""

    name: str
    content: bytes
    content_type: str = "image/jpeg"


class MediaStorage(Protocol):
    """Storage backend for listing images."""

    async def upload(self, file: MediaFile) -> str:
        """Store a file and return its public URL.

        Raises:
            MediaUploadError: If the upload fails.
        """
        ...

    async def remove(self, url: str) -> None:
        """Delete a previously uploaded file.

        Raises:
            MediaUploadError: If the removal fails.
        """
        ...


@dataclass(frozen=True)
class UploadFailure:
    """A file that could not be uploaded.

    Attributes:
        index: Position of the file in the batch.
        filename: Name of the file.
        error: Why the upload failed.
    """

    index: int
    filename: str
    error: str


@dataclass
class UploadReport:
    """Outcome of a batch upload.

    Attributes:
        urls: URLs of files that uploaded, in input order.
        failures: Failed files in input order. Files sharing a name are
            reported separately.
    """

    urls: list[str] = field(default_factory=list)
    failures: list[UploadFailure] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True when every file uploaded."""
        return not self.failures


async def upload_files(storage: MediaStorage, files: list[MediaFile]) -> UploadReport:
    """Upload files concurrently.

    Args:
        storage: Storage backend.
        files: Files to upload.

    Returns:
        UploadReport with the URLs that succeeded and per-file failures.
    """
    results = await asyncio.gather(
        *(storage.upload(f) for f in files),
        return_exceptions=True,
    )

    report = UploadReport()
    for index, (file, result) in enumerate(zip(files, results)):
        if isinstance(result, Exception):
            message = str(result)
            logger.warning(
                "Image upload failed", filename=file.name, index=index, error=message
            )
            report.failures.append(UploadFailure(index, file.name, message))
        elif isinstance(result, BaseException):
            raise result
        else:
            report.urls.append(result)

    logger.info(
        "Image upload finished",
        uploaded=len(report.urls),
        failed=len(report.failures),
    )
    return report


# ============================================================================
# In-Memory Storage
# ============================================================================


class InMemoryMediaStorage:
    """Media storage that keeps files in a dict.

    Used for local runs and tests. Files named in ``fail_names`` are
    rejected.
    """

    def __init__(
        self,
        base_url: str = "memory://media",
        fail_names: set[str] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.fail_names = fail_names or set()
        self.files: dict[str, MediaFile] = {}
        self._uploads = 0

    async def upload(self, file: MediaFile) -> str:
        if file.name in self.fail_names:
            raise MediaUploadError(file.name, "rejected by storage")
        if not file.content:
            raise MediaUploadError(file.name, "file is empty")
        url = f"{self.base_url}/{self._uploads}-{file.name}"
        self._uploads += 1
        self.files[url] = file
        return url

    async def remove(self, url: str) -> None:
        if self.files.pop(url, None) is None:
            raise MediaUploadError(url.rsplit("/", 1)[-1], "file not found")
