"""Tests for concurrent media upload."""

import asyncio

import pytest

from listing_engine.application.media import (
    InMemoryMediaStorage,
    MediaFile,
    UploadFailure,
    upload_files,
)
from listing_engine.domain.exceptions import MediaUploadError


def image(name: str) -> MediaFile:
    """Create a small image file."""
    return MediaFile(name=name, content=b"\xff\xd8\xff")


class SlowStorage(InMemoryMediaStorage):
    """Storage whose uploads finish in reverse order."""

    def __init__(self, delays: dict[str, float]) -> None:
        super().__init__()
        self.delays = delays
        self.finished: list[str] = []

    async def upload(self, file: MediaFile) -> str:
        await asyncio.sleep(self.delays.get(file.name, 0))
        url = await super().upload(file)
        self.finished.append(file.name)
        return url


class TestUploadFiles:
    """Tests for upload_files."""

    @pytest.mark.asyncio
    async def test_all_succeed(self) -> None:
        """Every URL is returned."""
        storage = InMemoryMediaStorage()
        report = await upload_files(storage, [image("a.jpg"), image("b.jpg")])

        assert report.success
        assert len(report.urls) == 2
        assert set(report.urls) == set(storage.files)

    @pytest.mark.asyncio
    async def test_failure_does_not_abort_others(self) -> None:
        """A rejected file is reported, the rest still upload."""
        storage = InMemoryMediaStorage(fail_names={"b.jpg"})
        report = await upload_files(storage, [image("a.jpg"), image("b.jpg"), image("c.jpg")])

        assert not report.success
        assert len(report.urls) == 2
        assert report.failures == [
            UploadFailure(1, "b.jpg", "Upload of b.jpg failed: rejected by storage")
        ]

    @pytest.mark.asyncio
    async def test_failures_with_same_name_kept_apart(self) -> None:
        """Two failing files named alike are both reported."""
        report = await upload_files(
            InMemoryMediaStorage(),
            [MediaFile(name="photo.jpg", content=b""), MediaFile(name="photo.jpg", content=b"")],
        )

        assert [(f.index, f.filename) for f in report.failures] == [
            (0, "photo.jpg"),
            (1, "photo.jpg"),
        ]

    @pytest.mark.asyncio
    async def test_urls_keep_input_order(self) -> None:
        """URLs follow the input order, not completion order."""
        storage = SlowStorage({"first.jpg": 0.02, "second.jpg": 0})
        report = await upload_files(storage, [image("first.jpg"), image("second.jpg")])

        assert storage.finished == ["second.jpg", "first.jpg"]
        assert report.urls[0].endswith("first.jpg")
        assert report.urls[1].endswith("second.jpg")

    @pytest.mark.asyncio
    async def test_unexpected_error_reported(self) -> None:
        """Non-domain upload errors are reported per file."""

        class BrokenStorage(InMemoryMediaStorage):
            async def upload(self, file: MediaFile) -> str:
                raise RuntimeError("connection reset")

        report = await upload_files(BrokenStorage(), [image("a.jpg")])
        assert report.urls == []
        assert report.failures == [UploadFailure(0, "a.jpg", "connection reset")]

    @pytest.mark.asyncio
    async def test_empty_batch(self) -> None:
        """No files gives an empty successful report."""
        report = await upload_files(InMemoryMediaStorage(), [])
        assert report.success
        assert report.urls == []


class TestInMemoryMediaStorage:
    """Tests for InMemoryMediaStorage."""

    @pytest.mark.asyncio
    async def test_empty_file_rejected(self) -> None:
        """Empty files raise MediaUploadError."""
        with pytest.raises(MediaUploadError) as exc_info:
            await InMemoryMediaStorage().upload(MediaFile(name="x.jpg", content=b""))
        assert exc_info.value.filename == "x.jpg"

    @pytest.mark.asyncio
    async def test_remove(self) -> None:
        """Removed files are gone; unknown URLs raise."""
        storage = InMemoryMediaStorage()
        url = await storage.upload(image("a.jpg"))

        await storage.remove(url)

        assert storage.files == {}
        with pytest.raises(MediaUploadError):
            await storage.remove(url)

    @pytest.mark.asyncio
    async def test_upload_after_remove_gets_new_url(self) -> None:
        """A remove followed by an upload never reuses a stored URL."""
        storage = InMemoryMediaStorage()
        first = await storage.upload(image("a.jpg"))
        second = await storage.upload(image("a.jpg"))
        await storage.remove(first)

        third = await storage.upload(image("a.jpg"))

        assert third not in (first, second)
        assert set(storage.files) == {second, third}
