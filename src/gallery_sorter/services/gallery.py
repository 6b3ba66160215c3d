"""Gallery session orchestration across the extraction and sorting stages."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import uuid4

from gallery_sorter.domain.gallery import GallerySession, ImageRecord, ImageUpload
from gallery_sorter.domain.metadata import TaggedMetadata
from gallery_sorter.domain.results import (
    ExtractionBatch,
    ExtractionOutcome,
    SortDimension,
    SortResult,
)
from gallery_sorter.services.extractor import MetadataExtractor
from gallery_sorter.services.media import SUPPORTED_MIME_TYPES, resolve_mime_type
from gallery_sorter.services.sorter import GroupSorter

logger = logging.getLogger(__name__)

_GENERIC_CONTENT_TYPES = {"", "application/octet-stream"}


class GalleryError(Exception):
    """Base error for gallery operations."""


class SessionNotFoundError(GalleryError):
    """Raised when a session id is unknown."""


class ImageNotFoundError(GalleryError):
    """Raised when an image id is unknown within a session."""


class InvalidUploadError(GalleryError):
    """Raised when an upload contains no usable images."""


class UploadTooLargeError(GalleryError):
    """Raised when an upload exceeds the configured limits."""


class UnsupportedMediaTypeError(GalleryError):
    """Raised when an uploaded file is not a supported image."""


class GalleryStore(Protocol):
    """Storage interface for gallery sessions."""

    def add(self, session: GallerySession) -> None:
        """Store a new session."""

    def get(self, session_id: str) -> GallerySession | None:
        """Return a session by id, if present."""

    def remove(self, session_id: str) -> GallerySession | None:
        """Remove and return a session, if present."""


@dataclass
class InMemoryGalleryStore(GalleryStore):
    """Process-local session store; sessions vanish on restart."""

    _sessions: dict[str, GallerySession]

    def __init__(self) -> None:
        self._sessions = {}

    def add(self, session: GallerySession) -> None:
        self._sessions[session.id] = session

    def get(self, session_id: str) -> GallerySession | None:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> GallerySession | None:
        return self._sessions.pop(session_id, None)


@dataclass
class GalleryService:
    """Owns gallery sessions and runs the pipeline stages against them."""

    store: GalleryStore
    extractor: MetadataExtractor
    sorter: GroupSorter
    max_upload_images: int = 50
    max_image_bytes: int = 20 * 1024 * 1024

    def create_session(self, uploads: Sequence[ImageUpload]) -> GallerySession:
        """Create a session holding the uploaded images."""
        session = GallerySession(id=uuid4().hex)
        session.images = self._build_records(session.id, uploads)
        self.store.add(session)
        logger.info(
            "Created gallery session",
            extra={"session_id": session.id, "image_count": len(session.images)},
        )
        return session

    def replace_images(
        self, session_id: str, uploads: Sequence[ImageUpload]
    ) -> GallerySession:
        """Discard the session's images and previews, then store new ones."""
        session = self.get_session(session_id)
        records = self._build_records(session.id, uploads)
        session.release()
        session.focus = ""
        session.images = records
        return session

    def get_session(self, session_id: str) -> GallerySession:
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    def get_image(self, session_id: str, image_id: str) -> ImageRecord:
        record = self.get_session(session_id).find_image(image_id)
        if record is None:
            raise ImageNotFoundError(f"Image {image_id} not found")
        return record

    def close_session(self, session_id: str) -> None:
        """Remove a session and release its image payloads."""
        session = self.store.remove(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        session.release()

    async def generate_metadata(
        self, session_id: str, focus: str = ""
    ) -> ExtractionBatch:
        """Describe every image that has no metadata yet."""
        session = self.get_session(session_id)
        session.focus = focus.strip()
        pending = [record for record in session.images if not record.is_described]
        batch = await self.extractor.extract_each(pending, session.focus)
        outcomes = {outcome.image_id: outcome for outcome in batch.outcomes}
        session.images = [
            _apply_outcome(record, outcomes.get(record.id))
            for record in session.images
        ]
        logger.info(
            "Generated image metadata",
            extra={
                "session_id": session.id,
                "succeeded": len(batch.succeeded),
                "failed": len(batch.failed),
            },
        )
        return batch

    async def sort(self, session_id: str, dimension: SortDimension) -> SortResult:
        """Group the session's described images by the given dimension."""
        session = self.get_session(session_id)
        records = [
            TaggedMetadata.tag(record.id, record.metadata)
            for record in session.described_images()
            if record.metadata is not None
        ]
        result = await self.sorter.sort(records, dimension)
        session.last_sort = result
        return result

    def _build_records(
        self, session_id: str, uploads: Sequence[ImageUpload]
    ) -> list[ImageRecord]:
        if not uploads:
            raise InvalidUploadError("No images were uploaded")
        if len(uploads) > self.max_upload_images:
            raise UploadTooLargeError(
                f"At most {self.max_upload_images} images can be uploaded at once"
            )
        records: list[ImageRecord] = []
        for upload in uploads:
            if not upload.content:
                raise InvalidUploadError(f"{upload.filename} is empty")
            if len(upload.content) > self.max_image_bytes:
                raise UploadTooLargeError(f"{upload.filename} is too large")
            declared = (upload.content_type or "").lower().split(";", 1)[0].strip()
            if declared not in _GENERIC_CONTENT_TYPES and (
                declared not in SUPPORTED_MIME_TYPES
            ):
                raise UnsupportedMediaTypeError(
                    f"Unsupported image type: {upload.content_type}"
                )
            image_id = uuid4().hex
            records.append(
                ImageRecord(
                    id=image_id,
                    filename=upload.filename,
                    mime_type=resolve_mime_type(upload.content, declared),
                    content=upload.content,
                    preview_url=f"/sessions/{session_id}/images/{image_id}",
                )
            )
        return records


def _apply_outcome(
    record: ImageRecord, outcome: ExtractionOutcome | None
) -> ImageRecord:
    if outcome is None or record.is_described:
        return record
    if outcome.ok:
        return replace(record, metadata=outcome.metadata, error=None)
    return replace(record, error=outcome.error)
