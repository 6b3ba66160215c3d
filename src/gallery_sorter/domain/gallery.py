"""Domain models for gallery sessions."""

from dataclasses import dataclass, field

from gallery_sorter.domain.metadata import ImageMetadata
from gallery_sorter.domain.results import SortResult


@dataclass(frozen=True)
class ImageUpload:
    """Raw image received from the client."""

    filename: str
    content: bytes
    content_type: str | None = None


@dataclass(frozen=True)
class ImageRecord:
    """Uploaded image with its preview handle and generated metadata."""

    id: str
    filename: str
    mime_type: str
    content: bytes
    preview_url: str
    metadata: ImageMetadata | None = None
    error: str | None = None

    @property
    def is_described(self) -> bool:
        """Return True once metadata has been generated."""
        return self.metadata is not None


@dataclass
class GallerySession:
    """In-memory gallery state owned by a single client."""

    id: str
    images: list[ImageRecord] = field(default_factory=list)
    focus: str = ""
    last_sort: SortResult | None = None

    def find_image(self, image_id: str) -> ImageRecord | None:
        """Return the image with the given id, if present."""
        for record in self.images:
            if record.id == image_id:
                return record
        return None

    def described_images(self) -> list[ImageRecord]:
        """Return images that already have metadata, in upload order."""
        return [record for record in self.images if record.metadata is not None]

    def release(self) -> None:
        """Drop image payloads and any grouping built on them."""
        self.images = []
        self.last_sort = None
