"""Models for image metadata produced by the model capability."""

from pydantic import BaseModel, ConfigDict, Field


class ImageMetadata(BaseModel):
    """Structured description of a single image."""

    model_config = ConfigDict(frozen=True)

    description: str
    categories: list[str] = Field(min_length=1)
    dominant_colors: list[str] = Field(min_length=1)
    has_people: bool


class TaggedMetadata(ImageMetadata):
    """Image metadata carrying the identifier of its source image."""

    image_id: str

    @classmethod
    def tag(cls, image_id: str, metadata: ImageMetadata) -> "TaggedMetadata":
        """Attach an image id to metadata for the grouping round trip."""
        return cls(image_id=image_id, **metadata.model_dump())


class SortedGroupPayload(BaseModel):
    """Single group as returned by the sorting call."""

    group_name: str
    images: list[TaggedMetadata]


class SortingPayload(BaseModel):
    """Structured output of the sorting call."""

    sorted_groups: list[SortedGroupPayload]
