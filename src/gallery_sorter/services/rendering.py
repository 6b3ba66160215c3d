"""View models for gallery cards, groups and status text."""

from dataclasses import dataclass, field

from gallery_sorter.domain.gallery import GallerySession, ImageRecord
from gallery_sorter.domain.results import ExtractionBatch, SortResult, SortStatus

UNGROUPED_NAME = "Ungrouped"
NO_GROUPS_MESSAGE = "Could not sort images into groups."
FAILED_IMAGE_MESSAGE = "Failed to analyze this image."


@dataclass(frozen=True)
class ImageCard:
    """Rendered state of one gallery image."""

    image_id: str
    filename: str
    preview_url: str
    status: str
    description: str | None = None
    categories: str | None = None
    dominant_colors: list[str] = field(default_factory=list)
    has_people: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class GroupView:
    """Rendered group of cards."""

    name: str
    cards: list[ImageCard]


@dataclass(frozen=True)
class SortView:
    """Rendered sorting outcome."""

    sort_by: str
    status: str
    groups: list[GroupView]
    message: str | None
    coverage: dict[str, object]


def render_card(record: ImageRecord) -> ImageCard:
    """Build a card for an image in any stage of processing."""
    if record.metadata is not None:
        metadata = record.metadata
        return ImageCard(
            image_id=record.id,
            filename=record.filename,
            preview_url=record.preview_url,
            status="ready",
            description=metadata.description,
            categories=", ".join(metadata.categories),
            dominant_colors=list(metadata.dominant_colors),
            has_people="Yes" if metadata.has_people else "No",
        )
    if record.error is not None:
        return ImageCard(
            image_id=record.id,
            filename=record.filename,
            preview_url=record.preview_url,
            status="failed",
            error=FAILED_IMAGE_MESSAGE,
        )
    return ImageCard(
        image_id=record.id,
        filename=record.filename,
        preview_url=record.preview_url,
        status="pending",
    )


def render_cards(session: GallerySession) -> list[ImageCard]:
    return [render_card(record) for record in session.images]


def render_groups(session: GallerySession, result: SortResult) -> SortView:
    """Build group views, appending unplaced images as their own group."""
    groups = [
        GroupView(name=group.name, cards=_cards_for(session, group.image_ids))
        for group in result.groups
    ]
    if result.status is SortStatus.SORTED and result.coverage.missing_ids:
        missing = _cards_for(session, result.coverage.missing_ids)
        if missing:
            groups.append(GroupView(name=UNGROUPED_NAME, cards=missing))
    return SortView(
        sort_by=result.dimension.value,
        status=result.status.value,
        groups=groups,
        message=None if groups else NO_GROUPS_MESSAGE,
        coverage={
            "exact": result.coverage.is_exact,
            "missing_ids": result.coverage.missing_ids,
            "duplicate_ids": result.coverage.duplicate_ids,
            "unknown_ids": result.coverage.unknown_ids,
        },
    )


def _cards_for(session: GallerySession, image_ids: list[str]) -> list[ImageCard]:
    records = (session.find_image(image_id) for image_id in image_ids)
    return [render_card(record) for record in records if record is not None]


def extraction_status(batch: ExtractionBatch) -> str:
    """Status line shown after metadata generation."""
    if batch.failed:
        return (
            f"Analysis complete! {len(batch.failed)} of "
            f"{len(batch.outcomes)} images could not be analyzed."
        )
    return "Analysis complete!"


def sorting_status(result: SortResult) -> str:
    """Status line shown after a sort request."""
    if result.status is SortStatus.EMPTY:
        return "No metadata available to sort."
    if result.status is SortStatus.FAILED:
        return "An error occurred while sorting."
    return f"Images sorted by {result.dimension.label}"
