"""Result types returned by the extraction and sorting stages."""

from dataclasses import dataclass, field
from enum import StrEnum

from gallery_sorter.domain.metadata import ImageMetadata, TaggedMetadata


class SortDimension(StrEnum):
    """Supported criteria for grouping images."""

    CATEGORIES = "categories"
    COLORS = "colors"
    PEOPLE = "people"
    DESCRIPTION = "description"

    @property
    def label(self) -> str:
        """Human-readable name used in prompts and status text."""
        return _DIMENSION_LABELS[self]


_DIMENSION_LABELS = {
    SortDimension.CATEGORIES: "category",
    SortDimension.COLORS: "dominant color",
    SortDimension.PEOPLE: "presence of people",
    SortDimension.DESCRIPTION: "scene description",
}


@dataclass(frozen=True)
class ExtractionOutcome:
    """Metadata or failure for one image of a batch."""

    image_id: str
    metadata: ImageMetadata | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Return True when metadata was produced."""
        return self.metadata is not None


@dataclass(frozen=True)
class ExtractionBatch:
    """Per-image outcomes of a metadata extraction batch, in input order."""

    outcomes: list[ExtractionOutcome]

    @property
    def succeeded(self) -> list[ExtractionOutcome]:
        return [outcome for outcome in self.outcomes if outcome.ok]

    @property
    def failed(self) -> list[ExtractionOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]


@dataclass(frozen=True)
class ImageGroup:
    """Named group of images produced by the sorter."""

    name: str
    members: list[TaggedMetadata]

    @property
    def image_ids(self) -> list[str]:
        return [member.image_id for member in self.members]


@dataclass(frozen=True)
class CoverageReport:
    """How well a grouping covers its input records."""

    missing_ids: list[str] = field(default_factory=list)
    duplicate_ids: list[str] = field(default_factory=list)
    unknown_ids: list[str] = field(default_factory=list)

    @property
    def is_exact(self) -> bool:
        """Return True when every input appears in exactly one group."""
        return not (self.missing_ids or self.duplicate_ids or self.unknown_ids)


class SortStatus(StrEnum):
    """Outcome of a sorting request."""

    EMPTY = "empty"
    SORTED = "sorted"
    FAILED = "failed"


@dataclass(frozen=True)
class SortResult:
    """Grouping result that distinguishes empty input from failure."""

    status: SortStatus
    dimension: SortDimension
    groups: list[ImageGroup] = field(default_factory=list)
    coverage: CoverageReport = field(default_factory=CoverageReport)
    error: str | None = None

    @classmethod
    def empty(cls, dimension: SortDimension) -> "SortResult":
        return cls(status=SortStatus.EMPTY, dimension=dimension)

    @classmethod
    def failed(cls, dimension: SortDimension, error: str) -> "SortResult":
        return cls(status=SortStatus.FAILED, dimension=dimension, error=error)
