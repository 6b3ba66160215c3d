"""Batched grouping of described images using the model capability."""

import json
import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from pydantic import ValidationError

from gallery_sorter.domain.metadata import SortingPayload, TaggedMetadata
from gallery_sorter.domain.results import (
    CoverageReport,
    ImageGroup,
    SortDimension,
    SortResult,
    SortStatus,
)
from gallery_sorter.services.model import MetadataParseError, ModelClient
from gallery_sorter.services.schemas import SORTING_SCHEMA, SORTING_SCHEMA_NAME

logger = logging.getLogger(__name__)


def build_sorting_prompt(
    records: Sequence[TaggedMetadata], dimension: SortDimension
) -> str:
    """Return the grouping instruction embedding the full metadata set."""
    serialized = json.dumps([record.model_dump() for record in records], indent=2)
    return (
        "You are a photo gallery organizer. Based on the following image "
        "metadata, group the images according to the user's preference to "
        f"sort by **{dimension.label}**. Image Metadata: {serialized}. "
        "Return a single JSON object categorizing all images into logical "
        "groups. Ensure every image is placed into exactly one group and copy "
        "each image's image_id unchanged."
    )


@dataclass
class GroupSorter:
    """Groups metadata records into named categories with one model call."""

    client: ModelClient
    model: str
    reasoning_effort: str | None = None
    store: bool = False

    async def sort(
        self, records: Sequence[TaggedMetadata], dimension: SortDimension
    ) -> SortResult:
        """Group records by the requested dimension."""
        if not records:
            return SortResult.empty(dimension)
        try:
            raw = await self.client.generate(
                model=self.model,
                prompt=build_sorting_prompt(records, dimension),
                schema=SORTING_SCHEMA,
                schema_name=SORTING_SCHEMA_NAME,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
            )
            payload = _parse_payload(raw)
        except Exception as exc:
            logger.exception(
                "Error sorting images",
                extra={"sort_by": dimension.value, "record_count": len(records)},
            )
            return SortResult.failed(dimension, str(exc) or type(exc).__name__)

        groups, coverage = reconcile_groups(payload, records)
        if not coverage.is_exact:
            logger.warning(
                "Grouping did not cover every image exactly once",
                extra={
                    "missing_ids": coverage.missing_ids,
                    "duplicate_ids": coverage.duplicate_ids,
                    "unknown_ids": coverage.unknown_ids,
                },
            )
        return SortResult(
            status=SortStatus.SORTED,
            dimension=dimension,
            groups=groups,
            coverage=coverage,
        )


def reconcile_groups(
    payload: SortingPayload, records: Sequence[TaggedMetadata]
) -> tuple[list[ImageGroup], CoverageReport]:
    """Match returned members to input records by image id.

    Members whose id is not among the inputs are dropped. Images placed in
    more than one group stay in each of them. Both cases, and inputs that
    were never placed, are listed in the coverage report.
    """
    known = {record.image_id: record for record in records}
    placed: Counter[str] = Counter()
    unknown: list[str] = []
    groups: list[ImageGroup] = []
    for group in payload.sorted_groups:
        members: list[TaggedMetadata] = []
        for member in group.images:
            original = known.get(member.image_id)
            if original is None:
                if member.image_id not in unknown:
                    unknown.append(member.image_id)
                continue
            placed[member.image_id] += 1
            members.append(original)
        groups.append(ImageGroup(name=group.group_name, members=members))

    coverage = CoverageReport(
        missing_ids=[image_id for image_id in known if placed[image_id] == 0],
        duplicate_ids=[image_id for image_id in known if placed[image_id] > 1],
        unknown_ids=unknown,
    )
    return groups, coverage


def _parse_payload(raw: dict[str, object]) -> SortingPayload:
    try:
        return SortingPayload.model_validate(raw)
    except ValidationError as exc:
        raise MetadataParseError("Grouping response did not match the schema") from exc
