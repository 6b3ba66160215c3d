"""Per-image metadata extraction using the model capability."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from pydantic import ValidationError

from gallery_sorter.domain.gallery import ImageRecord
from gallery_sorter.domain.metadata import ImageMetadata
from gallery_sorter.domain.results import ExtractionBatch, ExtractionOutcome
from gallery_sorter.services.media import to_data_url
from gallery_sorter.services.model import MetadataParseError, ModelClient
from gallery_sorter.services.schemas import METADATA_SCHEMA, METADATA_SCHEMA_NAME

logger = logging.getLogger(__name__)

R = TypeVar("R")

_BASE_PROMPT = (
    "Analyze this image and generate the following metadata in JSON format: "
    "a concise 'description', an array of 5-10 'categories', the top 3 "
    "'dominant_colors' as hex codes, and a boolean for 'has_people'."
)


def build_metadata_prompt(focus: str = "") -> str:
    """Return the extraction instruction, with the user's focus appended."""
    cleaned = focus.strip()
    if not cleaned:
        return _BASE_PROMPT
    return f'{_BASE_PROMPT} Focus the analysis on the user\'s interest: "{cleaned}".'


@dataclass
class MetadataExtractor:
    """Generates metadata for images, one model call per image."""

    client: ModelClient
    model: str
    reasoning_effort: str | None = None
    store: bool = False
    concurrency: int = 0

    async def describe(self, image: ImageRecord, focus: str = "") -> ImageMetadata:
        """Generate metadata for a single image."""
        raw = await self.client.generate(
            model=self.model,
            prompt=build_metadata_prompt(focus),
            schema=METADATA_SCHEMA,
            schema_name=METADATA_SCHEMA_NAME,
            image_data_url=to_data_url(image.content, image.mime_type),
            reasoning_effort=self.reasoning_effort,
            store=self.store,
        )
        try:
            return ImageMetadata.model_validate(raw)
        except ValidationError as exc:
            raise MetadataParseError(
                f"Metadata for {image.filename} did not match the schema"
            ) from exc

    async def generate_metadata(
        self, images: Sequence[ImageRecord], focus: str = ""
    ) -> list[ImageMetadata]:
        """Describe every image, or return an empty list if any call fails."""
        try:
            return await self._run_all(
                images, lambda image: self.describe(image, focus)
            )
        except Exception:
            logger.exception(
                "Error generating image metadata", extra={"image_count": len(images)}
            )
            return []

    async def extract_each(
        self, images: Sequence[ImageRecord], focus: str = ""
    ) -> ExtractionBatch:
        """Describe every image, recording failures per image."""
        outcomes = await self._run_all(
            images, lambda image: self._extract_one(image, focus)
        )
        return ExtractionBatch(outcomes=outcomes)

    async def _extract_one(self, image: ImageRecord, focus: str) -> ExtractionOutcome:
        try:
            metadata = await self.describe(image, focus)
        except Exception as exc:
            logger.exception(
                "Error processing image",
                extra={"image_id": image.id, "image_filename": image.filename},
            )
            return ExtractionOutcome(
                image_id=image.id, error=str(exc) or type(exc).__name__
            )
        return ExtractionOutcome(image_id=image.id, metadata=metadata)

    async def _run_all(
        self,
        images: Sequence[ImageRecord],
        call: Callable[[ImageRecord], Awaitable[R]],
    ) -> list[R]:
        """Run one call per image; a failure cancels the calls still running."""
        semaphore = (
            asyncio.Semaphore(self.concurrency) if self.concurrency > 0 else None
        )

        async def run(image: ImageRecord) -> R:
            if semaphore is None:
                return await call(image)
            async with semaphore:
                return await call(image)

        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(run(image)) for image in images]
        return [task.result() for task in tasks]
