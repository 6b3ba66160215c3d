"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from gallery_sorter.adapters.openai_model_client import OpenAIModelClient
from gallery_sorter.config import Settings
from gallery_sorter.services.extractor import MetadataExtractor
from gallery_sorter.services.gallery import GalleryService, InMemoryGalleryStore
from gallery_sorter.services.sorter import GroupSorter


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    extractor: MetadataExtractor
    sorter: GroupSorter
    gallery_service: GalleryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    model_client = OpenAIModelClient.create(
        resolved_settings.openai_api_key,
        timeout=resolved_settings.openai_timeout_seconds,
    )
    extractor = MetadataExtractor(
        client=model_client,
        model=resolved_settings.metadata_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        concurrency=resolved_settings.extraction_concurrency,
    )
    sorter = GroupSorter(
        client=model_client,
        model=resolved_settings.sorting_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    gallery_service = GalleryService(
        store=InMemoryGalleryStore(),
        extractor=extractor,
        sorter=sorter,
        max_upload_images=resolved_settings.max_upload_images,
        max_image_bytes=resolved_settings.max_image_bytes,
    )

    async def close_resources() -> None:
        await model_client.close()

    return AppContainer(
        settings=resolved_settings,
        extractor=extractor,
        sorter=sorter,
        gallery_service=gallery_service,
        close_resources=close_resources,
    )
