"""Shared test fixtures."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from gallery_sorter.config import Settings
from gallery_sorter.containers import AppContainer
from gallery_sorter.domain.gallery import ImageRecord
from gallery_sorter.domain.metadata import ImageMetadata, TaggedMetadata
from gallery_sorter.services.extractor import MetadataExtractor
from gallery_sorter.services.gallery import GalleryService, InMemoryGalleryStore
from gallery_sorter.services.model import ModelCallError, ModelClient
from gallery_sorter.services.schemas import SORTING_SCHEMA_NAME
from gallery_sorter.services.sorter import GroupSorter

SUNSET_METADATA: dict[str, object] = {
    "description": "A sunset over hills",
    "categories": ["sunset", "hills", "nature", "sky"],
    "dominant_colors": ["#ff6600", "#1a1a40", "#ffcc66"],
    "has_people": False,
}

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"fake-png-body"
JPEG_BYTES = b"\xff\xd8\xff" + b"fake-jpeg-body"


@dataclass
class ModelCall:
    """Arguments of a single recorded model call."""

    model: str
    prompt: str
    schema_name: str
    image_data_url: str | None


@dataclass
class FakeModelClient(ModelClient):
    """Fake model client with scripted responses and a call log."""

    metadata_payload: dict[str, object] = field(
        default_factory=lambda: dict(SUNSET_METADATA)
    )
    groups_payload: dict[str, object] | None = None
    responder: Callable[[ModelCall], dict[str, object]] | None = None
    fail_on: Callable[[ModelCall], bool] | None = None
    delay: float = 0.0
    calls: list[ModelCall] = field(default_factory=list)

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_data_url: str | None = None,
        reasoning_effort: str | None = None,
        store: bool = False,
    ) -> dict[str, object]:
        call = ModelCall(
            model=model,
            prompt=prompt,
            schema_name=schema_name,
            image_data_url=image_data_url,
        )
        self.calls.append(call)
        if self.fail_on is not None and self.fail_on(call):
            raise ModelCallError("model unavailable")
        if self.responder is not None:
            payload = self.responder(call)
        elif schema_name == SORTING_SCHEMA_NAME:
            payload = self.groups_payload or {"sorted_groups": []}
        else:
            payload = self.metadata_payload
        if self.delay:
            await asyncio.sleep(self.delay)
        return payload


def make_record(
    image_id: str,
    content: bytes = PNG_BYTES,
    metadata: ImageMetadata | None = None,
) -> ImageRecord:
    return ImageRecord(
        id=image_id,
        filename=f"{image_id}.png",
        mime_type="image/png",
        content=content,
        preview_url=f"/sessions/s/images/{image_id}",
        metadata=metadata,
    )


def tagged(image_id: str, description: str = "A sunset over hills") -> TaggedMetadata:
    return TaggedMetadata(
        image_id=image_id, **{**SUNSET_METADATA, "description": description}
    )


def group_member(image_id: str, description: str = "A sunset over hills") -> dict:
    return {**SUNSET_METADATA, "description": description, "image_id": image_id}


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="openai-key")


@pytest.fixture
def model_client() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def container(settings: Settings, model_client: FakeModelClient) -> AppContainer:
    extractor = MetadataExtractor(client=model_client, model=settings.metadata_model)
    sorter = GroupSorter(client=model_client, model=settings.sorting_model)
    gallery_service = GalleryService(
        store=InMemoryGalleryStore(),
        extractor=extractor,
        sorter=sorter,
        max_upload_images=3,
        max_image_bytes=1024,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        extractor=extractor,
        sorter=sorter,
        gallery_service=gallery_service,
        close_resources=close_resources,
    )
