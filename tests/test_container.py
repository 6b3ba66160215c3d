"""Tests for container wiring."""

import asyncio

from gallery_sorter.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.gallery_service.extractor is container.extractor
    assert container.extractor.model == settings.metadata_model
    assert container.sorter.model == settings.sorting_model
    asyncio.run(container.close_resources())
