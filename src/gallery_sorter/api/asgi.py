"""ASGI entrypoint for the gallery sorter API."""

from gallery_sorter.api.app import create_app
from gallery_sorter.containers import build_container

app = create_app(build_container())
