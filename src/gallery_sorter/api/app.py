"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from http import HTTPStatus

from fastapi import FastAPI, File, Request, UploadFile, status
from fastapi.responses import JSONResponse, Response

from gallery_sorter.api.models import MetadataRequest, SortRequest
from gallery_sorter.api.ui import router as ui_router
from gallery_sorter.app_logging import configure_logging
from gallery_sorter.containers import AppContainer
from gallery_sorter.domain.gallery import GallerySession, ImageUpload
from gallery_sorter.services.gallery import (
    GalleryError,
    ImageNotFoundError,
    InvalidUploadError,
    SessionNotFoundError,
    UnsupportedMediaTypeError,
    UploadTooLargeError,
)
from gallery_sorter.services.rendering import (
    extraction_status,
    render_cards,
    render_groups,
    sorting_status,
)

_ERROR_STATUS: dict[type[GalleryError], int] = {
    SessionNotFoundError: status.HTTP_404_NOT_FOUND,
    ImageNotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidUploadError: status.HTTP_400_BAD_REQUEST,
    UploadTooLargeError: HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
    UnsupportedMediaTypeError: status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(ui_router)

    @app.exception_handler(GalleryError)
    async def gallery_error_handler(
        request: Request, exc: GalleryError
    ) -> JSONResponse:
        code = _ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
        detail = str(exc)
        logger.info("Rejected gallery request", extra={"reason": detail})
        return JSONResponse(status_code=code, content={"detail": detail})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/sessions", status_code=status.HTTP_201_CREATED)
    async def create_session(
        request: Request, files: list[UploadFile] = File(...)
    ) -> dict[str, object]:
        """Start a gallery session from uploaded images."""
        state_container: AppContainer = request.app.state.container
        uploads = await _read_uploads(
            files, state_container.gallery_service.max_image_bytes
        )
        session = state_container.gallery_service.create_session(uploads)
        return _session_payload(session, "Images ready for analysis.")

    @app.put("/sessions/{session_id}/images")
    async def replace_images(
        session_id: str, request: Request, files: list[UploadFile] = File(...)
    ) -> dict[str, object]:
        """Replace the session's images with a new upload."""
        state_container: AppContainer = request.app.state.container
        uploads = await _read_uploads(
            files, state_container.gallery_service.max_image_bytes
        )
        session = state_container.gallery_service.replace_images(session_id, uploads)
        return _session_payload(session, "Images ready for analysis.")

    @app.get("/sessions/{session_id}")
    async def get_session(session_id: str, request: Request) -> dict[str, object]:
        """Return the current cards of a session."""
        state_container: AppContainer = request.app.state.container
        session = state_container.gallery_service.get_session(session_id)
        return _session_payload(session, None)

    @app.get("/sessions/{session_id}/images/{image_id}")
    async def get_image(session_id: str, image_id: str, request: Request) -> Response:
        """Serve the preview bytes of an uploaded image."""
        state_container: AppContainer = request.app.state.container
        record = state_container.gallery_service.get_image(session_id, image_id)
        return Response(content=record.content, media_type=record.mime_type)

    @app.post("/sessions/{session_id}/metadata")
    async def generate_metadata(
        session_id: str, body: MetadataRequest, request: Request
    ) -> dict[str, object]:
        """Describe every image in the session that lacks metadata."""
        state_container: AppContainer = request.app.state.container
        batch = await state_container.gallery_service.generate_metadata(
            session_id, body.focus
        )
        session = state_container.gallery_service.get_session(session_id)
        return _session_payload(session, extraction_status(batch))

    @app.post("/sessions/{session_id}/sort")
    async def sort_images(
        session_id: str, body: SortRequest, request: Request
    ) -> dict[str, object]:
        """Group the session's described images."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.gallery_service.sort(session_id, body.sort_by)
        session = state_container.gallery_service.get_session(session_id)
        view = render_groups(session, result)
        return {
            "session_id": session.id,
            "status_text": sorting_status(result),
            "error": result.error,
            **asdict(view),
        }

    @app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def close_session(session_id: str, request: Request) -> Response:
        """Close a session and release its images."""
        state_container: AppContainer = request.app.state.container
        state_container.gallery_service.close_session(session_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


async def _read_uploads(
    files: list[UploadFile], max_image_bytes: int
) -> list[ImageUpload]:
    """Read uploads, never buffering more than one byte past the size limit."""
    uploads: list[ImageUpload] = []
    for upload in files:
        filename = upload.filename or "image.jpg"
        if upload.size is not None and upload.size > max_image_bytes:
            raise UploadTooLargeError(f"{filename} is too large")
        uploads.append(
            ImageUpload(
                filename=filename,
                content=await upload.read(max_image_bytes + 1),
                content_type=upload.content_type,
            )
        )
    return uploads


def _session_payload(
    session: GallerySession, status_text: str | None
) -> dict[str, object]:
    return {
        "session_id": session.id,
        "focus": session.focus,
        "status_text": status_text,
        "cards": [asdict(card) for card in render_cards(session)],
    }
