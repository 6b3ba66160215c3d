"""Interface to the hosted generative model."""

from typing import Protocol


class ModelCallError(RuntimeError):
    """Raised when the model capability fails or returns unusable output."""


class MetadataParseError(ValueError):
    """Raised when a model response does not match the expected schema."""


class ModelClient(Protocol):
    """Interface for structured-output model calls."""

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
        """Return the schema-shaped JSON object produced by the model."""
