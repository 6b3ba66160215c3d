"""OpenAI Responses API client for structured image metadata calls."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from gallery_sorter.services.model import ModelCallError, ModelClient


@dataclass
class OpenAIModelClient(ModelClient):
    """Model client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout: float = 60.0) -> "OpenAIModelClient":
        """Create an OpenAI model client."""
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout))

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
        """Call OpenAI Responses API with structured outputs."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        if image_data_url:
            content.append({"type": "input_image", "image_url": image_data_url})
        request_payload: dict[str, object] = {
            "model": model,
            "input": [{"role": "user", "content": content}],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        try:
            response = await self.client.responses.create(**request_payload)
        except OpenAIError as exc:
            raise ModelCallError(f"OpenAI request failed: {exc}") from exc
        output_text = response.output_text
        if not output_text:
            raise ModelCallError("OpenAI returned an empty response")
        try:
            parsed = json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise ModelCallError("OpenAI returned malformed JSON") from exc
        if not isinstance(parsed, dict):
            raise ModelCallError("OpenAI returned a non-object JSON payload")
        return parsed

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
