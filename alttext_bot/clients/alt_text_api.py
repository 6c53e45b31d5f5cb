"""Client for the external alt text generation API."""

import logging
from typing import Any

import httpx

from alttext_bot.errors import GenerationFailure, RateLimited

logger = logging.getLogger(__name__)


class AltTextClient:
    """Posts base64 images to the generation API and returns `altText`."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_url: str,
        api_key: str,
        prompt: str,
        user_prompt: str,
        model: str = "gpt-4o-mini",
        backend: str = "openai",
    ):
        self._client = client
        self._api_url = api_url
        self._api_key = api_key
        self._prompt = prompt
        self._user_prompt = user_prompt
        self._model = model
        self._backend = backend

    def _build_payload(self, image_base64: str, file_name: str) -> dict[str, Any]:
        return {
            "image": image_base64,
            "fileName": file_name,
            "prompt": self._prompt,
            "userPrompt": self._user_prompt,
            "model": self._model,
            "backend": self._backend,
        }

    async def generate(self, image_base64: str, file_name: str) -> str:
        logger.info(
            f"Calling alt text API for {file_name}, model={self._model}, "
            f"backend={self._backend}, payload={len(image_base64) / 1024:.2f} KB"
        )
        response = await self._client.post(
            self._api_url,
            json=self._build_payload(image_base64, file_name),
            headers={"X-API-Key": self._api_key},
        )

        if response.status_code == 429:
            raise RateLimited("Alt text API rate limit exceeded (429)")

        if response.is_error:
            logger.error(f"Alt text API error response: {response.text[:500]}")
            raise GenerationFailure(f"API Error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise GenerationFailure(f"Malformed API response: {e}") from e

        alt_text = data.get("altText") if isinstance(data, dict) else None
        if not alt_text or not isinstance(alt_text, str):
            logger.warning(f"API returned success but no altText for {file_name}")
            raise GenerationFailure("Response has no altText")

        logger.info(f"Generated alt text for {file_name} ({len(alt_text)} chars)")
        return alt_text
