"""Gemini adapter — generateContent REST call, illustrated with Stability AI images."""

import logging

import httpx

from tripbrief.config import Settings
from tripbrief.schemas.brief import Attraction
from tripbrief.services.image_resolver import STABILITY_PROXY_PATH, ImageResolver
from tripbrief.services.providers.base import ProviderAdapter, ProviderId, ProviderReply
from tripbrief.services.providers.errors import (
    ProviderError,
    ResponseParseError,
    TransportError,
    provider_message,
)

logger = logging.getLogger(__name__)


class GeminiAdapter(ProviderAdapter):
    provider_id = ProviderId.GEMINI
    provider_name = "Google"
    model_label = "Gemini 2.5 + Stability AI"
    failure_model_label = "Gemini 2.5"
    required_settings = ("gemini_api_key",)

    destination_prompt_hint = "detailed prompt for Stability AI image generation"
    attraction_prompt_hint = "detailed prompt for image generation"
    image_style_note = "Write prompts for Stability AI: detailed, specific, photographic style."
    image_proxy_path = STABILITY_PROXY_PATH
    destination_failed_image = "https://via.placeholder.com/800x600?text=Image+Failed"

    def __init__(
        self,
        config: Settings | None = None,
        client: httpx.AsyncClient | None = None,
        image_resolver: ImageResolver | None = None,
    ):
        super().__init__(config, image_resolver)
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.gemini_base_url,
                timeout=self.config.text_timeout_s,
            )
        return self._client

    async def _generate(self, prompt: str) -> ProviderReply:
        client = await self._get_client()
        try:
            resp = await client.post(
                f"/v1beta/models/{self.config.gemini_model}:generateContent",
                params={"key": self.config.gemini_api_key},
                json={"contents": [{"parts": [{"text": prompt}]}]},
            )
        except httpx.HTTPError as e:
            raise TransportError(f"Gemini request failed: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.is_error:
            message = provider_message(data, f"Gemini API error (HTTP {resp.status_code})")
            raise ProviderError(message, status_code=resp.status_code)

        try:
            parts = data["candidates"][0]["content"]["parts"]
            text = "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ResponseParseError("Gemini reply had no candidate text") from e
        if not text.strip():
            raise ResponseParseError("Gemini reply had no candidate text")

        usage = data.get("usageMetadata") or {}
        return ProviderReply(
            text=text,
            input_tokens=usage.get("promptTokenCount"),
            output_tokens=usage.get("candidatesTokenCount"),
        )

    def placeholder_attraction_image(self, index: int, attraction: Attraction) -> str:
        return f"https://picsum.photos/600/400?random={index}"

    async def aclose(self) -> None:
        await super().aclose()
        if self._client is not None:
            await self._client.aclose()
            self._client = None
