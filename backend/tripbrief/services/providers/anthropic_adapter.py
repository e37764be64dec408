"""Anthropic adapter — Claude text brief with LoremFlickr placeholder images."""

import logging
from urllib.parse import quote

import anthropic

from tripbrief.config import Settings
from tripbrief.schemas.brief import Attraction, TripBrief
from tripbrief.services.providers.base import ProviderAdapter, ProviderId, ProviderReply
from tripbrief.services.providers.errors import (
    ProviderError,
    ResponseParseError,
    TransportError,
    provider_message,
)

logger = logging.getLogger(__name__)


class AnthropicAdapter(ProviderAdapter):
    provider_id = ProviderId.ANTHROPIC
    provider_name = "Anthropic"
    model_label = "Claude Sonnet 4 (LoremFlickr)"
    failure_model_label = "Claude Sonnet 4"
    required_settings = ("anthropic_api_key",)

    image_style_note = (
        'For imagePrompt, write detailed descriptions like "photograph of the Eiffel Tower '
        'at sunset with tourists" - be specific and descriptive.'
    )

    def __init__(self, config: Settings | None = None, client: anthropic.AsyncAnthropic | None = None):
        super().__init__(config)
        self._client = client

    def _get_client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self.config.anthropic_api_key,
                timeout=self.config.text_timeout_s,
                max_retries=0,
            )
        return self._client

    async def _generate(self, prompt: str) -> ProviderReply:
        try:
            response = await self._get_client().messages.create(
                model=self.config.anthropic_model,
                max_tokens=self.config.anthropic_max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIStatusError as e:
            message = provider_message(e.body, f"Anthropic API error (HTTP {e.status_code})")
            raise ProviderError(message, status_code=e.status_code) from e
        except anthropic.APIConnectionError as e:
            raise TransportError(f"Anthropic request failed: {e}") from e

        text = "".join(
            block.text for block in (response.content or []) if getattr(block, "type", None) == "text"
        )
        if not text.strip():
            raise ResponseParseError("Anthropic reply contained no text")

        usage = getattr(response, "usage", None)
        return ProviderReply(
            text=text,
            input_tokens=getattr(usage, "input_tokens", None),
            output_tokens=getattr(usage, "output_tokens", None),
        )

    def placeholder_destination_image(self, brief: TripBrief) -> str:
        return f"https://loremflickr.com/800/600/{quote(brief.destination, safe='')}"

    def placeholder_attraction_image(self, index: int, attraction: Attraction) -> str:
        return f"https://loremflickr.com/600/400/{quote(attraction.name, safe='')}"

    async def aclose(self) -> None:
        await super().aclose()
        if self._client is not None:
            await self._client.close()
            self._client = None
