"""OpenAI adapter — GPT-4o text brief illustrated with DALL-E 3 images."""

import logging
from urllib.parse import quote

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from tripbrief.config import Settings
from tripbrief.schemas.brief import Attraction
from tripbrief.services.image_resolver import DALLE_PROXY_PATH, ImageResolver
from tripbrief.services.providers.base import ProviderAdapter, ProviderId, ProviderReply
from tripbrief.services.providers.errors import (
    ProviderError,
    ResponseParseError,
    TransportError,
    provider_message,
)

logger = logging.getLogger(__name__)


class OpenAIAdapter(ProviderAdapter):
    provider_id = ProviderId.OPENAI
    provider_name = "OpenAI"
    model_label = "GPT-4o + DALL-E 3"
    failure_model_label = "GPT-4o"
    required_settings = ("openai_api_key",)

    destination_prompt_hint = (
        "detailed DALL-E prompt for destination (be specific about style, lighting, perspective)"
    )
    attraction_prompt_hint = "detailed DALL-E prompt for this specific attraction"
    image_style_note = (
        "Write image prompts optimized for DALL-E 3: be detailed, descriptive, "
        "specify artistic style if desired."
    )
    image_proxy_path = DALLE_PROXY_PATH

    def __init__(
        self,
        config: Settings | None = None,
        client: AsyncOpenAI | None = None,
        image_resolver: ImageResolver | None = None,
    ):
        super().__init__(config, image_resolver)
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.config.openai_api_key,
                timeout=self.config.text_timeout_s,
                max_retries=0,
            )
        return self._client

    async def _generate(self, prompt: str) -> ProviderReply:
        try:
            response = await self._get_client().chat.completions.create(
                model=self.config.openai_model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.config.openai_temperature,
            )
        except APIStatusError as e:
            message = provider_message(e.body, f"OpenAI API error (HTTP {e.status_code})")
            raise ProviderError(message, status_code=e.status_code) from e
        except APIConnectionError as e:
            raise TransportError(f"OpenAI request failed: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise ResponseParseError("OpenAI reply contained no message content")

        usage = getattr(response, "usage", None)
        return ProviderReply(
            text=response.choices[0].message.content,
            input_tokens=getattr(usage, "prompt_tokens", None),
            output_tokens=getattr(usage, "completion_tokens", None),
        )

    def placeholder_attraction_image(self, index: int, attraction: Attraction) -> str:
        return f"https://picsum.photos/seed/{quote(attraction.name, safe='')}/600/400"

    async def aclose(self) -> None:
        await super().aclose()
        if self._client is not None:
            await self._client.close()
            self._client = None
