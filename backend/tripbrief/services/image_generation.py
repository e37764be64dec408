"""Image generation backends — DALL-E 3 and Stability AI, normalised to a single url."""

import logging

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from tripbrief.config import Settings, settings as default_settings
from tripbrief.services.providers.errors import provider_message

logger = logging.getLogger(__name__)


class ImageGenerationError(Exception):
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class DalleImageBackend:
    """OpenAI Images API; returns the hosted image URL."""

    def __init__(self, config: Settings | None = None, client: AsyncOpenAI | None = None):
        self.config = config or default_settings
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.config.openai_api_key,
                timeout=self.config.image_timeout_s,
                max_retries=0,
            )
        return self._client

    async def generate(self, prompt: str) -> str:
        if not self.config.openai_api_key:
            raise ImageGenerationError("OPENAI_API_KEY not configured")

        try:
            response = await self._get_client().images.generate(
                model=self.config.dalle_model,
                prompt=prompt,
                n=1,
                size="1024x1024",
                quality="standard",
            )
        except APIStatusError as e:
            raise ImageGenerationError(
                provider_message(e.body, "DALL-E error"), status_code=e.status_code
            ) from e
        except APIConnectionError as e:
            raise ImageGenerationError(f"DALL-E request failed: {e}", status_code=502) from e

        if not response.data or not response.data[0].url:
            raise ImageGenerationError("DALL-E returned no image url", status_code=502)
        return response.data[0].url

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None


class StabilityImageBackend:
    """Stability AI SDXL text-to-image; the base64 artifact becomes a data URL."""

    def __init__(self, config: Settings | None = None, client: httpx.AsyncClient | None = None):
        self.config = config or default_settings
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.stability_base_url,
                timeout=self.config.image_timeout_s,
            )
        return self._client

    async def generate(self, prompt: str) -> str:
        if not self.config.stability_api_key:
            raise ImageGenerationError("STABILITY_API_KEY not configured")

        client = await self._get_client()
        try:
            resp = await client.post(
                f"/v1/generation/{self.config.stability_engine}/text-to-image",
                headers={
                    "Authorization": f"Bearer {self.config.stability_api_key}",
                    "Accept": "application/json",
                },
                json={
                    "text_prompts": [{"text": prompt}],
                    "cfg_scale": 7,
                    "height": 1024,
                    "width": 1024,
                    "samples": 1,
                    "steps": 30,
                },
            )
        except httpx.HTTPError as e:
            raise ImageGenerationError(f"Stability AI request failed: {e}", status_code=502) from e

        if resp.is_error:
            logger.warning(f"Stability AI returned {resp.status_code}: {resp.text[:300]}")
            raise ImageGenerationError("Stability AI error", status_code=resp.status_code)

        try:
            encoded = resp.json()["artifacts"][0]["base64"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ImageGenerationError("Stability AI returned no image", status_code=502) from e
        return f"data:image/png;base64,{encoded}"

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


dalle_backend = DalleImageBackend()
stability_backend = StabilityImageBackend()
