"""Image resolver — turns an image prompt into a displayable image via a local proxy."""

import logging

import httpx

from tripbrief.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

DALLE_PROXY_PATH = "/api/images/dalle"
STABILITY_PROXY_PATH = "/api/images/stability"

DESTINATION_FAILED_IMAGE = "https://via.placeholder.com/800x600?text=Image+Generation+Failed"
ATTRACTION_FAILED_IMAGE = "https://via.placeholder.com/600x400?text=Failed"


class ImageResolver:
    """Calls one image proxy endpoint; failures degrade to a placeholder image.

    ``resolve`` never raises for backend or transport problems.
    """

    def __init__(
        self,
        proxy_path: str,
        config: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.proxy_path = proxy_path
        self.config = config or default_settings
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.image_proxy_base_url,
                timeout=self.config.image_timeout_s,
            )
        return self._client

    async def resolve(self, prompt_text: str, fallback: str = ATTRACTION_FAILED_IMAGE) -> str:
        if not prompt_text or not prompt_text.strip():
            logger.warning(f"Empty image prompt for {self.proxy_path}, using placeholder")
            return fallback

        try:
            client = await self._get_client()
            resp = await client.post(self.proxy_path, json={"prompt": prompt_text})
        except httpx.HTTPError as e:
            logger.warning(f"Image proxy {self.proxy_path} unreachable: {e}")
            return fallback

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.is_error:
            error = data.get("error") if isinstance(data, dict) else None
            logger.warning(
                f"Image proxy {self.proxy_path} returned {resp.status_code}: {error or 'no error body'}"
            )
            return fallback

        url = data.get("url") if isinstance(data, dict) else None
        if not isinstance(url, str) or not url:
            logger.warning(f"Image proxy {self.proxy_path} returned no url")
            return fallback
        return url

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
