"""Provider adapter base — one text-generation pipeline from prompt to PipelineResult."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from tripbrief.config import Settings, settings as default_settings
from tripbrief.schemas.brief import Attraction, TripBrief
from tripbrief.services.brief_extraction import extract_trip_brief
from tripbrief.services.image_resolver import (
    ATTRACTION_FAILED_IMAGE,
    DESTINATION_FAILED_IMAGE,
    ImageResolver,
)
from tripbrief.services.providers.errors import CredentialMissingError, PipelineError

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "not available"

PROMPT_TEMPLATE = (
    'Based on: "{request}". Respond with ONLY valid JSON: '
    '{{"destination":"name","destinationInfo":"description",'
    '"destinationImagePrompt":"{destination_hint}",'
    '"popularSpots":[{{"name":"attraction name","description":"2-3 sentences",'
    '"imagePrompt":"{attraction_hint}"}}],'
    '"kidFriendly":"yes/no","bestTimeToVisit":"season"}}. '
    "Provide exactly 10 attractions. {style_note}"
)


class ProviderId(str, Enum):
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GEMINI = "gemini"


# Display order: Adapter-A, Adapter-B, Adapter-C
PROVIDER_ORDER = (ProviderId.ANTHROPIC, ProviderId.OPENAI, ProviderId.GEMINI)

TokenCount = int | str


@dataclass(frozen=True)
class Metrics:
    latency_ms: int
    input_tokens: TokenCount
    output_tokens: TokenCount
    provider_name: str
    model_label: str


@dataclass(frozen=True)
class PipelineSuccess:
    trip_brief: TripBrief
    destination_image: str
    attraction_images: tuple[str, ...]
    metrics: Metrics

    ok = True


@dataclass(frozen=True)
class PipelineFailure:
    metrics: Metrics
    error_message: str
    error_kind: str = "pipeline_error"

    ok = False


PipelineResult = PipelineSuccess | PipelineFailure


@dataclass(frozen=True)
class ProviderReply:
    """Raw text plus the provider's own token accounting, if it sent any."""
    text: str
    input_tokens: int | None = None
    output_tokens: int | None = None


def token_count(value) -> TokenCount:
    """Usage counts are reported as-is; absent counts are never estimated."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return NOT_AVAILABLE


def elapsed_ms(start: float) -> int:
    return max(0, round((time.monotonic() - start) * 1000))


class ProviderAdapter(ABC):
    """Shared pipeline: credentials → text call → extraction → images → result.

    Subclasses supply the provider call (``_generate``), the prompt wording
    and, for image-capable providers, the proxy path and fallback images.
    """

    provider_id: ProviderId
    provider_name: str
    model_label: str
    failure_model_label: str
    required_settings: tuple[str, ...] = ()

    destination_prompt_hint = "detailed image description for the destination (for AI image generation)"
    attraction_prompt_hint = "detailed description for generating an image of this specific attraction"
    image_style_note = ""

    # None means no image backend: every slot gets a placeholder
    image_proxy_path: str | None = None
    destination_failed_image = DESTINATION_FAILED_IMAGE

    def __init__(
        self,
        config: Settings | None = None,
        image_resolver: ImageResolver | None = None,
    ):
        self.config = config or default_settings
        if image_resolver is None and self.image_proxy_path:
            image_resolver = ImageResolver(self.image_proxy_path, config=self.config)
        self.image_resolver = image_resolver

    def build_prompt(self, text: str) -> str:
        return PROMPT_TEMPLATE.format(
            request=text,
            destination_hint=self.destination_prompt_hint,
            attraction_hint=self.attraction_prompt_hint,
            style_note=self.image_style_note,
        ).strip()

    def ensure_credentials(self) -> None:
        missing = self.config.missing(*self.required_settings)
        if missing:
            raise CredentialMissingError(
                f"{self.provider_name} key not configured: {', '.join(missing)}"
            )

    @abstractmethod
    async def _generate(self, prompt: str) -> ProviderReply:
        """Issue the text-generation call and return the reply text and usage."""

    async def run(self, text: str) -> PipelineResult:
        """Run the full pipeline. Never raises; failures come back as PipelineFailure."""
        start = time.monotonic()
        logger.info(f"{self.provider_name} pipeline started")

        try:
            self.ensure_credentials()
            reply = await self._generate(self.build_prompt(text))
            brief = extract_trip_brief(reply.text)
            destination_image, attraction_images = await self._resolve_images(brief)
        except PipelineError as e:
            return self._failure(start, e.message, e.kind)
        except Exception as e:
            logger.error(f"{self.provider_name} pipeline crashed: {e}", exc_info=True)
            return self._failure(start, str(e) or type(e).__name__, "unexpected")

        metrics = Metrics(
            latency_ms=elapsed_ms(start),
            input_tokens=token_count(reply.input_tokens),
            output_tokens=token_count(reply.output_tokens),
            provider_name=self.provider_name,
            model_label=self.model_label,
        )
        logger.info(
            f"{self.provider_name} pipeline finished in {metrics.latency_ms}ms: "
            f"{brief.destination}, {len(brief.attractions)} attractions"
        )
        return PipelineSuccess(
            trip_brief=brief,
            destination_image=destination_image,
            attraction_images=attraction_images,
            metrics=metrics,
        )

    def _failure(self, start: float, message: str, kind: str) -> PipelineFailure:
        latency = elapsed_ms(start)
        logger.warning(f"{self.provider_name} pipeline failed after {latency}ms ({kind}): {message}")
        return PipelineFailure(
            metrics=Metrics(
                latency_ms=latency,
                input_tokens=NOT_AVAILABLE,
                output_tokens=NOT_AVAILABLE,
                provider_name=self.provider_name,
                model_label=self.failure_model_label,
            ),
            error_message=message,
            error_kind=kind,
        )

    async def _resolve_images(self, brief: TripBrief) -> tuple[str, tuple[str, ...]]:
        """Destination image first, then attractions in order, one call at a time."""
        if self.image_resolver is None:
            return (
                self.placeholder_destination_image(brief),
                tuple(
                    self.placeholder_attraction_image(i, spot)
                    for i, spot in enumerate(brief.attractions)
                ),
            )

        destination_image = await self.image_resolver.resolve(
            brief.destination_image_prompt, fallback=self.destination_failed_image
        )

        limit = self.config.max_generated_images_per_pipeline
        attraction_images = []
        for i, spot in enumerate(brief.attractions):
            if i < limit:
                image = await self.image_resolver.resolve(
                    spot.image_prompt, fallback=ATTRACTION_FAILED_IMAGE
                )
            else:
                image = self.placeholder_attraction_image(i, spot)
            attraction_images.append(image)

        return destination_image, tuple(attraction_images)

    def placeholder_destination_image(self, brief: TripBrief) -> str:
        return self.destination_failed_image

    @abstractmethod
    def placeholder_attraction_image(self, index: int, attraction: Attraction) -> str:
        """Deterministic, non-network image for an attraction slot."""

    async def aclose(self) -> None:
        if self.image_resolver is not None:
            await self.image_resolver.aclose()
