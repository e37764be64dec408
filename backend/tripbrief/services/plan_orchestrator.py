"""Plan orchestrator — validates a request and runs all provider pipelines concurrently."""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from tripbrief.services.providers.anthropic_adapter import AnthropicAdapter
from tripbrief.services.providers.base import (
    NOT_AVAILABLE,
    PROVIDER_ORDER,
    Metrics,
    PipelineFailure,
    PipelineResult,
    ProviderAdapter,
    ProviderId,
    elapsed_ms,
)
from tripbrief.services.providers.gemini_adapter import GeminiAdapter
from tripbrief.services.providers.openai_adapter import OpenAIAdapter
from tripbrief.services.request_validator import (
    RequestValidator,
    ValidationOutcome,
    request_validator,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanResult:
    validation: ValidationOutcome
    results_by_provider: Mapping[ProviderId, PipelineResult] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def valid(self) -> bool:
        return self.validation.valid


class PlanOrchestrator:
    """Fans one request out to every provider and waits for all of them."""

    def __init__(
        self,
        adapters: list[ProviderAdapter] | None = None,
        validator: RequestValidator | None = None,
    ):
        if adapters is None:
            adapters = [AnthropicAdapter(), OpenAIAdapter(), GeminiAdapter()]
        self.adapters = {adapter.provider_id: adapter for adapter in adapters}
        missing = [p.value for p in PROVIDER_ORDER if p not in self.adapters]
        if missing:
            raise ValueError(f"No adapter configured for: {', '.join(missing)}")
        self.validator = validator or request_validator

    async def plan(self, text: str) -> PlanResult:
        """
        Validate ``text`` and, if it passes, run all pipelines to completion.

        Returns a PlanResult whose ``results_by_provider`` holds one result per
        provider, or is empty when validation failed (no provider is called).
        """
        validation = self.validator.validate(text)
        if not validation.valid:
            logger.info(f"Plan request rejected: {validation.reason.value}")
            return PlanResult(validation=validation)

        start = time.monotonic()
        providers = list(PROVIDER_ORDER)
        outcomes = await asyncio.gather(
            *(self.adapters[p].run(text) for p in providers),
            return_exceptions=True,
        )

        results: dict[ProviderId, PipelineResult] = {}
        for provider, outcome in zip(providers, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error(f"{provider.value} adapter raised past its boundary: {outcome}")
                outcome = self._crashed(provider, outcome, start)
            results[provider] = outcome

        ok = sum(1 for r in results.values() if r.ok)
        logger.info(f"Plan finished in {elapsed_ms(start)}ms: {ok}/{len(results)} providers succeeded")
        return PlanResult(validation=validation, results_by_provider=MappingProxyType(results))

    def _crashed(self, provider: ProviderId, error: Exception, start: float) -> PipelineFailure:
        adapter = self.adapters[provider]
        return PipelineFailure(
            metrics=Metrics(
                latency_ms=elapsed_ms(start),
                input_tokens=NOT_AVAILABLE,
                output_tokens=NOT_AVAILABLE,
                provider_name=adapter.provider_name,
                model_label=adapter.failure_model_label,
            ),
            error_message=str(error) or type(error).__name__,
            error_kind="unexpected",
        )

    async def aclose(self) -> None:
        for adapter in self.adapters.values():
            await adapter.aclose()


plan_orchestrator = PlanOrchestrator()
