"""Result normalizer — shapes pipeline outcomes into display records, in fixed order."""

from dataclasses import asdict
from typing import Mapping

from tripbrief.schemas.plan import AttractionView, MetricsView, ProviderResultView
from tripbrief.services.providers.base import (
    PROVIDER_ORDER,
    PipelineFailure,
    PipelineResult,
    PipelineSuccess,
    ProviderId,
)


def _success_view(provider: ProviderId, result: PipelineSuccess) -> ProviderResultView:
    brief = result.trip_brief
    return ProviderResultView(
        provider=provider.value,
        provider_name=result.metrics.provider_name,
        status="ok",
        metrics=MetricsView(**asdict(result.metrics)),
        destination=brief.destination,
        destination_info=brief.destination_info,
        destination_image=result.destination_image,
        attractions=[
            AttractionView(
                position=i + 1,
                name=spot.name,
                description=spot.description,
                image=image,
            )
            for i, (spot, image) in enumerate(zip(brief.attractions, result.attraction_images))
        ],
        kid_friendly=brief.kid_friendly,
        best_season=brief.best_season,
    )


def _failure_view(provider: ProviderId, result: PipelineFailure) -> ProviderResultView:
    return ProviderResultView(
        provider=provider.value,
        provider_name=result.metrics.provider_name,
        status="error",
        metrics=MetricsView(**asdict(result.metrics)),
        error=result.error_message,
        error_kind=result.error_kind,
    )


def present(results_by_provider: Mapping[ProviderId, PipelineResult]) -> list[ProviderResultView]:
    """One display record per provider, Anthropic → OpenAI → Gemini, regardless of finish order."""
    views = []
    for provider in PROVIDER_ORDER:
        result = results_by_provider[provider]
        if isinstance(result, PipelineSuccess):
            views.append(_success_view(provider, result))
        else:
            views.append(_failure_view(provider, result))
    return views
