"""Tests for plan orchestration across the three provider pipelines."""
from __future__ import annotations

import asyncio

import anthropic
import httpx
import pytest

from conftest import (
    KYOTO_REQUEST,
    ProxyRecorder,
    anthropic_client,
    gemini_client,
    gemini_payload,
    make_resolver,
    openai_client,
)
from tripbrief.services.image_resolver import DALLE_PROXY_PATH, STABILITY_PROXY_PATH
from tripbrief.services.plan_orchestrator import PlanOrchestrator
from tripbrief.services.providers.anthropic_adapter import AnthropicAdapter
from tripbrief.services.providers.base import (
    NOT_AVAILABLE,
    PipelineFailure,
    PipelineSuccess,
    ProviderId,
)
from tripbrief.services.providers.gemini_adapter import GeminiAdapter
from tripbrief.services.providers.openai_adapter import OpenAIAdapter
from tripbrief.services.request_validator import ValidationReason


class Backends:
    """Mocked text and image backends for all three providers."""

    def __init__(self, config, brief_json, gemini_status=200):
        self.gemini_calls = []
        self.dalle = ProxyRecorder()
        self.stability = ProxyRecorder()

        def gemini_handler(request):
            self.gemini_calls.append(request)
            if gemini_status != 200:
                return httpx.Response(gemini_status, json={"error": {"message": "Gemini is overloaded"}})
            return httpx.Response(200, json=gemini_payload(brief_json))

        self.anthropic = anthropic_client(brief_json)
        self.openai = openai_client(brief_json)
        self.adapters = [
            AnthropicAdapter(config, client=self.anthropic),
            OpenAIAdapter(
                config,
                client=self.openai,
                image_resolver=make_resolver(DALLE_PROXY_PATH, self.dalle, config),
            ),
            GeminiAdapter(
                config,
                client=gemini_client(gemini_handler, config),
                image_resolver=make_resolver(STABILITY_PROXY_PATH, self.stability, config),
            ),
        ]

    @property
    def network_calls(self) -> int:
        return (
            self.anthropic.messages.create.await_count
            + self.openai.chat.completions.create.await_count
            + len(self.gemini_calls)
            + len(self.dalle.prompts)
            + len(self.stability.prompts)
        )


async def test_valid_request_fills_every_slot(test_settings, brief_json):
    backends = Backends(test_settings, brief_json)
    result = await PlanOrchestrator(backends.adapters).plan(KYOTO_REQUEST)

    assert result.valid
    assert set(result.results_by_provider) == {ProviderId.ANTHROPIC, ProviderId.OPENAI, ProviderId.GEMINI}
    assert all(isinstance(r, PipelineSuccess) for r in result.results_by_provider.values())
    assert len(backends.dalle.prompts) == 4
    assert len(backends.stability.prompts) == 4


@pytest.mark.parametrize("text,reason", [
    ("Paris", ValidationReason.MISSING_DESTINATION),
    ("Paris in the springtime", ValidationReason.MISSING_TRAVELER_COUNT),
    ("Paris for 2 travelers in May", ValidationReason.MISSING_AGE_INFO),
])
async def test_invalid_request_makes_no_network_calls(test_settings, brief_json, text, reason):
    backends = Backends(test_settings, brief_json)
    result = await PlanOrchestrator(backends.adapters).plan(text)

    assert not result.valid
    assert result.validation.reason is reason
    assert result.results_by_provider == {}
    assert backends.network_calls == 0


async def test_one_backend_failing_does_not_affect_the_others(test_settings, brief_json):
    backends = Backends(test_settings, brief_json, gemini_status=503)
    result = await PlanOrchestrator(backends.adapters).plan(KYOTO_REQUEST)

    gemini = result.results_by_provider[ProviderId.GEMINI]
    assert isinstance(gemini, PipelineFailure)
    assert gemini.error_message == "Gemini is overloaded"
    assert gemini.metrics.input_tokens == NOT_AVAILABLE
    assert backends.stability.prompts == []

    assert isinstance(result.results_by_provider[ProviderId.ANTHROPIC], PipelineSuccess)
    assert isinstance(result.results_by_provider[ProviderId.OPENAI], PipelineSuccess)
    assert len(backends.dalle.prompts) == 4


async def test_all_backends_failing_still_populates_every_slot(keyless_settings, brief_json):
    backends = Backends(keyless_settings, brief_json)
    result = await PlanOrchestrator(backends.adapters).plan(KYOTO_REQUEST)

    assert len(result.results_by_provider) == 3
    assert all(r.error_kind == "credential_missing" for r in result.results_by_provider.values())
    assert backends.network_calls == 0


async def test_pipelines_run_concurrently(test_settings, brief_json):
    started = []
    release = asyncio.Event()

    class GatedAdapter(AnthropicAdapter):
        async def _generate(self, prompt):
            started.append(self.provider_id)
            if len(started) == 3:
                release.set()
            await asyncio.wait_for(release.wait(), timeout=1)
            return await super()._generate(prompt)

    def gated(provider_id):
        adapter = GatedAdapter(test_settings, client=anthropic_client(brief_json))
        adapter.provider_id = provider_id
        return adapter

    orchestrator = PlanOrchestrator([gated(p) for p in ProviderId])
    result = await orchestrator.plan(KYOTO_REQUEST)

    # Every pipeline reached its text call before any of them finished
    assert sorted(started) == sorted(ProviderId)
    assert all(r.ok for r in result.results_by_provider.values())


async def test_exception_escaping_an_adapter_becomes_a_failure(test_settings, brief_json):
    backends = Backends(test_settings, brief_json)

    async def explode(text):
        raise RuntimeError("adapter bug")

    backends.adapters[1].run = explode
    result = await PlanOrchestrator(backends.adapters).plan(KYOTO_REQUEST)

    failure = result.results_by_provider[ProviderId.OPENAI]
    assert isinstance(failure, PipelineFailure)
    assert failure.error_kind == "unexpected"
    assert failure.error_message == "adapter bug"
    assert failure.metrics.provider_name == "OpenAI"
    assert isinstance(result.results_by_provider[ProviderId.ANTHROPIC], PipelineSuccess)


def test_every_provider_needs_an_adapter(test_settings):
    with pytest.raises(ValueError, match="gemini"):
        PlanOrchestrator([AnthropicAdapter(test_settings), OpenAIAdapter(test_settings)])


async def test_provider_status_error_is_scoped_to_its_slot(test_settings, brief_json):
    backends = Backends(test_settings, brief_json)
    error = anthropic.APIStatusError(
        "Error code: 500",
        response=httpx.Response(500, request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")),
        body={"type": "error", "error": {"type": "api_error", "message": "Internal server error"}},
    )
    backends.anthropic.messages.create.side_effect = error

    result = await PlanOrchestrator(backends.adapters).plan(KYOTO_REQUEST)

    assert result.results_by_provider[ProviderId.ANTHROPIC].error_message == "Internal server error"
    assert result.results_by_provider[ProviderId.OPENAI].ok
    assert result.results_by_provider[ProviderId.GEMINI].ok


async def test_results_mapping_is_read_only(test_settings, brief_json):
    backends = Backends(test_settings, brief_json)
    result = await PlanOrchestrator(backends.adapters).plan(KYOTO_REQUEST)

    with pytest.raises(TypeError):
        result.results_by_provider[ProviderId.GEMINI] = result.results_by_provider[ProviderId.OPENAI]
    assert result.results_by_provider[ProviderId.GEMINI].metrics.provider_name == "Google"


async def test_rejected_request_has_read_only_empty_mapping(test_settings, brief_json):
    result = await PlanOrchestrator(Backends(test_settings, brief_json).adapters).plan("Paris")

    assert len(result.results_by_provider) == 0
    with pytest.raises(TypeError):
        result.results_by_provider[ProviderId.ANTHROPIC] = None
