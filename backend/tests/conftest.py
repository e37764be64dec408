"""Shared fixtures for the trip brief tests."""
from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from tripbrief.config import Settings
from tripbrief.services.image_resolver import ImageResolver

KYOTO_REQUEST = "Planning a trip to Kyoto with my family of 4, 2 adults and 2 kids ages 8 and 11"


def make_brief(destination: str = "Kyoto", attractions: int = 10) -> dict:
    return {
        "destination": destination,
        "destinationInfo": f"{destination} is a city of temples and gardens.",
        "destinationImagePrompt": f"photograph of {destination} skyline at dusk",
        "popularSpots": [
            {
                "name": f"Spot {i}",
                "description": f"Description of spot {i}.",
                "imagePrompt": f"photograph of spot {i}",
            }
            for i in range(attractions)
        ],
        "kidFriendly": "yes",
        "bestTimeToVisit": "spring",
    }


@pytest.fixture
def brief_dict() -> dict:
    return make_brief()


@pytest.fixture
def brief_json(brief_dict) -> str:
    return json.dumps(brief_dict)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        anthropic_api_key="test-anthropic",
        openai_api_key="test-openai",
        gemini_api_key="test-gemini",
        stability_api_key="test-stability",
        image_proxy_base_url="http://proxy.test",
        gemini_base_url="https://gemini.test",
        stability_base_url="https://stability.test",
    )


@pytest.fixture
def keyless_settings() -> Settings:
    return Settings(
        _env_file=None,
        anthropic_api_key="",
        openai_api_key="",
        gemini_api_key="",
        stability_api_key="",
    )


class ProxyRecorder:
    """httpx.MockTransport handler standing in for an image proxy endpoint."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.prompts: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        prompt = json.loads(request.content)["prompt"]
        self.prompts.append(prompt)
        if self.fail:
            return httpx.Response(500, json={"error": "backend down"})
        return httpx.Response(200, json={"url": f"https://images.test/{len(self.prompts)}.png"})


@pytest.fixture
def proxy() -> ProxyRecorder:
    return ProxyRecorder()


def make_resolver(path: str, handler, config: Settings) -> ImageResolver:
    client = httpx.AsyncClient(base_url=config.image_proxy_base_url, transport=httpx.MockTransport(handler))
    return ImageResolver(path, config=config, client=client)


def anthropic_client(text: str | None = None, usage: bool = True, error: Exception | None = None):
    client = Mock()
    if error is not None:
        client.messages.create = AsyncMock(side_effect=error)
        return client
    response = SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])
    if usage:
        response.usage = SimpleNamespace(input_tokens=212, output_tokens=1480)
    client.messages.create = AsyncMock(return_value=response)
    return client


def openai_client(text: str | None = None, usage: bool = True, error: Exception | None = None):
    client = Mock()
    if error is not None:
        client.chat.completions.create = AsyncMock(side_effect=error)
        return client
    response = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(role="assistant", content=text))],
        usage=SimpleNamespace(prompt_tokens=198, completion_tokens=1320) if usage else None,
    )
    client.chat.completions.create = AsyncMock(return_value=response)
    return client


def gemini_payload(text: str, usage: bool = True) -> dict:
    payload = {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}
    if usage:
        payload["usageMetadata"] = {"promptTokenCount": 240, "candidatesTokenCount": 1610}
    return payload


def gemini_client(handler, config: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=config.gemini_base_url, transport=httpx.MockTransport(handler))
