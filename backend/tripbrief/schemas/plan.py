from typing import Literal

from pydantic import BaseModel


class PlanRequest(BaseModel):
    text: str


class ValidationResponse(BaseModel):
    valid: bool
    reason: str | None = None
    message: str | None = None


class MetricsView(BaseModel):
    latency_ms: int
    input_tokens: int | str
    output_tokens: int | str
    provider_name: str
    model_label: str


class AttractionView(BaseModel):
    position: int
    name: str
    description: str
    image: str


class ProviderResultView(BaseModel):
    provider: str
    provider_name: str
    status: Literal["ok", "error"]
    metrics: MetricsView

    # Success fields
    destination: str | None = None
    destination_info: str | None = None
    destination_image: str | None = None
    attractions: list[AttractionView] = []
    kid_friendly: str | None = None
    best_season: str | None = None

    # Failure fields
    error: str | None = None
    error_kind: str | None = None


class PlanResponse(BaseModel):
    results: list[ProviderResultView]
