"""Image proxy router — thin endpoints the image resolver calls, one per backend."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from tripbrief.dependencies import get_dalle_backend, get_stability_backend
from tripbrief.services.image_generation import (
    DalleImageBackend,
    ImageGenerationError,
    StabilityImageBackend,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class ImagePromptRequest(BaseModel):
    prompt: str


async def _generate(backend, prompt: str, name: str):
    try:
        url = await backend.generate(prompt)
    except ImageGenerationError as e:
        logger.warning(f"{name} image generation failed ({e.status_code}): {e.message}")
        return JSONResponse({"error": e.message}, status_code=e.status_code)
    return {"url": url}


@router.post("/dalle")
async def generate_dalle(
    body: ImagePromptRequest,
    backend: DalleImageBackend = Depends(get_dalle_backend),
):
    return await _generate(backend, body.prompt, "DALL-E")


@router.post("/stability")
async def generate_stability(
    body: ImagePromptRequest,
    backend: StabilityImageBackend = Depends(get_stability_backend),
):
    return await _generate(backend, body.prompt, "Stability AI")
