import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tripbrief.config import settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "tripbrief.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries (httpx logs request URLs, which carry the Gemini key)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from tripbrief.routers import images, plan

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    missing = settings.missing(
        "anthropic_api_key", "openai_api_key", "gemini_api_key", "stability_api_key"
    )
    if missing:
        logger.warning(f"Missing API keys, affected pipelines will report errors: {', '.join(missing)}")

    yield

    # Shutdown
    from tripbrief.services.image_generation import dalle_backend, stability_backend
    from tripbrief.services.plan_orchestrator import plan_orchestrator

    await plan_orchestrator.aclose()
    await dalle_backend.aclose()
    await stability_backend.aclose()
    logger.info("Provider clients closed")


app = FastAPI(
    title="TripBrief",
    description="Side-by-side trip briefs from three AI providers",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(plan.router, prefix="/api/plan", tags=["plan"])
app.include_router(images.router, prefix="/api/images", tags=["images"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "tripbrief"}
