from tripbrief.services.image_generation import (
    DalleImageBackend,
    StabilityImageBackend,
    dalle_backend,
    stability_backend,
)
from tripbrief.services.plan_orchestrator import PlanOrchestrator, plan_orchestrator


def get_plan_orchestrator() -> PlanOrchestrator:
    return plan_orchestrator


def get_dalle_backend() -> DalleImageBackend:
    return dalle_backend


def get_stability_backend() -> StabilityImageBackend:
    return stability_backend
