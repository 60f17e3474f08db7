"""Health check endpoint."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

router = APIRouter()


class HealthStatus(BaseModel):
    """Liveness response."""

    status: str = Field(description="Always 'ok' while the process serves requests")


@router.get("/health", response_model=HealthStatus)
async def health() -> HealthStatus:
    """Liveness probe - no dependency checks."""
    return HealthStatus(status="ok")
