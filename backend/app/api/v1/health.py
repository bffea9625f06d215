from datetime import datetime, timezone

from fastapi import APIRouter

from app.config import APP_VERSION, settings
from app.schemas.health import HealthResponse
from app.shipment_validator.rules import ALL_RULES

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    # The engine has no backing services; a loaded catalog means ready
    rules_loaded = len(ALL_RULES)

    return HealthResponse(
        status="healthy" if rules_loaded else "degraded",
        rules_loaded=rules_loaded,
        timestamp=datetime.now(timezone.utc),
        environment=settings.environment,
        version=APP_VERSION,
    )
