from fastapi import APIRouter

from app.api.v1 import health, status, validation

api_router = APIRouter()

api_router.include_router(health.router, prefix="/v1", tags=["health"])
api_router.include_router(validation.router, prefix="/v1/shipments", tags=["validation"])
api_router.include_router(status.router, prefix="/v1/shipments", tags=["status"])
