from app.schemas.health import HealthResponse
from app.schemas.shipment import (
    ExternalSignals,
    ProductLine,
    ShipmentSnapshot,
    StatusDerivation,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "ExternalSignals",
    "HealthResponse",
    "ProductLine",
    "ShipmentSnapshot",
    "StatusDerivation",
    "ValidationIssue",
    "ValidationResult",
]
