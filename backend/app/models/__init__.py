from app.models.shipment import (
    CargoType,
    DemurrageRisk,
    PaymentMethod,
    ShipmentStatus,
    StatusTriggerType,
    ValidationSeverity,
)

__all__ = [
    "CargoType",
    "DemurrageRisk",
    "PaymentMethod",
    "ShipmentStatus",
    "StatusTriggerType",
    "ValidationSeverity",
]
