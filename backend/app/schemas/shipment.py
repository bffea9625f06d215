"""Pydantic schemas for shipment snapshots, validation results, and derived status."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from app.models.shipment import (
    DemurrageRisk,
    ShipmentStatus,
    StatusTriggerType,
    ValidationSeverity,
)

# Wizard forms send half-filled values, so numbers may arrive as strings and
# dates as arbitrary text. The engine coerces them itself.
NumberLike = Decimal | int | float | str | None
DateLike = datetime | date | str | None


class ProductLine(BaseModel):
    quantity_mt: NumberLike = None
    amount_usd: NumberLike = None
    bags_count: NumberLike = None
    number_of_packages: NumberLike = None

    model_config = {"frozen": True}


class ShipmentSnapshot(BaseModel):
    """Read-only view of a shipment's fields at evaluation time."""

    # Dates
    etd: DateLike = None
    eta: DateLike = None
    customs_clearance_date: DateLike = None
    agreed_shipping_date: DateLike = None
    lc_expiry_date: DateLike = None

    # Commercial
    payment_method: str | None = None
    lc_number: str | None = None
    fixed_price_usd_per_ton: NumberLike = None

    # Cargo
    cargo_type: str | None = None
    container_count: NumberLike = None
    truck_count: NumberLike = None
    barrels: NumberLike = None
    weight_ton: NumberLike = None
    free_time_days: NumberLike = None

    lines: tuple[ProductLine, ...] = ()

    # Tracking facts
    bl_no: str | None = None
    booking_no: str | None = None
    status: str | None = None
    status_override_by: str | None = None
    status_reason: str | None = None
    delivery_confirmed_at: DateLike = None
    warehouse_receipt_confirmed: bool = False

    model_config = {"frozen": True}


class ValidationIssue(BaseModel):
    id: str
    severity: ValidationSeverity
    field: str | None = None
    message: str
    details: str | None = None

    model_config = {"frozen": True}


class ValidationResult(BaseModel):
    valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)


class ExternalSignals(BaseModel):
    """Facts about a shipment that live outside its own record.

    None means the caller did not look the fact up; the related status check
    is skipped rather than treated as false.
    """

    has_quality_incident: bool | None = None
    has_transport_assigned: bool | None = None

    model_config = {"frozen": True}


class StatusDerivation(BaseModel):
    status: ShipmentStatus
    reason: str
    trigger_type: StatusTriggerType
    overridden: bool = False

    model_config = {"frozen": True}


class StatusDisplayInfo(BaseModel):
    label: str
    color: str
    order: int
    description: str


class DemurrageStatus(BaseModel):
    status: DemurrageRisk
    days_remaining: int | None = None
    days_overdue: int | None = None
    deadline_date: date | None = None
    message: str


class StatusOverrideRecord(BaseModel):
    previous_status: ShipmentStatus | None = None
    new_status: ShipmentStatus
    reason: str
    overridden_by: str
    overridden_at: datetime


# ── Request / response bodies ──


class ValidateRequest(BaseModel):
    snapshot: ShipmentSnapshot
    as_of: datetime | None = None


class StatusRequest(BaseModel):
    snapshot: ShipmentSnapshot
    as_of: datetime | None = None
    signals: ExternalSignals | None = None


class StatusResponse(BaseModel):
    derivation: StatusDerivation
    display: StatusDisplayInfo
    demurrage: DemurrageStatus


class DemurrageRequest(BaseModel):
    snapshot: ShipmentSnapshot
    as_of: datetime | None = None


class DemurrageResponse(BaseModel):
    demurrage: DemurrageStatus
    risk_level: int
    clearance_entry_overdue: bool


class OverrideRequest(BaseModel):
    snapshot: ShipmentSnapshot
    new_status: ShipmentStatus
    reason: str
    overridden_by: str
    as_of: datetime | None = None


class RuleInfo(BaseModel):
    id: str
    severity: ValidationSeverity
    field: str | None = None


class StatusCatalogResponse(BaseModel):
    statuses: dict[str, StatusDisplayInfo]
    legacy_map: dict[str, ShipmentStatus]
