"""Derived status and demurrage endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from app.config import Settings
from app.dependencies import get_now, get_settings
from app.schemas.shipment import (
    DemurrageRequest,
    DemurrageResponse,
    OverrideRequest,
    StatusCatalogResponse,
    StatusOverrideRecord,
    StatusRequest,
    StatusResponse,
)
from app.status_engine.demurrage import (
    demurrage_risk_level,
    demurrage_status,
    is_clearance_entry_overdue,
)
from app.status_engine.derivation import build_status_override, derive_status
from app.status_engine.display import LEGACY_STATUS_MAP, STATUS_CONFIG, get_status_display_info
from app.status_engine.exceptions import InvalidOverrideError

router = APIRouter()


@router.post("/status", response_model=StatusResponse)
async def get_shipment_status(
    request: StatusRequest,
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_settings),
) -> StatusResponse:
    """Derive the lifecycle status of a snapshot, honouring any manual override."""
    as_of = request.as_of or now
    derivation = derive_status(request.snapshot, as_of, request.signals)

    return StatusResponse(
        derivation=derivation,
        display=get_status_display_info(derivation.status),
        demurrage=demurrage_status(request.snapshot, as_of, settings.demurrage_warning_days),
    )


@router.post("/status/override", response_model=StatusOverrideRecord)
async def override_shipment_status(
    request: OverrideRequest,
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_settings),
) -> StatusOverrideRecord:
    """Build the audit record for a manual override. The caller persists it."""
    try:
        return build_status_override(
            request.snapshot,
            request.new_status,
            request.reason,
            request.overridden_by,
            request.as_of or now,
            min_reason_length=settings.status_override_min_reason_length,
        )
    except InvalidOverrideError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/demurrage", response_model=DemurrageResponse)
async def get_demurrage(
    request: DemurrageRequest,
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_settings),
) -> DemurrageResponse:
    as_of = request.as_of or now
    status = demurrage_status(request.snapshot, as_of, settings.demurrage_warning_days)

    return DemurrageResponse(
        demurrage=status,
        risk_level=demurrage_risk_level(status),
        clearance_entry_overdue=is_clearance_entry_overdue(
            request.snapshot, as_of, settings.clearance_entry_alert_days
        ),
    )


@router.get("/statuses", response_model=StatusCatalogResponse)
async def list_statuses() -> StatusCatalogResponse:
    return StatusCatalogResponse(
        statuses={status.value: info for status, info in STATUS_CONFIG.items()},
        legacy_map=LEGACY_STATUS_MAP,
    )
