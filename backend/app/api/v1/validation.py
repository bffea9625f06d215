"""Shipment validation endpoints: full run, per-section run, and catalog listing."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_now
from app.schemas.shipment import RuleInfo, ValidateRequest, ValidationResult
from app.shipment_validator.engine import UnknownSectionError, validate, validate_section
from app.shipment_validator.rules import ALL_RULES, SECTION_RULE_IDS

logger = logging.getLogger("tradelane.api.validation")

router = APIRouter()


@router.post("/validate", response_model=ValidationResult)
async def validate_shipment(
    request: ValidateRequest,
    now: datetime = Depends(get_now),
) -> ValidationResult:
    """Validate a shipment snapshot against every rule.

    Errors block the wizard; warnings are returned for acknowledgement.
    """
    result = validate(request.snapshot, request.as_of or now)

    if result.valid and result.warnings:
        logger.info(
            "Shipment snapshot passed with %d warning(s): %s",
            len(result.warnings),
            [w.id for w in result.warnings],
        )

    return result


@router.post("/validate/{section_id}", response_model=ValidationResult)
async def validate_shipment_section(
    section_id: str,
    request: ValidateRequest,
    now: datetime = Depends(get_now),
) -> ValidationResult:
    """Validate only the rules behind one wizard section."""
    try:
        return validate_section(request.snapshot, section_id, request.as_of or now)
    except UnknownSectionError:
        raise HTTPException(status_code=404, detail=f"Unknown validation section: {section_id}")


@router.get("/validation/sections")
async def list_sections() -> dict[str, list[str]]:
    return {section: list(ids) for section, ids in SECTION_RULE_IDS.items()}


@router.get("/validation/rules", response_model=list[RuleInfo])
async def list_rules() -> list[RuleInfo]:
    return [RuleInfo(id=rule.id, severity=rule.severity, field=rule.field) for rule in ALL_RULES]
