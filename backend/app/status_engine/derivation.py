"""Derived shipment status, computed from dated facts rather than set by hand.

Checks run in a fixed priority order and the first match wins:

1. received            delivery / warehouse receipt confirmed
2. quality_issue       a quality incident is flagged (external signal)
3. loaded_to_final     customs clearance date recorded
4. pending_transport   onward transport assigned (external signal)
5. awaiting_clearance  ETA reached
6. sailed              carrier document reference present, ETA ahead
7. delayed             agreed shipping date passed, no carrier reference
8. planning            default

A recorded manual override bypasses all of the above.
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime

from app.models.shipment import ShipmentStatus, StatusTriggerType
from app.schemas.shipment import (
    ExternalSignals,
    ShipmentSnapshot,
    StatusDerivation,
    StatusOverrideRecord,
)
from app.shipment_validator.coercion import is_blank, parse_date, resolve_now
from app.status_engine.display import normalize_status
from app.status_engine.exceptions import InvalidOverrideError

logger = logging.getLogger("tradelane.status_engine")

DEFAULT_MIN_OVERRIDE_REASON_LENGTH = 10

# Changing any of these can move a shipment to a different status
STATUS_TRIGGER_FIELDS: tuple[str, ...] = (
    "bl_no",
    "booking_no",
    "eta",
    "agreed_shipping_date",
    "customs_clearance_date",
    "warehouse_receipt_confirmed",
    "delivery_confirmed_at",
    "status_override_by",
)


def should_recalculate_status(changed_fields: Iterable[str]) -> bool:
    return any(name in STATUS_TRIGGER_FIELDS for name in changed_fields)


def is_overridden(data: ShipmentSnapshot) -> bool:
    """True when a person has pinned the status; derivation must not replace it."""
    return not is_blank(data.status_override_by)


def carrier_reference(data: ShipmentSnapshot) -> str | None:
    """BL/AWB number, falling back to the booking number."""
    for value in (data.bl_no, data.booking_no):
        if not is_blank(value):
            return value.strip()
    return None


def _is_receipt_confirmed(data: ShipmentSnapshot) -> bool:
    return data.warehouse_receipt_confirmed or not is_blank(data.delivery_confirmed_at)


def _planning_reason(has_reference: bool, has_eta: bool) -> str:
    if not has_reference and not has_eta:
        return "Waiting for Bill of Lading and ETA."
    if not has_reference:
        return "Waiting for Bill of Lading."
    if not has_eta:
        return "Waiting for ETA."
    return "Shipment is in planning phase."


def derive_status(
    data: ShipmentSnapshot,
    now: datetime | date | None = None,
    signals: ExternalSignals | None = None,
) -> StatusDerivation:
    """Compute the lifecycle status of a snapshot.

    Args:
        data: Shipment snapshot
        now: Evaluation clock; only its calendar day is used
        signals: Facts held outside the snapshot (quality incidents,
            transport assignment). Unknown signals skip their check.

    Returns:
        StatusDerivation with the status, a human-readable reason, and the
        class of fact that decided it.
    """
    if is_overridden(data):
        return StatusDerivation(
            status=normalize_status(data.status),
            reason=data.status_reason or "",
            trigger_type=StatusTriggerType.MANUAL_OVERRIDE,
            overridden=True,
        )

    signals = signals or ExternalSignals()
    today = resolve_now(now).date()
    eta = parse_date(data.eta)
    clearance = parse_date(data.customs_clearance_date)
    agreed = parse_date(data.agreed_shipping_date)
    reference = carrier_reference(data)

    result = _derive(data, today, eta, clearance, agreed, reference, signals)
    logger.debug("Derived status %s (%s)", result.status.value, result.trigger_type.value)
    return result


def _derive(
    data: ShipmentSnapshot,
    today: date,
    eta: date | None,
    clearance: date | None,
    agreed: date | None,
    reference: str | None,
    signals: ExternalSignals,
) -> StatusDerivation:
    if _is_receipt_confirmed(data):
        return StatusDerivation(
            status=ShipmentStatus.RECEIVED,
            reason="Warehouse confirmed receipt.",
            trigger_type=StatusTriggerType.WAREHOUSE_CONFIRM,
        )

    if signals.has_quality_incident:
        return StatusDerivation(
            status=ShipmentStatus.QUALITY_ISSUE,
            reason="A quality incident is open for this shipment. Follow-up required.",
            trigger_type=StatusTriggerType.QUALITY_CHECK,
        )

    if clearance is not None:
        return StatusDerivation(
            status=ShipmentStatus.LOADED_TO_FINAL,
            reason=f"Customs cleared on {clearance.isoformat()}. On the way to final destination.",
            trigger_type=StatusTriggerType.DATA_CHANGE,
        )

    if signals.has_transport_assigned:
        return StatusDerivation(
            status=ShipmentStatus.PENDING_TRANSPORT,
            reason="Transport assigned. Waiting for the customs clearance date.",
            trigger_type=StatusTriggerType.DATA_CHANGE,
        )

    if eta is not None and eta <= today:
        return StatusDerivation(
            status=ShipmentStatus.AWAITING_CLEARANCE,
            reason=f"Arrived at port on {eta.isoformat()}. Awaiting customs clearance.",
            trigger_type=StatusTriggerType.DATE_CHECK,
        )

    if reference is not None and eta is not None:
        return StatusDerivation(
            status=ShipmentStatus.SAILED,
            reason=f"Carrier document {reference} received. ETA: {eta.isoformat()}.",
            trigger_type=StatusTriggerType.DATA_CHANGE,
        )

    if agreed is not None and agreed < today and reference is None:
        days_late = (today - agreed).days
        return StatusDerivation(
            status=ShipmentStatus.DELAYED,
            reason=(
                f"Agreed shipping date ({agreed.isoformat()}) passed {days_late} days ago. "
                "No Bill of Lading received."
            ),
            trigger_type=StatusTriggerType.DATE_CHECK,
        )

    return StatusDerivation(
        status=ShipmentStatus.PLANNING,
        reason=_planning_reason(reference is not None, eta is not None),
        trigger_type=StatusTriggerType.INITIAL,
    )


def build_status_override(
    data: ShipmentSnapshot,
    new_status: ShipmentStatus | str,
    reason: str,
    overridden_by: str,
    now: datetime | date | None = None,
    min_reason_length: int = DEFAULT_MIN_OVERRIDE_REASON_LENGTH,
) -> StatusOverrideRecord:
    """Record a manual override. Nothing is persisted here; the caller stores it.

    Raises:
        InvalidOverrideError: blank overrider, a reason shorter than
            `min_reason_length`, or a status outside the canonical set.
    """
    if is_blank(overridden_by):
        raise InvalidOverrideError("Override requires the identity of the person overriding")

    reason = (reason or "").strip()
    if len(reason) < min_reason_length:
        raise InvalidOverrideError(
            f"Override reason must be at least {min_reason_length} characters"
        )

    try:
        target = ShipmentStatus(new_status)
    except ValueError:
        raise InvalidOverrideError(f"Unknown status: {new_status}") from None

    previous = normalize_status(data.status) if not is_blank(data.status) else None
    record = StatusOverrideRecord(
        previous_status=previous,
        new_status=target,
        reason=reason,
        overridden_by=overridden_by.strip(),
        overridden_at=resolve_now(now),
    )
    logger.info(
        "Manual status override: %s -> %s by %s",
        previous.value if previous else None,
        target.value,
        record.overridden_by,
    )
    return record
