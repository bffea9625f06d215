"""Demurrage free-time calculator. Pure date arithmetic on a snapshot.

deadline   = ETA date + free_time_days
compare_to = customs clearance date if recorded, else today
remaining  = (deadline - compare_to) in whole days; negative means exceeded
"""

from datetime import date, datetime, timedelta

from app.models.shipment import DemurrageRisk, ShipmentStatus
from app.schemas.shipment import DemurrageStatus, ShipmentSnapshot
from app.shipment_validator.coercion import is_blank, parse_date, resolve_now, to_optional_int
from app.status_engine.display import normalize_status

DEFAULT_WARNING_DAYS = 2
DEFAULT_CLEARANCE_ALERT_DAYS = 3

_RISK_LEVELS = {
    DemurrageRisk.UNKNOWN: 0,
    DemurrageRisk.SAFE: 1,
    DemurrageRisk.WARNING: 2,
    DemurrageRisk.EXCEEDED: 3,
}

# Statuses at or past port arrival (legacy arrived/delivered/invoiced normalize here)
_ARRIVED_STATUSES = frozenset({ShipmentStatus.AWAITING_CLEARANCE, ShipmentStatus.RECEIVED})


def demurrage_deadline(data: ShipmentSnapshot) -> date | None:
    """Last free day: ETA plus free time, or None if either is missing."""
    eta = parse_date(data.eta)
    free_days = to_optional_int(data.free_time_days)
    if eta is None or free_days is None:
        return None
    try:
        return eta + timedelta(days=free_days)
    except OverflowError:
        # free time pushes past the calendar range
        return None


def days_remaining(
    data: ShipmentSnapshot,
    now: datetime | date | None = None,
) -> int | None:
    """Free-time days left before demurrage accrues.

    Returns None when ETA or free time is missing. Zero means due today;
    negative values count days already past the deadline.
    """
    deadline = demurrage_deadline(data)
    if deadline is None:
        return None

    comparison = parse_date(data.customs_clearance_date) or resolve_now(now).date()
    return (deadline - comparison).days


def demurrage_status(
    data: ShipmentSnapshot,
    now: datetime | date | None = None,
    warning_days: int = DEFAULT_WARNING_DAYS,
) -> DemurrageStatus:
    """Classify the free-time position as safe / warning / exceeded / unknown."""
    remaining = days_remaining(data, now)
    if remaining is None:
        return DemurrageStatus(
            status=DemurrageRisk.UNKNOWN,
            message="Missing ETA or free time information",
        )

    deadline = demurrage_deadline(data)

    if remaining < 0:
        overdue = abs(remaining)
        return DemurrageStatus(
            status=DemurrageRisk.EXCEEDED,
            days_overdue=overdue,
            deadline_date=deadline,
            message=f"Demurrage: {overdue} day(s) overdue",
        )

    if remaining <= warning_days:
        return DemurrageStatus(
            status=DemurrageRisk.WARNING,
            days_remaining=remaining,
            deadline_date=deadline,
            message=f"Warning: {remaining} day(s) until demurrage",
        )

    return DemurrageStatus(
        status=DemurrageRisk.SAFE,
        days_remaining=remaining,
        deadline_date=deadline,
        message=f"{remaining} day(s) remaining",
    )


def demurrage_risk_level(status: DemurrageStatus) -> int:
    """Sortable risk rank: 0=unknown, 1=safe, 2=warning, 3=exceeded."""
    return _RISK_LEVELS[status.status]


def is_clearance_entry_overdue(
    data: ShipmentSnapshot,
    now: datetime | date | None = None,
    days_after_arrival: int = DEFAULT_CLEARANCE_ALERT_DAYS,
) -> bool:
    """True when a shipment has arrived but nobody entered the clearance date in time."""
    if parse_date(data.customs_clearance_date) is not None:
        return False

    if is_blank(data.status) or normalize_status(data.status) not in _ARRIVED_STATUSES:
        return False

    eta = parse_date(data.eta)
    if eta is None:
        return False

    return (resolve_now(now).date() - eta).days >= days_after_arrival
