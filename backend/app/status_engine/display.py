"""Status display configuration and the single legacy → canonical status map."""

from app.models.shipment import ShipmentStatus
from app.schemas.shipment import StatusDisplayInfo

STATUS_CONFIG: dict[ShipmentStatus, StatusDisplayInfo] = {
    ShipmentStatus.PLANNING: StatusDisplayInfo(
        label="Planning",
        color="gray",
        order=1,
        description="Shipment is being planned. Waiting for booking details.",
    ),
    ShipmentStatus.DELAYED: StatusDisplayInfo(
        label="Delayed",
        color="red",
        order=2,
        description="Agreed shipping date has passed but no Bill of Lading received.",
    ),
    ShipmentStatus.SAILED: StatusDisplayInfo(
        label="Sailed / In Transit",
        color="blue",
        order=3,
        description="Shipment is in transit. Bill of Lading received.",
    ),
    ShipmentStatus.AWAITING_CLEARANCE: StatusDisplayInfo(
        label="Awaiting Clearance",
        color="amber",
        order=4,
        description="Shipment has arrived at port. Waiting for customs clearance.",
    ),
    ShipmentStatus.PENDING_TRANSPORT: StatusDisplayInfo(
        label="Pending Transport",
        color="indigo",
        order=5,
        description="Assigned to transport agent, waiting for the clearance date and vehicle assignment.",
    ),
    ShipmentStatus.LOADED_TO_FINAL: StatusDisplayInfo(
        label="On Way to Final Destination",
        color="purple",
        order=6,
        description="Customs cleared. Shipment is on the way to final destination.",
    ),
    ShipmentStatus.RECEIVED: StatusDisplayInfo(
        label="Received",
        color="green",
        order=7,
        description="Shipment received at warehouse.",
    ),
    ShipmentStatus.QUALITY_ISSUE: StatusDisplayInfo(
        label="Quality Issue",
        color="orange",
        order=8,
        description="A quality incident is open for this shipment. Follow-up required.",
    ),
}

# Pre-engine status values still present on older records
LEGACY_STATUS_MAP: dict[str, ShipmentStatus] = {
    "booked": ShipmentStatus.PLANNING,
    "gate_in": ShipmentStatus.PLANNING,
    "loaded": ShipmentStatus.SAILED,
    "arrived": ShipmentStatus.AWAITING_CLEARANCE,
    "delivered": ShipmentStatus.RECEIVED,
    "invoiced": ShipmentStatus.RECEIVED,
}


def normalize_status(value: ShipmentStatus | str | None) -> ShipmentStatus:
    """Map a stored status (canonical or legacy) onto the canonical enum.

    Missing or unrecognised values fall back to planning.
    """
    if isinstance(value, ShipmentStatus):
        return value
    if not value:
        return ShipmentStatus.PLANNING

    key = str(value).strip().lower()
    if key in LEGACY_STATUS_MAP:
        return LEGACY_STATUS_MAP[key]
    try:
        return ShipmentStatus(key)
    except ValueError:
        return ShipmentStatus.PLANNING


def get_status_display_info(value: ShipmentStatus | str | None) -> StatusDisplayInfo:
    return STATUS_CONFIG[normalize_status(value)]
