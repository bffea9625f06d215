"""Enumerations shared by the validation and status engines."""

import enum


class ValidationSeverity(str, enum.Enum):
    ERROR = "error"
    WARNING = "warning"


class CargoType(str, enum.Enum):
    CONTAINERS = "containers"
    TRUCKS = "trucks"
    TANKERS = "tankers"
    GENERAL_CARGO = "general_cargo"


class PaymentMethod(str, enum.Enum):
    LETTER_OF_CREDIT = "letter_of_credit"
    BANK_TRANSFER = "bank_transfer"
    CASH = "cash"
    OPEN_ACCOUNT = "open_account"


class ShipmentStatus(str, enum.Enum):
    PLANNING = "planning"
    DELAYED = "delayed"
    SAILED = "sailed"
    AWAITING_CLEARANCE = "awaiting_clearance"
    PENDING_TRANSPORT = "pending_transport"
    LOADED_TO_FINAL = "loaded_to_final"
    RECEIVED = "received"
    QUALITY_ISSUE = "quality_issue"


class StatusTriggerType(str, enum.Enum):
    INITIAL = "initial"
    DATE_CHECK = "date_check"
    DATA_CHANGE = "data_change"
    WAREHOUSE_CONFIRM = "warehouse_confirm"
    QUALITY_CHECK = "quality_check"
    MANUAL_OVERRIDE = "manual_override"


class DemurrageRisk(str, enum.Enum):
    UNKNOWN = "unknown"
    SAFE = "safe"
    WARNING = "warning"
    EXCEEDED = "exceeded"
