from app.shipment_validator.engine import (
    UnknownSectionError,
    validate,
    validate_section,
    validate_subset,
)
from app.shipment_validator.rules import ERROR_RULES, SECTION_RULE_IDS, WARNING_RULES

__all__ = [
    "ERROR_RULES",
    "SECTION_RULE_IDS",
    "WARNING_RULES",
    "UnknownSectionError",
    "validate",
    "validate_section",
    "validate_subset",
]
