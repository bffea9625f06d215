"""Shipment validation engine. Evaluates the rule catalog against a snapshot.

Pure: no DB, no I/O, no state between calls. Safe to call concurrently.
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime

from app.models.shipment import ValidationSeverity
from app.schemas.shipment import ShipmentSnapshot, ValidationIssue, ValidationResult
from app.shipment_validator.coercion import resolve_now
from app.shipment_validator.rules import (
    ERROR_RULES,
    RULES_BY_ID,
    SECTION_RULE_IDS,
    WARNING_RULES,
    ValidationRule,
)

logger = logging.getLogger("tradelane.shipment_validator")


class UnknownSectionError(KeyError):
    """Raised when a caller asks for a wizard section that has no rule list."""


def evaluate_rules(
    rules: Iterable[ValidationRule],
    data: ShipmentSnapshot,
    now: datetime,
    eligible: frozenset[str] | None = None,
) -> list[ValidationIssue]:
    """Evaluate `rules` in the given order; only ids in `eligible` run when it is set."""
    issues = []
    for rule in rules:
        if eligible is not None and rule.id not in eligible:
            continue
        if not rule.check(data, now):
            continue
        text = rule.describe(data, now)
        issues.append(
            ValidationIssue(
                id=rule.id,
                severity=rule.severity,
                field=rule.field,
                message=text.message,
                details=text.details,
            )
        )
    return issues


def _run(
    data: ShipmentSnapshot,
    now: datetime | date | None,
    eligible: frozenset[str] | None,
) -> ValidationResult:
    clock = resolve_now(now)
    errors = evaluate_rules(ERROR_RULES, data, clock, eligible)
    warnings = evaluate_rules(WARNING_RULES, data, clock, eligible)

    if errors or warnings:
        logger.debug(
            "Validation hits: errors=%s warnings=%s",
            [e.id for e in errors],
            [w.id for w in warnings],
        )

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def validate(
    data: ShipmentSnapshot,
    now: datetime | date | None = None,
) -> ValidationResult:
    """Run every error rule, then every warning rule, in catalog order.

    Warnings never affect `valid`.
    """
    return _run(data, now, None)


def validate_subset(
    data: ShipmentSnapshot,
    rule_ids: Iterable[str],
    now: datetime | date | None = None,
) -> ValidationResult:
    """Same two passes as validate(), but only rules named in `rule_ids` run."""
    return _run(data, now, frozenset(rule_ids))


def validate_section(
    data: ShipmentSnapshot,
    section_id: str,
    now: datetime | date | None = None,
) -> ValidationResult:
    """Validate only the rules behind one wizard section.

    Raises:
        UnknownSectionError: if `section_id` is not a known section.
    """
    try:
        rule_ids = SECTION_RULE_IDS[section_id]
    except KeyError:
        raise UnknownSectionError(section_id) from None
    return validate_subset(data, rule_ids, now)


def validate_commercial_terms(data: ShipmentSnapshot, now: datetime | date | None = None) -> ValidationResult:
    return validate_section(data, "commercial", now)


def validate_logistics(data: ShipmentSnapshot, now: datetime | date | None = None) -> ValidationResult:
    return validate_section(data, "logistics", now)


def validate_financials(data: ShipmentSnapshot, now: datetime | date | None = None) -> ValidationResult:
    return validate_section(data, "financials", now)


def validate_product_lines(data: ShipmentSnapshot, now: datetime | date | None = None) -> ValidationResult:
    return validate_section(data, "products", now)


def filter_result(result: ValidationResult, rule_ids: Iterable[str]) -> ValidationResult:
    """Restrict an existing result to the given rule ids."""
    keep = frozenset(rule_ids)
    errors = [e for e in result.errors if e.id in keep]
    warnings = [w for w in result.warnings if w.id in keep]
    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def get_rule(rule_id: str) -> ValidationRule | None:
    return RULES_BY_ID.get(rule_id)


def catalog_rule_ids(severity: ValidationSeverity | None = None) -> list[str]:
    """Catalog ids in evaluation order, optionally for one severity."""
    return [
        rule.id
        for rule in ERROR_RULES + WARNING_RULES
        if severity is None or rule.severity == severity
    ]
