"""Declarative shipment validation rules.

Each rule pairs a predicate with a message builder. Both sides get their
derived figures (weight per container, kg per bag, value gap, ...) from the
same helper, so the number shown always matches the number that triggered
the rule.

Error rules block the wizard; warning rules are shown and acknowledged.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from app.models.shipment import CargoType, PaymentMethod, ValidationSeverity
from app.schemas.shipment import ShipmentSnapshot
from app.shipment_validator.coercion import (
    ZERO,
    format_number,
    is_blank,
    parse_datetime,
    quantize,
    round_half_up_days,
    to_decimal,
)

# Plausibility bands (metric tons, USD/MT, kg)
CONTAINER_MIN_MT = Decimal(5)
CONTAINER_MAX_MT = Decimal(30)
TRUCK_MIN_MT = Decimal(10)
TRUCK_MAX_MT = Decimal(50)
PRICE_LOW_USD = Decimal(10)
PRICE_HIGH_USD = Decimal(5000)
BAG_MIN_KG = Decimal(10)
BAG_MAX_KG = Decimal(100)
VALUE_MISMATCH_RATIO = Decimal("0.05")
ETA_MAX_DAYS_AHEAD = 365
ETD_MAX_DAYS_BEHIND = 30

TANKER_CARGO_TYPES = frozenset({CargoType.TANKERS.value, "tanker"})


@dataclass(frozen=True)
class RuleMessage:
    message: str
    details: str | None = None


@dataclass(frozen=True)
class ValidationRule:
    """A single catalog entry. `check` returns True when the issue exists."""

    id: str
    severity: ValidationSeverity
    check: Callable[[ShipmentSnapshot, datetime], bool]
    describe: Callable[[ShipmentSnapshot, datetime], RuleMessage]
    field: str | None = None


@dataclass(frozen=True)
class UnitLoad:
    units: Decimal
    weight: Decimal
    per_unit: Decimal


@dataclass(frozen=True)
class BagWeight:
    line_index: int
    bags: Decimal
    quantity_mt: Decimal
    kg_per_bag: Decimal


@dataclass(frozen=True)
class ValueGap:
    expected: Decimal
    lines_total: Decimal
    ratio: Decimal


# ── Derived figures ──


def _is_letter_of_credit(data: ShipmentSnapshot) -> bool:
    return data.payment_method == PaymentMethod.LETTER_OF_CREDIT.value


def unit_load(units_value, weight_value) -> UnitLoad | None:
    """Weight per unit (container, truck), or None when either side is not positive."""
    units = to_decimal(units_value)
    weight = to_decimal(weight_value)
    if units <= 0 or weight <= 0:
        return None
    return UnitLoad(units=units, weight=weight, per_unit=weight / units)


def container_load(data: ShipmentSnapshot) -> UnitLoad | None:
    if data.cargo_type != CargoType.CONTAINERS.value:
        return None
    return unit_load(data.container_count, data.weight_ton)


def truck_load(data: ShipmentSnapshot) -> UnitLoad | None:
    if data.cargo_type != CargoType.TRUCKS.value:
        return None
    return unit_load(data.truck_count, data.weight_ton)


def first_unusual_bag_weight(data: ShipmentSnapshot) -> BagWeight | None:
    """First product line whose kg-per-bag falls outside the plausible band."""
    for index, line in enumerate(data.lines):
        bags = to_decimal(line.bags_count or line.number_of_packages)
        quantity = to_decimal(line.quantity_mt)
        if bags <= 0 or quantity <= 0:
            continue
        kg_per_bag = quantity * 1000 / bags
        if kg_per_bag < BAG_MIN_KG or kg_per_bag > BAG_MAX_KG:
            return BagWeight(
                line_index=index, bags=bags, quantity_mt=quantity, kg_per_bag=kg_per_bag
            )
    return None


def line_value_gap(data: ShipmentSnapshot) -> ValueGap | None:
    """Relative gap between line totals and weight × price, when both are positive."""
    if not data.lines:
        return None

    weight = to_decimal(data.weight_ton)
    price = to_decimal(data.fixed_price_usd_per_ton)
    if weight <= 0 or price <= 0:
        return None

    lines_total = sum((to_decimal(line.amount_usd) for line in data.lines), ZERO)
    if lines_total <= 0:
        return None

    expected = weight * price
    return ValueGap(
        expected=expected,
        lines_total=lines_total,
        ratio=abs(expected - lines_total) / expected,
    )


def eta_days_ahead(data: ShipmentSnapshot, now: datetime) -> int | None:
    eta = parse_datetime(data.eta)
    if eta is None:
        return None
    return round_half_up_days(eta, now)


def etd_days_behind(data: ShipmentSnapshot, now: datetime) -> int | None:
    etd = parse_datetime(data.etd)
    if etd is None:
        return None
    return round_half_up_days(now, etd)


def _dates_inverted(later_value, earlier_value) -> bool:
    """True when both dates are present and `later_value` is strictly before `earlier_value`."""
    later = parse_datetime(later_value)
    earlier = parse_datetime(earlier_value)
    if later is None or earlier is None:
        return False
    return later < earlier


def _fixed(value: Decimal, places: int) -> str:
    return f"{quantize(value, places):.{places}f}"


# ── Error rules ──


def _lc_number_missing(data: ShipmentSnapshot, now: datetime) -> bool:
    return _is_letter_of_credit(data) and is_blank(data.lc_number)


def _weight_missing(data: ShipmentSnapshot, now: datetime) -> bool:
    if data.cargo_type in TANKER_CARGO_TYPES:
        return False  # tankers are measured in barrels
    has_containers = to_decimal(data.container_count) > 0
    has_trucks = to_decimal(data.truck_count) > 0
    has_cargo_type = bool(data.cargo_type)
    if not (has_containers or has_trucks or has_cargo_type):
        return False
    return to_decimal(data.weight_ton) <= 0


def _lc_expiry_before_eta(data: ShipmentSnapshot, now: datetime) -> bool:
    return _is_letter_of_credit(data) and _dates_inverted(data.lc_expiry_date, data.eta)


ERROR_RULES: tuple[ValidationRule, ...] = (
    ValidationRule(
        id="date-etd-after-eta",
        severity=ValidationSeverity.ERROR,
        field="etd",
        check=lambda data, now: _dates_inverted(data.eta, data.etd),
        describe=lambda data, now: RuleMessage("ETD cannot be after ETA"),
    ),
    ValidationRule(
        id="date-clearance-before-eta",
        severity=ValidationSeverity.ERROR,
        field="customs_clearance_date",
        check=lambda data, now: _dates_inverted(data.customs_clearance_date, data.eta),
        describe=lambda data, now: RuleMessage("Clearance date cannot be before arrival (ETA)"),
    ),
    ValidationRule(
        id="lc-number-required",
        severity=ValidationSeverity.ERROR,
        field="lc_number",
        check=_lc_number_missing,
        describe=lambda data, now: RuleMessage("LC number is required for Letter of Credit payment"),
    ),
    ValidationRule(
        id="weight-required",
        severity=ValidationSeverity.ERROR,
        field="weight_ton",
        check=_weight_missing,
        describe=lambda data, now: RuleMessage("Weight must be greater than 0"),
    ),
    ValidationRule(
        id="negative-price",
        severity=ValidationSeverity.ERROR,
        field="fixed_price_usd_per_ton",
        check=lambda data, now: to_decimal(data.fixed_price_usd_per_ton) < 0,
        describe=lambda data, now: RuleMessage("Price cannot be negative"),
    ),
    ValidationRule(
        id="lc-expiry-before-eta",
        severity=ValidationSeverity.ERROR,
        field="lc_expiry_date",
        check=_lc_expiry_before_eta,
        describe=lambda data, now: RuleMessage("LC expiry date cannot be before ETA"),
    ),
)


# ── Warning rules ──


def _container_too_light(data: ShipmentSnapshot, now: datetime) -> bool:
    load = container_load(data)
    return load is not None and load.per_unit < CONTAINER_MIN_MT


def _container_too_heavy(data: ShipmentSnapshot, now: datetime) -> bool:
    load = container_load(data)
    return load is not None and load.per_unit > CONTAINER_MAX_MT


def _describe_container_load(direction: str) -> Callable[[ShipmentSnapshot, datetime], RuleMessage]:
    def describe(data: ShipmentSnapshot, now: datetime) -> RuleMessage:
        load = container_load(data)
        per_container = _fixed(load.per_unit, 2)
        return RuleMessage(
            message=f"Weight per container (~{per_container} MT) seems too {direction}. Typical: 15-25 MT",
            details=(
                f"{format_number(load.units)} containers × ~{per_container} MT "
                f"= {format_number(load.weight)} MT total"
            ),
        )

    return describe


def _price_too_low(data: ShipmentSnapshot, now: datetime) -> bool:
    price = to_decimal(data.fixed_price_usd_per_ton)
    return 0 < price < PRICE_LOW_USD


def _price_too_high(data: ShipmentSnapshot, now: datetime) -> bool:
    return to_decimal(data.fixed_price_usd_per_ton) > PRICE_HIGH_USD


def _describe_price(direction: str) -> Callable[[ShipmentSnapshot, datetime], RuleMessage]:
    def describe(data: ShipmentSnapshot, now: datetime) -> RuleMessage:
        price = format_number(to_decimal(data.fixed_price_usd_per_ton))
        return RuleMessage(f"Price ${price}/MT seems unusually {direction}")

    return describe


def _describe_bag_weight(data: ShipmentSnapshot, now: datetime) -> RuleMessage:
    bag = first_unusual_bag_weight(data)
    return RuleMessage(
        message=f"Bag weight (~{_fixed(bag.kg_per_bag, 1)}kg) seems unusual. Typical: 25-50kg",
        details=(
            f"Line {bag.line_index + 1}: {format_number(bag.quantity_mt)} MT "
            f"in {format_number(bag.bags)} bags"
        ),
    )


def _eta_too_far(data: ShipmentSnapshot, now: datetime) -> bool:
    days = eta_days_ahead(data, now)
    return days is not None and days > ETA_MAX_DAYS_AHEAD


def _describe_eta_too_far(data: ShipmentSnapshot, now: datetime) -> RuleMessage:
    days = eta_days_ahead(data, now)
    months = quantize(Decimal(days) / 30, 0)
    return RuleMessage(f"ETA is {days} days (~{months} months) in the future")


def _etd_too_old(data: ShipmentSnapshot, now: datetime) -> bool:
    days = etd_days_behind(data, now)
    return days is not None and days > ETD_MAX_DAYS_BEHIND


def _value_mismatch(data: ShipmentSnapshot, now: datetime) -> bool:
    gap = line_value_gap(data)
    return gap is not None and gap.ratio > VALUE_MISMATCH_RATIO


def _describe_value_mismatch(data: ShipmentSnapshot, now: datetime) -> RuleMessage:
    gap = line_value_gap(data)
    return RuleMessage(
        f"Line totals (${gap.lines_total:,.2f}) differ from expected value "
        f"(${gap.expected:,.2f}) by {_fixed(gap.ratio * 100, 1)}%"
    )


def _truck_load_unusual(data: ShipmentSnapshot, now: datetime) -> bool:
    load = truck_load(data)
    if load is None:
        return False
    return load.per_unit < TRUCK_MIN_MT or load.per_unit > TRUCK_MAX_MT


def _describe_truck_load(data: ShipmentSnapshot, now: datetime) -> RuleMessage:
    load = truck_load(data)
    per_truck = _fixed(load.per_unit, 2)
    return RuleMessage(
        message=f"Weight per truck (~{per_truck} MT) seems unusual. Typical: 20-40 MT",
        details=(
            f"{format_number(load.units)} trucks × ~{per_truck} MT "
            f"= {format_number(load.weight)} MT total"
        ),
    )


WARNING_RULES: tuple[ValidationRule, ...] = (
    ValidationRule(
        id="container-weight-too-low",
        severity=ValidationSeverity.WARNING,
        field="weight_ton",
        check=_container_too_light,
        describe=_describe_container_load("low"),
    ),
    ValidationRule(
        id="container-weight-too-high",
        severity=ValidationSeverity.WARNING,
        field="weight_ton",
        check=_container_too_heavy,
        describe=_describe_container_load("high"),
    ),
    ValidationRule(
        id="price-too-low",
        severity=ValidationSeverity.WARNING,
        field="fixed_price_usd_per_ton",
        check=_price_too_low,
        describe=_describe_price("low"),
    ),
    ValidationRule(
        id="price-too-high",
        severity=ValidationSeverity.WARNING,
        field="fixed_price_usd_per_ton",
        check=_price_too_high,
        describe=_describe_price("high"),
    ),
    ValidationRule(
        id="bag-weight-unusual",
        severity=ValidationSeverity.WARNING,
        field="weight_ton",
        check=lambda data, now: first_unusual_bag_weight(data) is not None,
        describe=_describe_bag_weight,
    ),
    ValidationRule(
        id="eta-too-far-future",
        severity=ValidationSeverity.WARNING,
        field="eta",
        check=_eta_too_far,
        describe=_describe_eta_too_far,
    ),
    ValidationRule(
        id="etd-too-far-past",
        severity=ValidationSeverity.WARNING,
        field="etd",
        check=_etd_too_old,
        describe=lambda data, now: RuleMessage(f"ETD is {etd_days_behind(data, now)} days in the past"),
    ),
    ValidationRule(
        id="value-mismatch",
        severity=ValidationSeverity.WARNING,
        field="lines",
        check=_value_mismatch,
        describe=_describe_value_mismatch,
    ),
    ValidationRule(
        id="truck-weight-unusual",
        severity=ValidationSeverity.WARNING,
        field="weight_ton",
        check=_truck_load_unusual,
        describe=_describe_truck_load,
    ),
)


# Wizard sections key their banners to these lists; keep them stable.
SECTION_RULE_IDS: dict[str, tuple[str, ...]] = {
    "commercial": (
        "weight-required",
        "negative-price",
        "container-weight-too-low",
        "container-weight-too-high",
        "price-too-low",
        "price-too-high",
        "truck-weight-unusual",
    ),
    "logistics": (
        "date-etd-after-eta",
        "date-clearance-before-eta",
        "eta-too-far-future",
        "etd-too-far-past",
        "lc-expiry-before-eta",
    ),
    "financials": (
        "lc-number-required",
        "lc-expiry-before-eta",
    ),
    "products": (
        "bag-weight-unusual",
        "value-mismatch",
    ),
}


ALL_RULES: tuple[ValidationRule, ...] = ERROR_RULES + WARNING_RULES

RULES_BY_ID: dict[str, ValidationRule] = {rule.id: rule for rule in ALL_RULES}

if len(RULES_BY_ID) != len(ALL_RULES):
    raise RuntimeError("Duplicate validation rule id in catalog")
