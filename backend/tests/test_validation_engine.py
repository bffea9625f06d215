"""Tests for the validation engine: catalog passes, subsets, sections."""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from app.models.shipment import ValidationSeverity
from app.schemas.shipment import ProductLine, ShipmentSnapshot
from app.shipment_validator.engine import (
    UnknownSectionError,
    catalog_rule_ids,
    evaluate_rules,
    filter_result,
    get_rule,
    validate,
    validate_commercial_terms,
    validate_financials,
    validate_logistics,
    validate_product_lines,
    validate_section,
    validate_subset,
)
from app.shipment_validator.rules import (
    ALL_RULES,
    ERROR_RULES,
    SECTION_RULE_IDS,
    WARNING_RULES,
)


@pytest.fixture
def messy_snapshot() -> ShipmentSnapshot:
    """Trips both error and warning rules across several sections."""
    return ShipmentSnapshot(
        etd="2024-02-11",
        eta="2024-02-10",
        payment_method="letter_of_credit",
        fixed_price_usd_per_ton=5,
        cargo_type="containers",
        container_count=10,
        weight_ton=40,
        lines=(ProductLine(quantity_mt=1, bags_count=200, amount_usd=200),),
    )


class TestCatalog:
    def test_catalog_size(self):
        assert len(ERROR_RULES) == 6
        assert len(WARNING_RULES) == 9
        assert len(ALL_RULES) == 15

    def test_ids_unique(self):
        ids = [rule.id for rule in ALL_RULES]
        assert len(ids) == len(set(ids))

    def test_severities_partition(self):
        assert all(rule.severity == ValidationSeverity.ERROR for rule in ERROR_RULES)
        assert all(rule.severity == ValidationSeverity.WARNING for rule in WARNING_RULES)

    def test_catalog_rule_ids_in_evaluation_order(self):
        ids = catalog_rule_ids()
        assert ids[0] == "date-etd-after-eta"
        assert ids[-1] == "truck-weight-unusual"
        assert catalog_rule_ids(ValidationSeverity.ERROR) == [r.id for r in ERROR_RULES]

    def test_section_lists_reference_known_rules(self):
        known = set(catalog_rule_ids())
        for ids in SECTION_RULE_IDS.values():
            assert set(ids) <= known

    def test_get_rule(self):
        assert get_rule("negative-price").field == "fixed_price_usd_per_ton"
        assert get_rule("no-such-rule") is None


class TestValidate:
    def test_clean_snapshot(self, clean_snapshot, now):
        result = validate(clean_snapshot, now)
        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_empty_snapshot_is_valid(self, now):
        result = validate(ShipmentSnapshot(), now)
        assert result.valid is True
        assert result.warnings == []

    def test_valid_iff_no_errors(self, messy_snapshot, now):
        result = validate(messy_snapshot, now)
        assert result.valid is False
        assert [e.id for e in result.errors] == ["date-etd-after-eta", "lc-number-required"]

    def test_warnings_follow_catalog_order(self, messy_snapshot, now):
        result = validate(messy_snapshot, now)
        assert [w.id for w in result.warnings] == [
            "container-weight-too-low",
            "price-too-low",
            "bag-weight-unusual",
        ]

    def test_warnings_alone_keep_result_valid(self, now):
        result = validate(ShipmentSnapshot(fixed_price_usd_per_ton=6000), now)
        assert result.valid is True
        assert len(result.warnings) == 1

    def test_issue_carries_field_and_severity(self, messy_snapshot, now):
        issue = validate(messy_snapshot, now).errors[1]
        assert issue.field == "lc_number"
        assert issue.severity == ValidationSeverity.ERROR
        assert issue.details is None

    def test_deterministic(self, messy_snapshot, now):
        assert validate(messy_snapshot, now) == validate(messy_snapshot, now)

    def test_date_clock_accepted(self, now):
        result = validate(ShipmentSnapshot(etd="2023-12-01"), date(2024, 1, 12))
        assert result.warnings[0].message == "ETD is 42 days in the past"

    def test_default_clock_is_wall_time(self):
        # ETD a decade ago is always past the 30-day window
        result = validate(ShipmentSnapshot(etd="2014-01-01"))
        assert [w.id for w in result.warnings] == ["etd-too-far-past"]

    @pytest.mark.parametrize(
        "snapshot",
        [
            ShipmentSnapshot(weight_ton="lots", container_count="many", cargo_type="containers"),
            ShipmentSnapshot(eta="sometime", etd="", customs_clearance_date="??"),
            ShipmentSnapshot(fixed_price_usd_per_ton="1e400", free_time_days="∞"),
            ShipmentSnapshot(lines=(ProductLine(quantity_mt="x", bags_count="y", amount_usd="z"),)),
        ],
    )
    def test_garbage_input_never_raises(self, snapshot, now):
        result = validate(snapshot, now)
        assert isinstance(result.valid, bool)


class TestOrderIndependence:
    """Swapping catalog order changes list order but never the set of hits."""

    def test_reversed_catalog_same_hits(self, messy_snapshot, now):
        forward = evaluate_rules(ALL_RULES, messy_snapshot, now)
        backward = evaluate_rules(tuple(reversed(ALL_RULES)), messy_snapshot, now)
        assert {i.id for i in forward} == {i.id for i in backward}
        assert [i.id for i in backward] == [i.id for i in reversed(forward)]

    def test_eligible_filter(self, messy_snapshot, now):
        issues = evaluate_rules(ALL_RULES, messy_snapshot, now, frozenset({"price-too-low"}))
        assert [i.id for i in issues] == ["price-too-low"]


class TestSubsetAndSections:
    def test_subset_runs_named_rules_only(self, messy_snapshot, now):
        result = validate_subset(messy_snapshot, ["price-too-low", "lc-number-required"], now)
        assert [e.id for e in result.errors] == ["lc-number-required"]
        assert [w.id for w in result.warnings] == ["price-too-low"]

    def test_subset_with_only_warnings_is_valid(self, messy_snapshot, now):
        result = validate_subset(messy_snapshot, ["bag-weight-unusual"], now)
        assert result.valid is True

    def test_unknown_ids_are_ignored(self, messy_snapshot, now):
        result = validate_subset(messy_snapshot, ["does-not-exist"], now)
        assert result.valid is True
        assert result.errors == [] and result.warnings == []

    def test_subset_matches_filtered_full_run(self, messy_snapshot, now):
        ids = SECTION_RULE_IDS["commercial"]
        assert validate_subset(messy_snapshot, ids, now) == filter_result(
            validate(messy_snapshot, now), ids
        )

    def test_commercial_section(self, messy_snapshot, now):
        result = validate_section(messy_snapshot, "commercial", now)
        assert result.valid is True
        assert [w.id for w in result.warnings] == ["container-weight-too-low", "price-too-low"]

    def test_logistics_section(self, messy_snapshot, now):
        result = validate_logistics(messy_snapshot, now)
        assert [e.id for e in result.errors] == ["date-etd-after-eta"]
        assert result.warnings == []

    def test_financials_section(self, messy_snapshot, now):
        result = validate_financials(messy_snapshot, now)
        assert [e.id for e in result.errors] == ["lc-number-required"]

    def test_products_section(self, messy_snapshot, now):
        result = validate_product_lines(messy_snapshot, now)
        assert [w.id for w in result.warnings] == ["bag-weight-unusual"]

    def test_commercial_wrapper(self, messy_snapshot, now):
        assert validate_commercial_terms(messy_snapshot, now) == validate_section(
            messy_snapshot, "commercial", now
        )

    def test_unknown_section(self, messy_snapshot, now):
        with pytest.raises(UnknownSectionError):
            validate_section(messy_snapshot, "customs", now)

    def test_unknown_section_is_key_error(self, now):
        with pytest.raises(KeyError):
            validate_section(ShipmentSnapshot(), "nope", now)


class TestSnapshotImmutability:
    def test_snapshot_is_frozen(self, clean_snapshot):
        with pytest.raises(ValidationError):
            clean_snapshot.weight_ton = 1

    def test_validation_leaves_snapshot_untouched(self, messy_snapshot, now):
        before = messy_snapshot.model_dump()
        validate(messy_snapshot, now)
        assert messy_snapshot.model_dump() == before

    def test_clock_as_datetime(self, clean_snapshot):
        assert validate(clean_snapshot, datetime(2024, 1, 12)).valid is True


def test_section_errors_are_subset_of_full_run(messy_snapshot, now):
    full = {e.id for e in validate(messy_snapshot, now).errors}
    for section in SECTION_RULE_IDS:
        section_errors = {e.id for e in validate_section(messy_snapshot, section, now).errors}
        assert section_errors <= full


def test_offset_date_beyond_calendar_is_ignored(now):
    result = validate(ShipmentSnapshot(eta="9999-12-31T23:00:00-05:00", etd="2024-01-05"), now)
    assert result.valid is True
    assert result.warnings == []
