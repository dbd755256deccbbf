from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from regsync.domain.errors import RegistrationMismatchError
from regsync.domain.extraction import normalize_extraction
from regsync.domain.model import CompanyStatus
from regsync.domain.reconciliation import (
    COMPANY_FIELDS,
    FieldCategory,
    FieldSpec,
    ValueKind,
    check_registration_number,
    diff_company,
)
from tests.helpers.companies import make_company, make_raw_extraction


def test_matching_extract_has_no_differences() -> None:
    assert diff_company(make_company(), normalize_extraction(make_raw_extraction())) == ()


def test_money_compares_at_field_precision() -> None:
    company = make_company(paid_up_capital_amount=Decimal("100000.00"))
    raw = make_raw_extraction()
    raw["paidUpCapital"] = {"amount": 100000, "currency": "SGD"}

    differences = diff_company(company, normalize_extraction(raw))

    assert "paid_up_capital_amount" not in {difference.field for difference in differences}


@pytest.mark.parametrize(
    ("kind", "old", "new", "places"),
    [
        (ValueKind.DECIMAL, Decimal("100000.00"), Decimal(100000), 2),
        (ValueKind.DECIMAL, "12.5", Decimal("12.50"), 2),
        (ValueKind.DECIMAL, Decimal("1E+30"), Decimal(10**30), 2),
        (ValueKind.DATE, datetime(2020, 1, 15, 23, 0, tzinfo=UTC), date(2020, 1, 15), None),
        (ValueKind.TEXT, None, "", None),
        (ValueKind.TEXT, "10  Anson Road ", "10 Anson Road", None),
        (ValueKind.CODE, "sgd", "SGD", None),
        (ValueKind.INTEGER, "12", 12, None),
        (ValueKind.ENUM, CompanyStatus.LIVE, "LIVE", None),
    ],
)
def test_field_spec_equality(kind: ValueKind, old: object, new: object, places: int | None) -> None:
    spec = FieldSpec("value", "Value", kind, places=places)

    assert spec.equal(old, new)


def test_text_comparison_is_case_sensitive() -> None:
    spec = FieldSpec("name", "Name", ValueKind.TEXT)

    assert not spec.equal("Acme Trading", "ACME TRADING")


def test_absent_fields_are_never_proposed() -> None:
    company = make_company(former_name="Acme Old", last_agm_date=date(2025, 6, 30))
    raw = make_raw_extraction()
    raw.pop("paidUpCapital")

    differences = diff_company(company, normalize_extraction(raw))

    assert differences == ()


def test_blank_optional_field_proposes_clearing() -> None:
    company = make_company(former_name="Acme Old")
    raw = make_raw_extraction()
    entity = raw["entityDetails"]
    assert isinstance(entity, dict)
    entity["formerName"] = ""

    differences = diff_company(company, normalize_extraction(raw))

    assert len(differences) == 1
    assert differences[0].field == "former_name"
    assert differences[0].old_value == "Acme Old"
    assert differences[0].new_value == ""


def test_differences_follow_field_order_and_carry_labels() -> None:
    company = make_company()
    raw = make_raw_extraction()
    raw["financialYear"] = {"endDay": 30, "endMonth": 6}
    raw["registeredAddress"] = "1 Raffles Place Singapore 048616"
    entity = raw["entityDetails"]
    assert isinstance(entity, dict)
    entity["name"] = "Acme Global Pte. Ltd."
    entity["status"] = "Struck Off"

    extracted = normalize_extraction(raw)
    differences = diff_company(company, extracted)

    assert [difference.field for difference in differences] == [
        "name",
        "status",
        "registered_address",
        "financial_year_end_day",
        "financial_year_end_month",
    ]
    name = differences[0]
    assert name.label == "Company Name"
    assert name.category is FieldCategory.ENTITY
    assert name.old_value == "Acme Trading Pte. Ltd."
    assert name.new_value == "Acme Global Pte. Ltd."
    assert differences[1].new_value is CompanyStatus.STRUCK_OFF
    assert differences[2].category is FieldCategory.ADDRESS
    assert diff_company(company, extracted) == differences


def test_diff_is_deterministic_across_runs_and_key_order() -> None:
    raw = make_raw_extraction()
    raw["registeredAddress"] = "1 Raffles Place Singapore 048616"
    raw["paidUpCapital"] = {"amount": "250,000", "currency": "SGD"}
    entity = raw["entityDetails"]
    assert isinstance(entity, dict)
    entity["name"] = "Acme Global Pte. Ltd."
    reordered = dict(reversed(list(raw.items())))
    reordered["entityDetails"] = dict(reversed(list(entity.items())))

    first = diff_company(make_company(), normalize_extraction(raw))
    second = diff_company(make_company(), normalize_extraction(raw))
    third = diff_company(make_company(), normalize_extraction(reordered))

    assert first == second == third
    assert [difference.field for difference in first] == [
        "name",
        "registered_address",
        "paid_up_capital_amount",
    ]


def test_company_fields_are_unique_and_cover_required_identity() -> None:
    names = [spec.name for spec in COMPANY_FIELDS]

    assert len(names) == len(set(names))
    assert "registration_number" not in names
    assert {spec.name for spec in COMPANY_FIELDS if spec.required} == {
        "name",
        "entity_type",
        "status",
    }


def test_registration_number_tolerates_case_and_spacing() -> None:
    company = make_company(registration_number="201912345A")
    extracted = normalize_extraction({"entityDetails": {"uen": " 2019 12345a "}})

    check_registration_number(company, extracted)


def test_registration_number_mismatch_raises() -> None:
    company = make_company(registration_number="201912345A")
    extracted = normalize_extraction({"entityDetails": {"uen": "199901234Z"}})

    with pytest.raises(RegistrationMismatchError) as excinfo:
        check_registration_number(company, extracted)

    assert excinfo.value.expected == "201912345A"
    assert excinfo.value.extracted == "199901234Z"


def test_extract_without_registration_number_is_accepted() -> None:
    check_registration_number(make_company(), normalize_extraction({}))
