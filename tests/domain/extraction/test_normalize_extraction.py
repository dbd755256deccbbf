from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from regsync.domain.errors import ExtractionShapeError, ValidationError
from regsync.domain.extraction import (
    format_address,
    normalize_extraction,
    parse_currency,
    parse_date,
    parse_decimal,
    parse_oracle_content,
    parse_percentage,
)
from regsync.domain.model import (
    CompanyStatus,
    EntityType,
    IdentificationType,
    OfficerRole,
    ShareholderType,
)
from tests.helpers.companies import REGISTERED_ADDRESS, make_raw_extraction


@pytest.mark.parametrize("raw", [None, [], "not an object", 42])
def test_non_object_payload_is_rejected(raw: object) -> None:
    with pytest.raises(ExtractionShapeError):
        normalize_extraction(raw)


def test_shape_error_is_a_validation_error() -> None:
    assert issubclass(ExtractionShapeError, ValidationError)


def test_normalizes_full_payload() -> None:
    extracted = normalize_extraction(make_raw_extraction())

    assert extracted.registration_number == "201912345A"
    assert extracted.name == "Acme Trading Pte. Ltd."
    assert extracted.entity_type is EntityType.PRIVATE_LIMITED
    assert extracted.status is CompanyStatus.LIVE
    assert extracted.incorporation_date == date(2019, 4, 1)
    assert extracted.primary_activity_code == "46900"
    assert extracted.registered_address == REGISTERED_ADDRESS
    assert extracted.paid_up_capital_amount == Decimal("100000.00")
    assert extracted.issued_capital_amount == Decimal("100000.00")
    assert extracted.issued_capital_currency == "SGD"
    assert extracted.financial_year_end_day == 31
    assert extracted.financial_year_end_month == 12
    assert extracted.warnings == ()


def test_normalization_is_deterministic() -> None:
    raw = make_raw_extraction()

    assert normalize_extraction(raw) == normalize_extraction(raw)


def test_empty_object_observes_nothing() -> None:
    extracted = normalize_extraction({})

    assert extracted.observed == frozenset()
    assert extracted.officers == ()
    assert extracted.shareholders == ()
    assert extracted.warnings == ()


def test_missing_and_null_fields_are_absent() -> None:
    raw = make_raw_extraction()
    entity = raw["entityDetails"]
    assert isinstance(entity, dict)
    entity["formerName"] = None
    entity.pop("incorporationDate")

    extracted = normalize_extraction(raw)

    assert not extracted.has("former_name")
    assert not extracted.has("incorporation_date")
    assert not extracted.has("last_agm_date")
    assert extracted.has("name")


def test_blank_optional_text_is_observed_as_blank() -> None:
    raw = make_raw_extraction()
    entity = raw["entityDetails"]
    assert isinstance(entity, dict)
    entity["formerName"] = "   "

    extracted = normalize_extraction(raw)

    assert extracted.has("former_name")
    assert extracted.former_name == ""


def test_blank_required_field_is_dropped_with_warning() -> None:
    raw = make_raw_extraction()
    entity = raw["entityDetails"]
    assert isinstance(entity, dict)
    entity["name"] = ""

    extracted = normalize_extraction(raw)

    assert not extracted.has("name")
    assert [warning.path for warning in extracted.warnings] == ["entityDetails.name"]


def test_unparseable_value_is_absent_and_reported() -> None:
    raw = make_raw_extraction()
    raw["paidUpCapital"] = {"amount": "not disclosed", "currency": "SGD"}

    extracted = normalize_extraction(raw)

    assert not extracted.has("paid_up_capital_amount")
    assert extracted.has("paid_up_capital_currency")
    assert len(extracted.warnings) == 1
    warning = extracted.warnings[0]
    assert warning.path == "paidUpCapital.amount"
    assert warning.value == "not disclosed"


def test_out_of_range_financial_year_end_is_rejected() -> None:
    raw = make_raw_extraction()
    raw["financialYear"] = {"endDay": 31, "endMonth": 13}

    extracted = normalize_extraction(raw)

    assert extracted.financial_year_end_day == 31
    assert not extracted.has("financial_year_end_month")
    assert extracted.warnings[0].path == "financialYear.endMonth"


def test_oversized_amounts_are_absent_and_reported() -> None:
    raw = {
        "paidUpCapital": {"amount": 1e30, "currency": "SGD"},
        "issuedCapital": {"amount": "99,999,999,999,999,999.00"},
        "shareholders": [
            {"name": "Tan Ah Kow", "percentageHeld": 1e27, "numberOfShares": 10**12},
            {"name": "Lee Mei Ling", "percentageHeld": "2500"},
        ],
    }

    extracted = normalize_extraction(raw)

    assert not extracted.has("paid_up_capital_amount")
    assert not extracted.has("issued_capital_amount")
    tan, lee = extracted.shareholders
    assert not tan.has("percentage_held")
    assert not tan.has("number_of_shares")
    assert not lee.has("percentage_held")
    assert {warning.path for warning in extracted.warnings} == {
        "paidUpCapital.amount",
        "issuedCapital.amount",
        "shareholders[0].percentageHeld",
        "shareholders[0].numberOfShares",
        "shareholders[1].percentageHeld",
    }


def test_oversized_share_row_total_leaves_capital_absent() -> None:
    row = {"numberOfShares": 2_000_000_000, "parValue": "9,000,000,000", "isPaidUp": True}
    raw = {"shareCapital": [row]}

    extracted = normalize_extraction(raw)

    assert not extracted.has("issued_capital_amount")
    assert not extracted.has("paid_up_capital_amount")
    assert [warning.path for warning in extracted.warnings] == ["shareCapital", "shareCapital"]


def test_snake_case_keys_are_accepted() -> None:
    raw = {
        "entity_details": {"uen": "201912345a", "name": "Acme", "former_name": "Acme Old"},
        "paid_up_capital": {"amount": "5,000", "currency": "USD"},
    }

    extracted = normalize_extraction(raw)

    assert extracted.registration_number == "201912345A"
    assert extracted.former_name == "Acme Old"
    assert extracted.paid_up_capital_amount == Decimal("5000.00")
    assert extracted.paid_up_capital_currency == "USD"


def test_unknown_entity_labels_fall_back_to_other() -> None:
    raw = {"entityDetails": {"entityType": "Unusual Form", "status": "Something Else"}}

    extracted = normalize_extraction(raw)

    assert extracted.entity_type is EntityType.OTHER
    assert extracted.status is CompanyStatus.OTHER


def test_registered_address_variants() -> None:
    text = normalize_extraction({"registeredAddress": "  1 Raffles Place   Singapore 048616 "})
    full = normalize_extraction(
        {"registeredAddress": {"fullAddress": "1 Raffles Place Singapore 048616", "block": "9"}}
    )

    assert text.registered_address == "1 Raffles Place Singapore 048616"
    assert full.registered_address == "1 Raffles Place Singapore 048616"


@pytest.mark.parametrize(
    ("parts", "expected"),
    [
        (
            {"block": "10", "street_name": "Anson Road", "level": "#09", "unit": "355",
             "building_name": "International Plaza", "postal_code": "079903"},
            "10 Anson Road #09-355 International Plaza Singapore 079903",
        ),
        (
            {"street_name": "Anson Road", "unit": "355", "postal_code": "079903"},
            "Anson Road #355 Singapore 079903",
        ),
        ({"street_name": "Anson Road", "postal_code": None}, "Anson Road"),
    ],
)
def test_format_address(parts: dict[str, str | None], expected: str) -> None:
    assert format_address(**parts) == expected  # pyright: ignore[reportArgumentType]


def test_capital_derived_from_share_rows() -> None:
    raw = {
        "shareCapital": [
            {"shareClass": "Ordinary", "currency": "SGD", "totalValue": "60,000", "isPaidUp": True},
            {"shareClass": "Preference", "numberOfShares": 400, "parValue": 100,
             "isPaidUp": False},
            {"shareClass": "Ordinary", "totalValue": 5000, "isTreasury": True, "isPaidUp": True},
        ]
    }

    extracted = normalize_extraction(raw)

    assert extracted.issued_capital_amount == Decimal("100000.00")
    assert extracted.paid_up_capital_amount == Decimal("60000.00")
    assert extracted.paid_up_capital_currency == "SGD"
    assert extracted.issued_capital_currency == "SGD"


def test_stated_capital_wins_over_share_rows() -> None:
    raw = {
        "paidUpCapital": {"amount": 1, "currency": "SGD"},
        "issuedCapital": {"amount": 2, "currency": "SGD"},
        "shareCapital": [{"totalValue": 999, "isPaidUp": True}],
    }

    extracted = normalize_extraction(raw)

    assert extracted.paid_up_capital_amount == Decimal("1.00")
    assert extracted.issued_capital_amount == Decimal("2.00")


def test_share_rows_without_values_leave_capital_absent() -> None:
    extracted = normalize_extraction({"shareCapital": [{"shareClass": "Ordinary"}]})

    assert not extracted.has("paid_up_capital_amount")
    assert not extracted.has("issued_capital_amount")
    assert extracted.warnings[0].path == "shareCapital[0]"


def test_officer_rows() -> None:
    raw = {
        "officers": [
            {"name": "Jane  Lim", "role": "Company Secretary", "appointmentDate": "01/02/2020"},
            {"role": "Director"},
            {"name": "Ali Bin Ahmad", "role": "Janitor", "identificationType": "Work Pass"},
            {"name": "Old Director", "role": "Director", "cessationDate": "2023-06-30"},
        ]
    }

    extracted = normalize_extraction(raw)

    assert [officer.name for officer in extracted.officers] == ["Jane Lim", "Ali Bin Ahmad"]
    jane, ali = extracted.officers
    assert jane.index == 0
    assert jane.role is OfficerRole.SECRETARY
    assert jane.appointment_date == date(2020, 2, 1)
    assert ali.index == 2
    assert ali.role is OfficerRole.DIRECTOR
    assert ali.identification_type is IdentificationType.OTHER
    assert not ali.has("nationality")

    assert [officer.name for officer in extracted.reported_ceased_officers] == ["Old Director"]
    assert extracted.reported_ceased_officers[0].cessation_date == date(2023, 6, 30)

    paths = {warning.path for warning in extracted.warnings}
    assert paths == {"officers[1].name", "officers[2].role"}


def test_shareholder_rows() -> None:
    raw = {
        "shareholders": [
            {"name": "Holdco Pte Ltd", "type": "Company", "numberOfShares": "1,000",
             "percentageHeld": "33.335%", "currency": "Singapore Dollars"},
            {"name": "Mary Ong", "shareClass": "preference", "numberOfShares": "12.5"},
        ]
    }

    extracted = normalize_extraction(raw)

    holdco, mary = extracted.shareholders
    assert holdco.share_class == "ORDINARY"
    assert holdco.shareholder_type is ShareholderType.CORPORATE
    assert holdco.number_of_shares == 1000
    assert holdco.percentage_held == Decimal("33.34")
    assert holdco.currency == "SGD"
    assert mary.share_class == "PREFERENCE"
    assert not mary.has("number_of_shares")
    assert extracted.warnings[0].path == "shareholders[1].numberOfShares"


def test_roster_that_is_not_a_list_is_reported() -> None:
    extracted = normalize_extraction({"officers": "John Tan, Director"})

    assert extracted.officers == ()
    assert extracted.warnings[0].path == "officers"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2020-01-15", date(2020, 1, 15)),
        ("2020-01-15T08:00:00Z", date(2020, 1, 15)),
        ("15/01/2020", date(2020, 1, 15)),
        ("15-01-2020", date(2020, 1, 15)),
        ("15 Jan 2020", date(2020, 1, 15)),
        ("15 January 2020", date(2020, 1, 15)),
        ("  ", None),
        (None, None),
    ],
)
def test_parse_date(value: object, expected: date | None) -> None:
    assert parse_date(value) == expected


@pytest.mark.parametrize("value", ["31/02/2020", "yesterday", 20200115])
def test_parse_date_rejects(value: object) -> None:
    with pytest.raises(ValueError):  # noqa: PT011
        parse_date(value)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (100000, Decimal("100000.00")),
        ("100,000.00", Decimal("100000.00")),
        ("SGD 1,234.565", Decimal("1234.57")),
        (Decimal("0.1"), Decimal("0.10")),
        ("", None),
    ],
)
def test_parse_decimal(value: object, expected: Decimal | None) -> None:
    assert parse_decimal(value) == expected


@pytest.mark.parametrize(
    "value", [True, "n/a", "NaN", float("inf"), 1e30, "10,000,000,000,000,000", -(10**16)]
)
def test_parse_decimal_rejects(value: object) -> None:
    with pytest.raises(ValueError):  # noqa: PT011
        parse_decimal(value)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("0", Decimal("0.00")), ("33.335%", Decimal("33.34")), (100, Decimal("100.00"))],
)
def test_parse_percentage(value: object, expected: Decimal) -> None:
    assert parse_percentage(value) == expected


@pytest.mark.parametrize("value", ["2500", "-1", "100.01", 1e27])
def test_parse_percentage_rejects(value: object) -> None:
    with pytest.raises(ValueError):  # noqa: PT011
        parse_percentage(value)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("sgd", "SGD"),
        ("Singapore Dollar", "SGD"),
        ("S$", "SGD"),
        ("US Dollars", "USD"),
        ("Ringgit MYR", "MYR"),
        ("", None),
    ],
)
def test_parse_currency(value: str, expected: str | None) -> None:
    assert parse_currency(value) == expected


def test_parse_oracle_content_handles_fences_and_prose() -> None:
    fenced = '```json\n{"entityDetails": {"uen": "201912345A"}}\n```'
    prose = 'Here is the data: {"homeCurrency": "SGD"} Let me know if you need more.'

    assert parse_oracle_content(fenced) == {"entityDetails": {"uen": "201912345A"}}
    assert parse_oracle_content(prose) == {"homeCurrency": "SGD"}


def test_parse_oracle_content_rejects_invalid_json() -> None:
    with pytest.raises(ExtractionShapeError):
        parse_oracle_content("I could not read the document.")
