from __future__ import annotations

from datetime import date

from regsync.domain.extraction import ExtractedOfficer, ExtractedShareholder, normalize_extraction
from regsync.domain.model import OfficerRole, RosterKind
from regsync.domain.reconciliation import (
    MatchKind,
    RosterReconciliation,
    reconcile_officers,
    reconcile_shareholders,
)
from tests.helpers.companies import (
    JOHN_TAN_ADDRESS,
    make_company,
    make_contact,
    make_officer,
    make_raw_extraction,
    make_shareholder,
)


def _officer(index: int, name: str, **values: object) -> ExtractedOfficer:
    role = values.pop("role", OfficerRole.DIRECTOR)
    return ExtractedOfficer(
        index=index,
        name=name,
        role=role,  # pyright: ignore[reportArgumentType]
        observed=frozenset(values),
        **values,  # pyright: ignore[reportArgumentType]
    )


def _assert_partitions(
    reconciliation: RosterReconciliation, existing_count: int, extracted_count: int
) -> None:
    assert len(reconciliation.matched) + len(reconciliation.unmatched_existing) == existing_count
    assert len(reconciliation.matched) + len(reconciliation.new_candidates) == extracted_count


def test_name_match_ignores_case_and_reports_only_changed_fields() -> None:
    company = make_company()
    existing = make_officer(company, "John Tan")
    raw = make_raw_extraction()
    officers = raw["officers"]
    assert isinstance(officers, list)
    officers[0]["address"] = "20 Orchard Road Singapore 238830"

    extracted = normalize_extraction(raw)
    reconciliation = reconcile_officers([existing], extracted.officers)

    assert reconciliation.kind is RosterKind.OFFICER
    assert reconciliation.new_candidates == ()
    assert reconciliation.unmatched_existing == ()
    (match,) = reconciliation.matched
    assert match.existing_id == existing.id
    assert match.match_kind is MatchKind.NAME
    assert [change.field for change in match.changes] == ["address"]
    assert match.changes[0].old_value == JOHN_TAN_ADDRESS
    assert match.changes[0].new_value == "20 Orchard Road Singapore 238830"


def test_identical_roster_needs_no_review() -> None:
    company = make_company()
    extracted = normalize_extraction(make_raw_extraction())

    officers = reconcile_officers([make_officer(company)], extracted.officers)
    shareholders = reconcile_shareholders([make_shareholder(company)], extracted.shareholders)

    assert not officers.needs_review
    assert not shareholders.needs_review
    assert len(officers.matched) == 1
    assert len(shareholders.matched) == 1


def test_missing_officer_is_left_unmatched() -> None:
    company = make_company()
    john = make_officer(company, "John Tan")
    jane = make_officer(company, "Jane Lim", identification_number="S7654321B")
    extracted = normalize_extraction(make_raw_extraction())

    reconciliation = reconcile_officers([john, jane], extracted.officers)

    assert reconciliation.unmatched_ids == frozenset({jane.id})
    assert reconciliation.unmatched(jane.id) is not None
    assert reconciliation.unmatched(john.id) is None
    assert reconciliation.needs_review
    _assert_partitions(reconciliation, 2, 1)


def test_role_scopes_matching() -> None:
    company = make_company()
    director = make_officer(company, "Jane Lim", identification_number=None)
    extracted = [_officer(0, "Jane Lim", role=OfficerRole.SECRETARY)]

    reconciliation = reconcile_officers([director], extracted)

    assert reconciliation.matched == ()
    assert reconciliation.new_candidate_indexes == (0,)
    assert reconciliation.unmatched_ids == frozenset({director.id})


def test_earliest_extracted_row_claims_a_duplicate_name() -> None:
    company = make_company()
    existing = make_officer(company, "John Tan")
    extracted = [_officer(0, "JOHN TAN"), _officer(1, "John  Tan")]

    reconciliation = reconcile_officers([existing], extracted)

    assert [match.extracted.index for match in reconciliation.matched] == [0]
    assert reconciliation.new_candidate_indexes == (1,)
    _assert_partitions(reconciliation, 1, 2)


def test_contact_confirmed_name_matches_in_second_pass() -> None:
    company = make_company()
    contact = make_contact("Lim Mei Ling", confirmed_names=["Mei Ling Lim-Wong"])
    existing = make_officer(
        company, "Lim Mei Ling", contact_id=contact.id, identification_number=None
    )
    extracted = [_officer(0, "MEI LING LIM WONG")]

    without_contacts = reconcile_officers([existing], extracted)
    with_contacts = reconcile_officers([existing], extracted, contacts={contact.id: contact})

    assert without_contacts.matched == ()
    (match,) = with_contacts.matched
    assert match.match_kind is MatchKind.CONTACT
    assert match.existing_id == existing.id


def test_identification_number_matches_renamed_row() -> None:
    company = make_company()
    existing = make_officer(company, "Tan Ah Kow", identification_number="S7654321B")
    extracted = [
        _officer(0, "Tan Ah Kow @ Tan Kow", identification_number="s7654321b"),
    ]

    reconciliation = reconcile_officers([existing], extracted)

    (match,) = reconciliation.matched
    assert match.match_kind is MatchKind.CONTACT
    assert match.changes == ()


def test_name_pass_runs_before_contact_pass() -> None:
    company = make_company()
    contact = make_contact("Jane Lim", confirmed_names=["Jane Lim-Tan"])
    jane = make_officer(company, "Jane Lim", contact_id=contact.id, identification_number=None)
    jane_tan = make_officer(company, "Jane Lim-Tan", identification_number=None)
    extracted = [_officer(0, "Jane Lim-Tan"), _officer(1, "Jane Lim")]

    reconciliation = reconcile_officers(
        [jane, jane_tan], extracted, contacts={contact.id: contact}
    )

    pairs = {match.existing_id: match.extracted.index for match in reconciliation.matched}
    assert pairs == {jane_tan.id: 0, jane.id: 1}
    assert all(match.match_kind is MatchKind.NAME for match in reconciliation.matched)


def test_reported_cessation_is_attached_to_unmatched_row() -> None:
    company = make_company()
    jane = make_officer(company, "Jane Lim", identification_number=None)
    raw = make_raw_extraction()
    officers = raw["officers"]
    assert isinstance(officers, list)
    officers.append({"name": "JANE LIM", "role": "Director", "cessationDate": "2025-03-31"})

    extracted = normalize_extraction(raw)
    reconciliation = reconcile_officers(
        [jane],
        extracted.officers,
        reported_ceased=extracted.reported_ceased_officers,
    )

    unmatched = reconciliation.unmatched(jane.id)
    assert unmatched is not None
    assert unmatched.reported_cessation_date == date(2025, 3, 31)


def test_shareholders_are_scoped_by_share_class() -> None:
    company = make_company()
    ordinary = make_shareholder(company, "John Tan")
    extracted = [
        ExtractedShareholder(
            index=0,
            name="John Tan",
            share_class="PREFERENCE",
            number_of_shares=10,
            observed=frozenset({"number_of_shares"}),
        )
    ]

    reconciliation = reconcile_shareholders([ordinary], extracted)

    assert reconciliation.kind is RosterKind.SHAREHOLDER
    assert reconciliation.matched == ()
    assert reconciliation.new_candidate_indexes == (0,)
    assert reconciliation.unmatched_ids == frozenset({ordinary.id})


def test_shareholder_sub_diff_ignores_blank_required_values() -> None:
    company = make_company()
    existing = make_shareholder(company, "John Tan")
    extracted = [
        ExtractedShareholder(
            index=0,
            name="JOHN TAN",
            number_of_shares=None,
            percentage_held=None,
            observed=frozenset({"number_of_shares", "percentage_held"}),
        )
    ]

    (match,) = reconcile_shareholders([existing], extracted).matched

    assert [change.field for change in match.changes] == ["percentage_held"]


def test_partitions_hold_for_empty_inputs() -> None:
    company = make_company()
    rows = [make_officer(company, "A"), make_officer(company, "B")]

    only_existing = reconcile_officers(rows, [])
    only_extracted = reconcile_officers([], [_officer(0, "A")])

    _assert_partitions(only_existing, 2, 0)
    _assert_partitions(only_extracted, 0, 1)
    assert len(only_existing.unmatched_existing) == 2
    assert only_extracted.new_candidate_indexes == (0,)


def test_partitions_hold_for_duplicate_names_and_mixed_roles() -> None:
    company = make_company()
    first = make_officer(company, "Tan Wei Ming")
    second = make_officer(company, "TAN WEI MING", identification_number=None)
    secretary = make_officer(
        company, "Tan Wei Ming", role=OfficerRole.SECRETARY, identification_number=None
    )
    renamed = make_officer(company, "Lim Mei Ling", identification_number="S7654321B")
    existing = [first, second, secretary, renamed]
    extracted = [
        _officer(0, "tan wei ming"),
        _officer(1, "Tan  Wei  Ming"),
        _officer(2, "Tan Wei Ming"),
        _officer(3, "TAN WEI MING", role=OfficerRole.SECRETARY),
        _officer(4, "Mei Ling Lim", identification_number="S7654321B"),
        _officer(5, "Tan Wei Ming", role=OfficerRole.CEO),
    ]

    reconciliation = reconcile_officers(existing, extracted)

    _assert_partitions(reconciliation, 4, 6)
    pairs = {match.existing_id: match.extracted.index for match in reconciliation.matched}
    assert pairs == {first.id: 0, second.id: 1, secretary.id: 3, renamed.id: 4}
    assert reconciliation.new_candidate_indexes == (2, 5)
    assert reconciliation.unmatched_existing == ()
    claimed_indexes = [match.extracted.index for match in reconciliation.matched]
    assert sorted(claimed_indexes + list(reconciliation.new_candidate_indexes)) == list(range(6))
    assert reconcile_officers(existing, extracted) == reconciliation


def test_shared_identification_number_claims_one_row_only() -> None:
    company = make_company()
    existing = [
        make_officer(company, "Tan Ah Kow"),
        make_officer(company, "Tan Kow"),
    ]
    extracted = [_officer(0, "Ah Kow Tan", identification_number="S1234567A")]

    reconciliation = reconcile_officers(existing, extracted)

    (match,) = reconciliation.matched
    assert match.existing_id == existing[0].id
    assert match.match_kind is MatchKind.CONTACT
    assert reconciliation.unmatched_ids == frozenset({existing[1].id})
    _assert_partitions(reconciliation, 2, 1)
