"""Roster reconciliation: pair extracted officer/shareholder rows with existing rows.

Roster rows carry no stable external key, so identity is inferred:

1. *Name pass*: for each extracted row, in extract order, claim the first
   unclaimed existing row with the same role (or share class) and the same
   normalized name.
2. *Contact pass*: for each extracted row still unpaired, claim an unclaimed
   existing row of the same role whose identity is confirmed another way:
   the extracted identification number equals the row's own or its linked
   contact's, or the extracted name is one the linked contact has confirmed.

Pairing is one-to-one and the earliest extracted row wins. Whatever is left
over is reported, never resolved here: extracted leftovers become new
candidates, existing leftovers need an explicit caller decision.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from regsync.domain.model import PERCENT_PLACES, RosterKind
from regsync.domain.reconciliation.compare import (
    FieldCategory,
    FieldDifference,
    FieldSpec,
    ValueKind,
    diff_fields,
)
from regsync.domain.text import normalize_identifier, normalize_name

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import date
    from uuid import UUID

    from regsync.domain.extraction import (
        ExtractedOfficer,
        ExtractedRosterRow,
        ExtractedShareholder,
    )
    from regsync.domain.model import Contact, Officer, RosterMember, Shareholder

log = logging.getLogger(__name__)

_R = FieldCategory.ROSTER

OFFICER_FIELDS: Final[tuple[FieldSpec, ...]] = (
    FieldSpec("designation", "Designation", ValueKind.TEXT, _R),
    FieldSpec("identification_type", "Identification Type", ValueKind.ENUM, _R),
    FieldSpec("identification_number", "Identification Number", ValueKind.CODE, _R),
    FieldSpec("nationality", "Nationality", ValueKind.TEXT, _R),
    FieldSpec("address", "Address", ValueKind.TEXT, _R),
    FieldSpec("appointment_date", "Appointment Date", ValueKind.DATE, _R),
)

SHAREHOLDER_FIELDS: Final[tuple[FieldSpec, ...]] = (
    FieldSpec("shareholder_type", "Shareholder Type", ValueKind.ENUM, _R, required=True),
    FieldSpec("identification_type", "Identification Type", ValueKind.ENUM, _R),
    FieldSpec("identification_number", "Identification Number", ValueKind.CODE, _R),
    FieldSpec("nationality", "Nationality", ValueKind.TEXT, _R),
    FieldSpec("place_of_origin", "Place of Origin", ValueKind.TEXT, _R),
    FieldSpec("address", "Address", ValueKind.TEXT, _R),
    FieldSpec("number_of_shares", "Number of Shares", ValueKind.INTEGER, _R, required=True),
    FieldSpec("percentage_held", "Percentage Held", ValueKind.DECIMAL, _R, PERCENT_PLACES),
    FieldSpec("currency", "Currency", ValueKind.CODE, _R),
)

ROSTER_FIELDS: Final[dict[RosterKind, tuple[FieldSpec, ...]]] = {
    RosterKind.OFFICER: OFFICER_FIELDS,
    RosterKind.SHAREHOLDER: SHAREHOLDER_FIELDS,
}


class MatchKind(StrEnum):
    """Which pass paired an extracted row with an existing row."""

    NAME = "name"
    CONTACT = "contact"


@dataclass(frozen=True, slots=True, kw_only=True)
class MatchedRow:
    existing: RosterMember
    extracted: ExtractedRosterRow
    match_kind: MatchKind
    changes: tuple[FieldDifference, ...] = ()

    @property
    def existing_id(self) -> UUID:
        return self.existing.id

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)


@dataclass(frozen=True, slots=True, kw_only=True)
class UnmatchedExisting:
    """An existing current row the extract did not list.

    ``reported_cessation_date`` is set when the extract lists the same person
    as ceased; it is a hint only and changes nothing by itself.
    """

    existing: RosterMember
    reported_cessation_date: date | None = None

    @property
    def existing_id(self) -> UUID:
        return self.existing.id


@dataclass(frozen=True, slots=True, kw_only=True)
class RosterReconciliation:
    kind: RosterKind
    matched: tuple[MatchedRow, ...] = ()
    new_candidates: tuple[ExtractedRosterRow, ...] = ()
    unmatched_existing: tuple[UnmatchedExisting, ...] = ()

    @property
    def unmatched_ids(self) -> frozenset[UUID]:
        return frozenset(row.existing_id for row in self.unmatched_existing)

    @property
    def new_candidate_indexes(self) -> tuple[int, ...]:
        return tuple(row.index for row in self.new_candidates)

    @property
    def changed(self) -> tuple[MatchedRow, ...]:
        return tuple(match for match in self.matched if match.has_changes)

    def unmatched(self, row_id: UUID) -> UnmatchedExisting | None:
        for row in self.unmatched_existing:
            if row.existing_id == row_id:
                return row
        return None

    @property
    def needs_review(self) -> bool:
        return bool(self.changed or self.new_candidates or self.unmatched_existing)


def reconcile_officers(
    existing: Sequence[Officer],
    extracted: Sequence[ExtractedOfficer],
    *,
    contacts: Mapping[UUID, Contact] | None = None,
    reported_ceased: Sequence[ExtractedOfficer] = (),
) -> RosterReconciliation:
    return reconcile_roster(
        RosterKind.OFFICER,
        existing,
        extracted,
        contacts=contacts,
        reported_ceased=reported_ceased,
    )


def reconcile_shareholders(
    existing: Sequence[Shareholder],
    extracted: Sequence[ExtractedShareholder],
    *,
    contacts: Mapping[UUID, Contact] | None = None,
) -> RosterReconciliation:
    return reconcile_roster(RosterKind.SHAREHOLDER, existing, extracted, contacts=contacts)


def reconcile_roster(
    kind: RosterKind,
    existing: Sequence[RosterMember],
    extracted: Sequence[ExtractedRosterRow],
    *,
    contacts: Mapping[UUID, Contact] | None = None,
    reported_ceased: Sequence[ExtractedRosterRow] = (),
) -> RosterReconciliation:
    contacts = contacts or {}
    specs = ROSTER_FIELDS[kind]
    claimed: dict[UUID, tuple[ExtractedRosterRow, MatchKind]] = {}
    paired_indexes: set[int] = set()

    for row in extracted:
        key = normalize_name(row.name)
        for candidate in existing:
            if candidate.id in claimed or candidate.roster_role != row.roster_role:
                continue
            if normalize_name(candidate.name) == key:
                claimed[candidate.id] = (row, MatchKind.NAME)
                paired_indexes.add(row.index)
                break

    for row in extracted:
        if row.index in paired_indexes:
            continue
        for candidate in existing:
            if candidate.id in claimed or candidate.roster_role != row.roster_role:
                continue
            if _confirmed_by_identity(candidate, row, contacts):
                claimed[candidate.id] = (row, MatchKind.CONTACT)
                paired_indexes.add(row.index)
                break

    matched: list[MatchedRow] = []
    unmatched: list[UnmatchedExisting] = []
    for candidate in existing:
        pairing = claimed.get(candidate.id)
        if pairing is None:
            unmatched.append(
                UnmatchedExisting(
                    existing=candidate,
                    reported_cessation_date=_reported_cessation(candidate, reported_ceased),
                )
            )
            continue
        row, match_kind = pairing
        matched.append(
            MatchedRow(
                existing=candidate,
                extracted=row,
                match_kind=match_kind,
                changes=diff_fields(candidate, row, specs),
            )
        )
    matched.sort(key=lambda match: match.extracted.index)
    new_candidates = tuple(row for row in extracted if row.index not in paired_indexes)

    reconciliation = RosterReconciliation(
        kind=kind,
        matched=tuple(matched),
        new_candidates=new_candidates,
        unmatched_existing=tuple(unmatched),
    )
    _check_partitions(reconciliation, existing, extracted)
    log.debug(
        "Reconciled %s roster: matched=%d changed=%d new=%d unmatched=%d",
        kind,
        len(reconciliation.matched),
        len(reconciliation.changed),
        len(reconciliation.new_candidates),
        len(reconciliation.unmatched_existing),
    )
    return reconciliation


def _confirmed_by_identity(
    candidate: RosterMember, row: ExtractedRosterRow, contacts: Mapping[UUID, Contact]
) -> bool:
    contact = contacts.get(candidate.contact_id) if candidate.contact_id else None

    if row.identification_number:
        extracted_number = normalize_identifier(row.identification_number)
        known_numbers = {
            normalize_identifier(number)
            for number in (
                candidate.identification_number,
                contact.identification_number if contact else None,
            )
            if number
        }
        if extracted_number in known_numbers:
            return True

    if contact is None:
        return False
    confirmed = {normalize_name(name) for name in (contact.name, *contact.confirmed_names)}
    return normalize_name(row.name) in confirmed


def _reported_cessation(
    candidate: RosterMember, reported_ceased: Sequence[ExtractedRosterRow]
) -> date | None:
    key = normalize_name(candidate.name)
    for row in reported_ceased:
        if row.roster_role != candidate.roster_role:
            continue
        same_number = bool(
            row.identification_number
            and candidate.identification_number
            and normalize_identifier(row.identification_number)
            == normalize_identifier(candidate.identification_number)
        )
        if same_number or normalize_name(row.name) == key:
            return getattr(row, "cessation_date", None)
    return None


def _check_partitions(
    reconciliation: RosterReconciliation,
    existing: Sequence[RosterMember],
    extracted: Sequence[ExtractedRosterRow],
) -> None:
    matched_existing = [match.existing_id for match in reconciliation.matched]
    unmatched_existing = [row.existing_id for row in reconciliation.unmatched_existing]
    if sorted(map(str, matched_existing + unmatched_existing)) != sorted(
        str(row.id) for row in existing
    ):
        raise AssertionError(f"{reconciliation.kind} reconciliation lost existing rows")

    matched_extracted = [match.extracted.index for match in reconciliation.matched]
    new_extracted = [row.index for row in reconciliation.new_candidates]
    if sorted(matched_extracted + new_extracted) != sorted(row.index for row in extracted):
        raise AssertionError(f"{reconciliation.kind} reconciliation lost extracted rows")
