"""Selective apply: write the caller-approved subset of a preview in one transaction.

Order of work inside the unit of work:

1. lock and reload the company, recheck the registration number
2. run the concurrency guard (a stale preview warns, it does not block)
3. write approved scalar changes that still differ
4. write matched roster sub-diffs that still differ, and remember an extracted
   spelling on the contact that vouched for a contact match
5. insert approved new roster rows unless an equivalent current row exists,
   linking each to a contact found by identification number or created
6. cease exactly the rows the caller marked ``CEASE``
7. recalculate shareholder percentages when holdings changed
8. bump the company version when anything changed, then audit and commit

Every step compares against the values as they are now, not as they were at
preview time, so replaying an already-committed apply changes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from regsync.domain.errors import (
    MissingRosterActionError,
    NotFoundError,
    RegsyncError,
    StorageError,
    UnknownApprovalError,
    ValidationError,
)
from regsync.domain.extraction import ExtractedOfficer, ExtractedShareholder
from regsync.domain.model import (
    PERCENT_PLACES,
    AuditEntry,
    Contact,
    Officer,
    RosterAction,
    RosterKind,
    Shareholder,
    ShareholderType,
    quantum,
    utc_now,
)
from regsync.domain.reconciliation.concurrency import check_concurrency
from regsync.domain.reconciliation.diff import (
    COMPANY_FIELDS_BY_NAME,
    check_registration_number,
    field_still_differs,
)
from regsync.domain.reconciliation.roster import ROSTER_FIELDS, MatchKind
from regsync.domain.text import normalize_name

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Mapping

    from regsync.domain.extraction import ExtractedRosterRow
    from regsync.domain.model import AsOf, Company, RosterMember
    from regsync.domain.ports import (
        CompanyUnitOfWork,
        ContactRepository,
        RosterRepository,
        ShareholderRepository,
    )
    from regsync.domain.reconciliation.concurrency import ConcurrencyWarning
    from regsync.domain.reconciliation.preview import CompanyPreview
    from regsync.domain.reconciliation.roster import MatchedRow, RosterReconciliation

log = logging.getLogger(__name__)

_SOURCE_LABEL = "registry extract"


@dataclass(frozen=True, slots=True, kw_only=True)
class ApplyRequest:
    """The reviewer's decisions on a preview.

    ``approved_fields`` and the ``approved_new_*`` index sets default to
    "everything proposed". Every unmatched existing roster row must have an
    entry in the matching ``*_actions`` map.
    """

    as_of: AsOf | None
    approved_fields: Collection[str] | None = None
    officer_actions: Mapping[UUID, RosterAction] = field(default_factory=dict[UUID, RosterAction])
    shareholder_actions: Mapping[UUID, RosterAction] = field(
        default_factory=dict[UUID, RosterAction]
    )
    approved_new_officers: Collection[int] | None = None
    approved_new_shareholders: Collection[int] | None = None
    cessation_date: date | None = None
    actor: str | None = None

    def actions_for(self, kind: RosterKind) -> Mapping[UUID, RosterAction]:
        return self.officer_actions if kind is RosterKind.OFFICER else self.shareholder_actions

    def approved_new_for(self, kind: RosterKind) -> Collection[int] | None:
        if kind is RosterKind.OFFICER:
            return self.approved_new_officers
        return self.approved_new_shareholders


@dataclass(slots=True)
class RosterChanges:
    added: int = 0
    updated: int = 0
    ceased: int = 0
    kept: int = 0
    ignored: int = 0
    names_confirmed: int = 0
    recalculated: int = 0
    updated_fields: set[str] = field(default_factory=set[str])

    @property
    def mutations(self) -> int:
        return self.added + self.updated + self.ceased + self.names_confirmed

    @property
    def holdings_changed(self) -> bool:
        """Rows joined or left the roster, or a share count moved."""
        return bool(self.added or self.ceased or "number_of_shares" in self.updated_fields)


@dataclass(frozen=True, slots=True, kw_only=True)
class ApplyResult:
    company_id: UUID
    updated_fields: tuple[str, ...]
    officers: RosterChanges
    shareholders: RosterChanges
    version: int
    concurrency_warning: ConcurrencyWarning | None = None

    @property
    def mutations(self) -> int:
        return len(self.updated_fields) + self.officers.mutations + self.shareholders.mutations


def apply_company_update(
    preview: CompanyPreview,
    request: ApplyRequest,
    *,
    unit_of_work_factory: Callable[[], CompanyUnitOfWork],
    clock: Callable[[], datetime] = utc_now,
) -> ApplyResult:
    """Apply the approved parts of ``preview`` atomically.

    Raises ``ValidationError`` before touching storage when the request is
    inconsistent with the preview, ``NotFoundError`` when the company or a
    referenced row is gone, and ``StorageError`` when the transaction fails.
    Nothing is written in any of these cases.
    """

    as_of = validate_apply_request(preview, request)
    try:
        with unit_of_work_factory() as uow:
            repositories = uow.repositories
            company = repositories.companies.get_for_update(preview.company_id)
            if company is None:
                raise NotFoundError(f"Company {preview.company_id} no longer exists")
            check_registration_number(company, preview.extracted)

            warning = check_concurrency(as_of, company.as_of)
            now = clock()
            today = now.date()

            field_changes = _apply_fields(company, preview, request)
            officer_changes = _apply_roster(
                repositories.officers,
                repositories.contacts,
                company,
                preview.officers,
                request,
                today=today,
            )
            shareholder_changes = _apply_roster(
                repositories.shareholders,
                repositories.contacts,
                company,
                preview.shareholders,
                request,
                today=today,
            )
            if shareholder_changes.holdings_changed:
                shareholder_changes.recalculated = _recalculate_percentages(
                    repositories.shareholders, company.id
                )

            mutations = (
                len(field_changes) + officer_changes.mutations + shareholder_changes.mutations
            )
            if mutations:
                company.touch(now)
                for entry in _audit_entries(
                    company,
                    field_changes,
                    officer_changes,
                    shareholder_changes,
                    actor=request.actor,
                    at=now,
                ):
                    repositories.audit.record(entry)
            company_id = company.id
            version = company.version
            uow.commit()
    except RegsyncError:
        raise
    except Exception as exc:
        log.exception("Apply for company %s failed; rolled back", preview.company_id)
        raise StorageError(f"Could not apply changes to company {preview.company_id}") from exc

    result = ApplyResult(
        company_id=company_id,
        updated_fields=tuple(change.field for change in field_changes),
        officers=officer_changes,
        shareholders=shareholder_changes,
        version=version,
        concurrency_warning=warning,
    )
    log.info(
        "Applied %d change(s) to company %s by %s (version %d): fields=%s officers=%s "
        "shareholders=%s",
        result.mutations,
        company_id,
        request.actor or "unknown actor",
        result.version,
        list(result.updated_fields),
        officer_changes,
        shareholder_changes,
    )
    return result


def validate_apply_request(preview: CompanyPreview, request: ApplyRequest) -> AsOf:
    """Reject requests that can never succeed. Returns the request's ``as_of``."""

    if request.as_of is None:
        raise ValidationError("An apply request must carry the as-of version of its preview")

    if request.approved_fields is not None:
        unknown_fields = set(request.approved_fields) - set(preview.difference_fields)
        if unknown_fields:
            names = ", ".join(sorted(unknown_fields))
            raise UnknownApprovalError(f"Approved field(s) not proposed by the preview: {names}")

    for reconciliation in (preview.officers, preview.shareholders):
        _validate_roster_decisions(reconciliation, request)
    return request.as_of


def _validate_roster_decisions(
    reconciliation: RosterReconciliation, request: ApplyRequest
) -> None:
    kind = reconciliation.kind
    actions = request.actions_for(kind)
    for row_id, action in actions.items():
        if not isinstance(action, RosterAction):
            raise ValidationError(f"Invalid {kind} action for {row_id}: {action!r}")

    unmatched = reconciliation.unmatched_ids
    unknown_ids = set(actions) - unmatched
    if unknown_ids:
        ids = ", ".join(sorted(str(row_id) for row_id in unknown_ids))
        raise UnknownApprovalError(f"{kind} action(s) for rows that are not unmatched: {ids}")
    missing = unmatched - set(actions)
    if missing:
        raise MissingRosterActionError(kind, sorted(missing, key=str))

    approved_new = request.approved_new_for(kind)
    if approved_new is not None:
        unknown_indexes = set(approved_new) - set(reconciliation.new_candidate_indexes)
        if unknown_indexes:
            raise UnknownApprovalError(
                f"Approved new {kind}(s) not proposed by the preview: "
                f"{', '.join(str(index) for index in sorted(unknown_indexes))}"
            )


@dataclass(frozen=True, slots=True)
class _FieldChange:
    field: str
    label: str
    old_value: object
    new_value: object


def _apply_fields(
    company: Company, preview: CompanyPreview, request: ApplyRequest
) -> list[_FieldChange]:
    approved = (
        set(preview.difference_fields)
        if request.approved_fields is None
        else set(request.approved_fields)
    )
    changes: list[_FieldChange] = []
    for difference in preview.differences:
        if difference.field not in approved:
            continue
        new_value = None if difference.new_value == "" else difference.new_value
        if not field_still_differs(company, difference.field, new_value):
            continue
        old_value = getattr(company, difference.field)
        setattr(company, difference.field, new_value)
        changes.append(
            _FieldChange(
                field=difference.field,
                label=COMPANY_FIELDS_BY_NAME[difference.field].label,
                old_value=old_value,
                new_value=new_value,
            )
        )
    return changes


def _apply_roster[TMember: (Officer, Shareholder)](
    repository: RosterRepository[TMember],
    contacts: ContactRepository,
    company: Company,
    reconciliation: RosterReconciliation,
    request: ApplyRequest,
    *,
    today: date,
) -> RosterChanges:
    kind = reconciliation.kind
    specs = {spec.name: spec for spec in ROSTER_FIELDS[kind]}
    changes = RosterChanges()

    for match in reconciliation.matched:
        if match.match_kind is MatchKind.CONTACT and _confirm_contact_name(contacts, match):
            changes.names_confirmed += 1
        if not match.has_changes:
            continue
        row = _load_row(repository, kind, match.existing_id)
        touched = False
        for change in match.changes:
            spec = specs[change.field]
            new_value = None if change.new_value == "" else change.new_value
            if spec.equal(getattr(row, change.field), new_value):
                continue
            setattr(row, change.field, new_value)
            changes.updated_fields.add(change.field)
            touched = True
        if touched:
            changes.updated += 1

    approved_new = request.approved_new_for(kind)
    current = repository.list_current(company.id)
    for candidate in reconciliation.new_candidates:
        if approved_new is not None and candidate.index not in approved_new:
            continue
        if _has_equivalent(current, candidate):
            log.debug("Skipping %s %r: an equivalent current row exists", kind, candidate.name)
            continue
        row = _new_row(company, candidate)
        row.contact_id = _find_or_create_contact(contacts, candidate).id
        repository.add(row)  # pyright: ignore[reportArgumentType]
        current.append(row)  # pyright: ignore[reportArgumentType]
        changes.added += 1

    actions = request.actions_for(kind)
    for unmatched in reconciliation.unmatched_existing:
        action = actions[unmatched.existing_id]
        if action is RosterAction.KEEP:
            changes.kept += 1
            continue
        if action is RosterAction.IGNORE:
            changes.ignored += 1
            continue
        row = _load_row(repository, kind, unmatched.existing_id)
        on = request.cessation_date or unmatched.reported_cessation_date or today
        if row.cease(on):
            changes.ceased += 1
    return changes


def _load_row[TMember: (Officer, Shareholder)](
    repository: RosterRepository[TMember], kind: RosterKind, row_id: UUID
) -> TMember:
    row = repository.get(row_id)
    if row is None:
        raise NotFoundError(f"{kind} {row_id} no longer exists")
    return row


def _remember_name(contact: Contact, name: str) -> bool:
    known = {normalize_name(spelling) for spelling in (contact.name, *contact.confirmed_names)}
    if normalize_name(name) in known:
        return False
    contact.confirm_name(name)
    return True


def _confirm_contact_name(contacts: ContactRepository, match: MatchedRow) -> bool:
    """Record the extracted spelling on the contact a contact match went through."""

    contact_id = match.existing.contact_id
    contact = contacts.get(contact_id) if contact_id is not None else None
    if contact is None:
        return False
    if not _remember_name(contact, match.extracted.name):
        return False
    log.info("Confirmed name %r for contact %s", match.extracted.name, contact.id)
    return True


def _find_or_create_contact(contacts: ContactRepository, candidate: ExtractedRosterRow) -> Contact:
    """The contact registered under the candidate's identification number, else a new one."""

    number = candidate.identification_number or None
    if number is not None:
        contact = contacts.find_by_identification(number)
        if contact is not None:
            _remember_name(contact, candidate.name)
            return contact
    contact = Contact(name=candidate.name, identification_number=number)
    contacts.add(contact)
    log.debug("Created contact %s for %r", contact.id, candidate.name)
    return contact


def _recalculate_percentages(repository: ShareholderRepository, company_id: UUID) -> int:
    """Set each current shareholder's percentage from its share of the total count.

    Rows already holding the computed value are left alone. Returns the number
    of rows rewritten; zero when no shares are recorded.
    """

    current = repository.list_current(company_id)
    total = sum(row.number_of_shares for row in current)
    if total <= 0:
        return 0
    places = quantum(PERCENT_PLACES)
    recalculated = 0
    for row in current:
        percentage = (Decimal(100) * row.number_of_shares / total).quantize(
            places, rounding=ROUND_HALF_UP
        )
        if row.percentage_held is not None and row.percentage_held == percentage:
            continue
        row.percentage_held = percentage
        recalculated += 1
    return recalculated


def _has_equivalent(current: Collection[RosterMember], candidate: ExtractedRosterRow) -> bool:
    key = normalize_name(candidate.name)
    return any(
        row.is_current
        and row.roster_role == candidate.roster_role
        and normalize_name(row.name) == key
        for row in current
    )


def _new_row(company: Company, candidate: ExtractedRosterRow) -> RosterMember:
    if isinstance(candidate, ExtractedOfficer):
        return Officer(
            company_id=company.id,
            name=candidate.name,
            role=candidate.role,
            designation=candidate.designation or None,
            identification_type=candidate.identification_type,
            identification_number=candidate.identification_number,
            nationality=candidate.nationality or None,
            address=candidate.address or None,
            appointment_date=candidate.appointment_date,
        )
    if isinstance(candidate, ExtractedShareholder):
        return Shareholder(
            company_id=company.id,
            name=candidate.name,
            share_class=candidate.share_class,
            shareholder_type=candidate.shareholder_type or ShareholderType.INDIVIDUAL,
            identification_type=candidate.identification_type,
            identification_number=candidate.identification_number,
            nationality=candidate.nationality or None,
            place_of_origin=candidate.place_of_origin or None,
            address=candidate.address or None,
            number_of_shares=candidate.number_of_shares or 0,
            percentage_held=candidate.percentage_held,
            currency=candidate.currency,
        )
    raise TypeError(f"Unsupported roster row: {type(candidate).__name__}")


def _audit_entries(
    company: Company,
    field_changes: list[_FieldChange],
    officer_changes: RosterChanges,
    shareholder_changes: RosterChanges,
    *,
    actor: str | None,
    at: datetime,
) -> list[AuditEntry]:
    entries: list[AuditEntry] = []
    if field_changes:
        entries.append(
            AuditEntry(
                company_id=company.id,
                subject="company",
                summary=(
                    f"Updated company from {_SOURCE_LABEL}: "
                    f"{', '.join(change.label for change in field_changes)}"
                ),
                actor=actor,
                details={
                    "fields": {
                        change.field: {
                            "old": _jsonable(change.old_value),
                            "new": _jsonable(change.new_value),
                        }
                        for change in field_changes
                    },
                    "version": company.version,
                },
                created_at=at,
            )
        )
    for subject, changes in (("officers", officer_changes), ("shareholders", shareholder_changes)):
        if not changes.mutations:
            continue
        entries.append(
            AuditEntry(
                company_id=company.id,
                subject=subject,
                summary=(
                    f"Updated {subject} from {_SOURCE_LABEL}: {changes.added} added, "
                    f"{changes.updated} updated, {changes.ceased} ceased"
                ),
                actor=actor,
                details={
                    "added": changes.added,
                    "updated": changes.updated,
                    "ceased": changes.ceased,
                    "kept": changes.kept,
                    "ignored": changes.ignored,
                    "names_confirmed": changes.names_confirmed,
                    "percentages_recalculated": changes.recalculated,
                    "fields": sorted(changes.updated_fields),
                    "version": company.version,
                },
                created_at=at,
            )
        )
    return entries


def _jsonable(value: object) -> object:
    if value is None or isinstance(value, bool | int | str):
        return value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal | UUID):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
