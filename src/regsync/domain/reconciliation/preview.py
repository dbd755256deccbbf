"""Preview: everything a reviewer needs to decide what to apply. Read-only."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from regsync.domain.reconciliation.diff import check_registration_number, diff_company
from regsync.domain.reconciliation.roster import reconcile_officers, reconcile_shareholders

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from uuid import UUID

    from regsync.domain.extraction import ExtractedCompanyData, NormalizationWarning
    from regsync.domain.model import AsOf, Company, Contact, Officer, Shareholder
    from regsync.domain.ports import TokenUsage
    from regsync.domain.reconciliation.compare import FieldDifference
    from regsync.domain.reconciliation.roster import RosterReconciliation

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class CompanyPreview:
    """Proposed changes for one company, pinned to the record version they were computed on."""

    company_id: UUID
    registration_number: str
    as_of: AsOf
    differences: tuple[FieldDifference, ...]
    officers: RosterReconciliation
    shareholders: RosterReconciliation
    extracted: ExtractedCompanyData
    usage: TokenUsage | None = None

    @property
    def warnings(self) -> tuple[NormalizationWarning, ...]:
        return self.extracted.warnings

    @property
    def difference_fields(self) -> tuple[str, ...]:
        return tuple(difference.field for difference in self.differences)

    @property
    def has_differences(self) -> bool:
        return bool(
            self.differences or self.officers.needs_review or self.shareholders.needs_review
        )


def build_preview(
    company: Company,
    extracted: ExtractedCompanyData,
    *,
    officers: Sequence[Officer],
    shareholders: Sequence[Shareholder],
    contacts: Mapping[UUID, Contact] | None = None,
    usage: TokenUsage | None = None,
) -> CompanyPreview:
    """Diff and reconcile ``extracted`` against the company and its current rosters.

    Raises ``RegistrationMismatchError`` when the extract names another company.
    """

    check_registration_number(company, extracted)
    preview = CompanyPreview(
        company_id=company.id,
        registration_number=company.registration_number,
        as_of=company.as_of,
        differences=diff_company(company, extracted),
        officers=reconcile_officers(
            officers,
            extracted.officers,
            contacts=contacts,
            reported_ceased=extracted.reported_ceased_officers,
        ),
        shareholders=reconcile_shareholders(
            shareholders, extracted.shareholders, contacts=contacts
        ),
        extracted=extracted,
        usage=usage,
    )
    log.info(
        "Preview for company %s at version %d: %d field difference(s), officers "
        "new=%d unmatched=%d, shareholders new=%d unmatched=%d",
        company.id,
        preview.as_of.version,
        len(preview.differences),
        len(preview.officers.new_candidates),
        len(preview.officers.unmatched_existing),
        len(preview.shareholders.new_candidates),
        len(preview.shareholders.unmatched_existing),
    )
    return preview
