"""Scalar diff between the authoritative company and an extracted candidate.

The diff only ever proposes a change for a field the extract populated. A
field the extract left out is skipped, never reported as "cleared". The
output order is the fixed order of ``COMPANY_FIELDS``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from regsync.domain.errors import RegistrationMismatchError
from regsync.domain.model import MONEY_PLACES
from regsync.domain.reconciliation.compare import (
    FieldCategory,
    FieldDifference,
    FieldSpec,
    ValueKind,
    diff_fields,
)
from regsync.domain.text import normalize_identifier

if TYPE_CHECKING:
    from regsync.domain.extraction import ExtractedCompanyData
    from regsync.domain.model import Company

log = logging.getLogger(__name__)


_E = FieldCategory.ENTITY
_A = FieldCategory.ACTIVITY
_R = FieldCategory.ADDRESS
_C = FieldCategory.CAPITAL
_K = FieldCategory.COMPLIANCE
_T = FieldCategory.TAX

COMPANY_FIELDS: Final[tuple[FieldSpec, ...]] = (
    FieldSpec("name", "Company Name", ValueKind.TEXT, _E, required=True),
    FieldSpec("former_name", "Former Name", ValueKind.TEXT, _E),
    FieldSpec("entity_type", "Entity Type", ValueKind.ENUM, _E, required=True),
    FieldSpec("status", "Status", ValueKind.ENUM, _E, required=True),
    FieldSpec("status_date", "Status Date", ValueKind.DATE, _E),
    FieldSpec("incorporation_date", "Incorporation Date", ValueKind.DATE, _E),
    FieldSpec("primary_activity_code", "Primary SSIC Code", ValueKind.CODE, _A),
    FieldSpec("primary_activity_description", "Primary SSIC Description", ValueKind.TEXT, _A),
    FieldSpec("secondary_activity_code", "Secondary SSIC Code", ValueKind.CODE, _A),
    FieldSpec("secondary_activity_description", "Secondary SSIC Description", ValueKind.TEXT, _A),
    FieldSpec("registered_address", "Registered Address", ValueKind.TEXT, _R),
    FieldSpec("home_currency", "Home Currency", ValueKind.CODE, _C),
    FieldSpec("paid_up_capital_amount", "Paid-up Capital", ValueKind.DECIMAL, _C, MONEY_PLACES),
    FieldSpec("paid_up_capital_currency", "Paid-up Capital Currency", ValueKind.CODE, _C),
    FieldSpec("issued_capital_amount", "Issued Capital", ValueKind.DECIMAL, _C, MONEY_PLACES),
    FieldSpec("issued_capital_currency", "Issued Capital Currency", ValueKind.CODE, _C),
    FieldSpec("financial_year_end_day", "Financial Year End Day", ValueKind.INTEGER, _K),
    FieldSpec("financial_year_end_month", "Financial Year End Month", ValueKind.INTEGER, _K),
    FieldSpec("last_agm_date", "Last AGM Date", ValueKind.DATE, _K),
    FieldSpec("last_annual_return_date", "Last Annual Return Date", ValueKind.DATE, _K),
    FieldSpec("accounts_due_date", "Accounts Due Date", ValueKind.DATE, _K),
    FieldSpec("tax_registration_number", "GST Registration Number", ValueKind.CODE, _T),
    FieldSpec("tax_registration_date", "GST Registration Date", ValueKind.DATE, _T),
)

COMPANY_FIELDS_BY_NAME: Final[dict[str, FieldSpec]] = {spec.name: spec for spec in COMPANY_FIELDS}


def diff_company(company: Company, extracted: ExtractedCompanyData) -> tuple[FieldDifference, ...]:
    """Differences for every observed company field whose value changed."""

    differences = diff_fields(company, extracted, COMPANY_FIELDS)
    log.debug(
        "Diffed company %s: %d of %d observed fields differ",
        company.id,
        len(differences),
        len(extracted.observed),
    )
    return differences


def field_still_differs(company: Company, field: str, value: object) -> bool:
    """Whether writing ``value`` to ``field`` would change the record."""
    spec = COMPANY_FIELDS_BY_NAME[field]
    return not spec.equal(getattr(company, field), value)


def check_registration_number(company: Company, extracted: ExtractedCompanyData) -> None:
    """Raise ``RegistrationMismatchError`` when the extract describes a different company.

    An extract without a registration number is accepted; it cannot contradict
    the record.
    """

    if not extracted.has("registration_number") or extracted.registration_number is None:
        return
    expected = normalize_identifier(company.registration_number)
    found = normalize_identifier(extracted.registration_number)
    if expected != found:
        raise RegistrationMismatchError(expected=expected, extracted=found)

