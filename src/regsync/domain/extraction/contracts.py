"""Typed shapes produced by the extraction normalizer.

Every extracted shape records which attributes the oracle actually populated
in ``observed``. A field missing from ``observed`` is *absent* (the extract
said nothing about it). A field in ``observed`` whose value is ``""`` or
``None`` was reported *blank*. Downstream stages never treat absence as a
request to clear a value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date
    from decimal import Decimal

    from regsync.domain.model import (
        CompanyStatus,
        CurrencyCode,
        EntityType,
        IdentificationType,
        OfficerRole,
        RegistrationNumber,
        ShareholderType,
    )


@dataclass(frozen=True, slots=True)
class NormalizationWarning:
    """A value present in the raw extract that could not be parsed."""

    path: str
    value: object
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason} ({self.value!r})"


@dataclass(frozen=True, slots=True, kw_only=True)
class ExtractedOfficer:
    index: int
    name: str
    role: OfficerRole
    designation: str | None = None
    identification_type: IdentificationType | None = None
    identification_number: str | None = None
    nationality: str | None = None
    address: str | None = None
    appointment_date: date | None = None
    cessation_date: date | None = None
    observed: frozenset[str] = frozenset()

    @property
    def roster_role(self) -> str:
        return self.role.value

    def has(self, name: str) -> bool:
        return name in self.observed


@dataclass(frozen=True, slots=True, kw_only=True)
class ExtractedShareholder:
    index: int
    name: str
    share_class: str = "ORDINARY"
    shareholder_type: ShareholderType | None = None
    identification_type: IdentificationType | None = None
    identification_number: str | None = None
    nationality: str | None = None
    place_of_origin: str | None = None
    address: str | None = None
    number_of_shares: int | None = None
    percentage_held: Decimal | None = None
    currency: CurrencyCode | None = None
    observed: frozenset[str] = frozenset()

    @property
    def roster_role(self) -> str:
        return self.share_class

    def has(self, name: str) -> bool:
        return name in self.observed


type ExtractedRosterRow = ExtractedOfficer | ExtractedShareholder


@dataclass(frozen=True, slots=True, kw_only=True)
class ExtractedCompanyData:
    """Candidate company scalars and rosters read from one registry extract.

    ``officers`` holds the rows the extract lists as current. Officer rows the
    extract reports with a cessation date are kept apart in
    ``reported_ceased_officers``: they never take part in matching and only
    serve as hints for existing rows left unmatched.
    """

    registration_number: RegistrationNumber | None = None
    name: str | None = None
    former_name: str | None = None
    entity_type: EntityType | None = None
    status: CompanyStatus | None = None
    status_date: date | None = None
    incorporation_date: date | None = None

    primary_activity_code: str | None = None
    primary_activity_description: str | None = None
    secondary_activity_code: str | None = None
    secondary_activity_description: str | None = None

    registered_address: str | None = None
    home_currency: CurrencyCode | None = None

    paid_up_capital_amount: Decimal | None = None
    paid_up_capital_currency: CurrencyCode | None = None
    issued_capital_amount: Decimal | None = None
    issued_capital_currency: CurrencyCode | None = None

    financial_year_end_day: int | None = None
    financial_year_end_month: int | None = None

    last_agm_date: date | None = None
    last_annual_return_date: date | None = None
    accounts_due_date: date | None = None

    tax_registration_number: str | None = None
    tax_registration_date: date | None = None

    officers: tuple[ExtractedOfficer, ...] = ()
    reported_ceased_officers: tuple[ExtractedOfficer, ...] = ()
    shareholders: tuple[ExtractedShareholder, ...] = ()

    observed: frozenset[str] = frozenset()
    warnings: tuple[NormalizationWarning, ...] = ()

    def has(self, name: str) -> bool:
        return name in self.observed
