"""Company records: the authoritative company and its two rosters.

Roster rows (officers, shareholders) have no stable external key. Their
identity is the tuple of role (or share class), display name and, where
available, a linked contact. Rows are never deleted; ceasing a row keeps
it as history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from regsync.domain.model.entity import Entity
from regsync.domain.model.enums import (
    CompanyStatus,
    EntityType,
    OfficerRole,
    RosterKind,
    ShareholderType,
)
from regsync.domain.model.primitives import AsOf

if TYPE_CHECKING:
    from decimal import Decimal
    from uuid import UUID

    from regsync.domain.model.enums import IdentificationType
    from regsync.domain.model.primitives import CurrencyCode, RegistrationNumber


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(eq=False, kw_only=True)
class Company(Entity):
    registration_number: RegistrationNumber
    name: str
    former_name: str | None = None
    entity_type: EntityType = EntityType.PRIVATE_LIMITED
    status: CompanyStatus = CompanyStatus.LIVE
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

    version: int = 1
    last_modified_at: datetime = field(default_factory=utc_now)

    @property
    def as_of(self) -> AsOf:
        return AsOf(version=self.version, last_modified_at=self.last_modified_at)

    def touch(self, now: datetime) -> None:
        """Record a committed modification: bump the version and timestamp."""
        self.version += 1
        self.last_modified_at = max(now, self.last_modified_at)


@dataclass(eq=False, kw_only=True)
class Contact(Entity):
    """A person or corporation that roster rows may link to.

    ``confirmed_names`` holds spellings a reviewer previously confirmed as
    referring to this contact (for example a maiden name or a romanisation).
    """

    name: str
    identification_number: str | None = None
    confirmed_names: list[str] = field(default_factory=list[str])

    def confirm_name(self, name: str) -> None:
        if name not in self.confirmed_names:
            self.confirmed_names.append(name)


@dataclass(eq=False, kw_only=True)
class RosterMember(Entity):
    """Fields shared by officer and shareholder rows."""

    company_id: UUID
    name: str
    contact_id: UUID | None = None
    identification_type: IdentificationType | None = None
    identification_number: str | None = None
    nationality: str | None = None
    address: str | None = None
    cessation_date: date | None = None
    is_current: bool = True

    @property
    def kind(self) -> RosterKind:
        raise NotImplementedError

    @property
    def roster_role(self) -> str:
        """Role (officers) or share class (shareholders): the identity scope of the row."""
        raise NotImplementedError

    def cease(self, on: date) -> bool:
        """Mark the row not-current. Returns False if it already was."""
        if not self.is_current:
            return False
        self.is_current = False
        self.cessation_date = on
        return True


@dataclass(eq=False, kw_only=True)
class Officer(RosterMember):
    role: OfficerRole = OfficerRole.DIRECTOR
    designation: str | None = None
    appointment_date: date | None = None

    @property
    def kind(self) -> RosterKind:
        return RosterKind.OFFICER

    @property
    def roster_role(self) -> str:
        return self.role.value


@dataclass(eq=False, kw_only=True)
class Shareholder(RosterMember):
    share_class: str = "ORDINARY"
    shareholder_type: ShareholderType = ShareholderType.INDIVIDUAL
    place_of_origin: str | None = None
    number_of_shares: int = 0
    percentage_held: Decimal | None = None
    currency: CurrencyCode | None = None

    @property
    def kind(self) -> RosterKind:
        return RosterKind.SHAREHOLDER

    @property
    def roster_role(self) -> str:
        return self.share_class
