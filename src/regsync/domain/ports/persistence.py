"""Ports for loading and persisting company records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from regsync.domain.model import Company, Contact, Officer, Shareholder

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...

    def get(self, entity_id: UUID) -> TEntity | None: ...


@runtime_checkable
class CompanyRepository(Repository[Company], Protocol):
    """Persistence contract for authoritative companies."""

    def get_for_update(self, company_id: UUID) -> Company | None:
        """Load the company and lock its row until the unit of work ends."""
        ...


@runtime_checkable
class RosterRepository[TMember: (Officer, Shareholder)](Repository[TMember], Protocol):
    """Persistence contract for officer or shareholder rows of a company."""

    def list_current(self, company_id: UUID) -> list[TMember]:
        """Current rows of the company, in a stable order."""
        ...


@runtime_checkable
class OfficerRepository(RosterRepository[Officer], Protocol):
    """Repository contract for officers."""


@runtime_checkable
class ShareholderRepository(RosterRepository[Shareholder], Protocol):
    """Repository contract for shareholders."""


@runtime_checkable
class ContactRepository(Repository[Contact], Protocol):
    """Repository contract for contacts linked from roster rows."""

    def get_many(self, contact_ids: Iterable[UUID]) -> dict[UUID, Contact]: ...

    def find_by_identification(self, identification_number: str) -> Contact | None:
        """First contact registered under ``identification_number``, if any."""
        ...
