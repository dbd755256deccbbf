"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from regsync.adapters.sqlalchemy.mappings import (
    audit_log_table,
    contact_table,
    officer_table,
    shareholder_table,
)
from regsync.domain.model import AuditEntry, Company, Contact, Officer, Shareholder

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from sqlalchemy import Table
    from sqlalchemy.orm import Session


class SqlAlchemyCompanyRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Company) -> None:
        self.session.add(entity)

    def get(self, entity_id: UUID) -> Company | None:
        return self.session.get(Company, entity_id)

    def get_for_update(self, company_id: UUID) -> Company | None:
        # Dialects without row locks (SQLite) ignore FOR UPDATE.
        return self.session.get(
            Company, company_id, with_for_update=True, populate_existing=True
        )


class SqlAlchemyRosterRepository[TMember: (Officer, Shareholder)]:
    """Shared queries for officer and shareholder rows."""

    def __init__(self, session: Session, member_cls: type[TMember], table: Table) -> None:
        self.session = session
        self._member_cls = member_cls
        self._table = table

    def add(self, entity: TMember) -> None:
        self.session.add(entity)

    def get(self, entity_id: UUID) -> TMember | None:
        return self.session.get(self._member_cls, entity_id)

    def list_current(self, company_id: UUID) -> list[TMember]:
        stmt = (
            select(self._member_cls)
            .where(self._table.c.company_id == company_id)
            .where(self._table.c.is_current.is_(True))
            .order_by(self._table.c.name, self._table.c.id)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyOfficerRepository(SqlAlchemyRosterRepository[Officer]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Officer, officer_table)


class SqlAlchemyShareholderRepository(SqlAlchemyRosterRepository[Shareholder]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Shareholder, shareholder_table)


class SqlAlchemyContactRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Contact) -> None:
        self.session.add(entity)
        # roster rows inserted later in the same flush reference the contact id
        self.session.flush([entity])

    def get(self, entity_id: UUID) -> Contact | None:
        return self.session.get(Contact, entity_id)

    def get_many(self, contact_ids: Iterable[UUID]) -> dict[UUID, Contact]:
        ids = set(contact_ids)
        if not ids:
            return {}
        stmt = select(Contact).where(contact_table.c.id.in_(ids))
        return {contact.id: contact for contact in self.session.execute(stmt).scalars()}

    def find_by_identification(self, identification_number: str) -> Contact | None:
        stmt = (
            select(Contact)
            .where(contact_table.c.identification_number == identification_number)
            .order_by(contact_table.c.name, contact_table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()


class SqlAlchemyAuditSink:
    """Audit sink writing to ``audit_log`` in the unit of work's session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def record(self, entry: AuditEntry) -> None:
        self.session.add(entry)

    def list_for_company(self, company_id: UUID) -> list[AuditEntry]:
        stmt = (
            select(AuditEntry)
            .where(audit_log_table.c.company_id == company_id)
            .order_by(audit_log_table.c.created_at, audit_log_table.c.subject)
        )
        return list(self.session.execute(stmt).scalars())
