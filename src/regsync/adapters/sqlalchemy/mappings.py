"""SQLAlchemy mapping metadata for the regsync domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.ext.mutable import MutableDict, MutableList
from sqlalchemy.orm import configure_mappers

from regsync.domain.model import (
    AuditAction,
    AuditEntry,
    Company,
    CompanyStatus,
    Contact,
    EntityType,
    IdentificationType,
    Officer,
    OfficerRole,
    Shareholder,
    ShareholderType,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]
Money = Numeric(18, 2, asdecimal=True)
Percentage = Numeric(5, 2, asdecimal=True)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Core tables -----------------------------------------------------------------

company_table = Table(
    "company",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("registration_number", String(32), nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("former_name", String, nullable=True),
    Column("entity_type", Enum(EntityType, native_enum=False), nullable=False),
    Column("status", Enum(CompanyStatus, native_enum=False), nullable=False),
    Column("status_date", Date, nullable=True),
    Column("incorporation_date", Date, nullable=True),
    Column("primary_activity_code", String(16), nullable=True),
    Column("primary_activity_description", String, nullable=True),
    Column("secondary_activity_code", String(16), nullable=True),
    Column("secondary_activity_description", String, nullable=True),
    Column("registered_address", String, nullable=True),
    Column("home_currency", String(8), nullable=True),
    Column("paid_up_capital_amount", Money, nullable=True),
    Column("paid_up_capital_currency", String(8), nullable=True),
    Column("issued_capital_amount", Money, nullable=True),
    Column("issued_capital_currency", String(8), nullable=True),
    Column("financial_year_end_day", Integer, nullable=True),
    Column("financial_year_end_month", Integer, nullable=True),
    Column("last_agm_date", Date, nullable=True),
    Column("last_annual_return_date", Date, nullable=True),
    Column("accounts_due_date", Date, nullable=True),
    Column("tax_registration_number", String(32), nullable=True),
    Column("tax_registration_date", Date, nullable=True),
    Column("version", Integer, nullable=False, default=1),
    Column("last_modified_at", UTCDateTime(), nullable=False),
)

contact_table = Table(
    "contact",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column("identification_number", String(64), nullable=True),
    Column("confirmed_names", MutableList.as_mutable(JSON()), nullable=False, default=list),
)


def _roster_columns() -> list[Column[Any]]:
    return [
        Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
        Column(
            "company_id",
            UUIDColumnType,
            ForeignKey("company.id", ondelete="CASCADE"),
            nullable=False,
        ),
        Column(
            "contact_id",
            UUIDColumnType,
            ForeignKey("contact.id", ondelete="SET NULL"),
            nullable=True,
        ),
        Column("name", String, nullable=False),
        Column(
            "identification_type", Enum(IdentificationType, native_enum=False), nullable=True
        ),
        Column("identification_number", String(64), nullable=True),
        Column("nationality", String, nullable=True),
        Column("address", String, nullable=True),
        Column("cessation_date", Date, nullable=True),
        Column("is_current", Boolean, nullable=False, default=True),
    ]


officer_table = Table(
    "officer",
    mapper_registry.metadata,
    *_roster_columns(),
    Column("role", Enum(OfficerRole, native_enum=False), nullable=False),
    Column("designation", String, nullable=True),
    Column("appointment_date", Date, nullable=True),
    Index("ix_officer_company_current", "company_id", "is_current"),
)

shareholder_table = Table(
    "shareholder",
    mapper_registry.metadata,
    *_roster_columns(),
    Column("share_class", String(64), nullable=False),
    Column("shareholder_type", Enum(ShareholderType, native_enum=False), nullable=False),
    Column("place_of_origin", String, nullable=True),
    Column("number_of_shares", Integer, nullable=False, default=0),
    Column("percentage_held", Percentage, nullable=True),
    Column("currency", String(8), nullable=True),
    Index("ix_shareholder_company_current", "company_id", "is_current"),
)

audit_log_table = Table(
    "audit_log",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "company_id",
        UUIDColumnType,
        ForeignKey("company.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("subject", String(32), nullable=False),
    Column("summary", String, nullable=False),
    Column("action", Enum(AuditAction, native_enum=False), nullable=False),
    Column("actor", String, nullable=True),
    Column("details", MutableDict.as_mutable(JSON()), nullable=False, default=dict),
    Column("created_at", UTCDateTime(), nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure imperative mappings for domain dataclasses."""

    log.info("Starting mappers")

    mapper_registry.map_imperatively(Company, company_table)
    mapper_registry.map_imperatively(Contact, contact_table)
    mapper_registry.map_imperatively(Officer, officer_table)
    mapper_registry.map_imperatively(Shareholder, shareholder_table)
    mapper_registry.map_imperatively(AuditEntry, audit_log_table)

    configure_mappers()
    return mapper_registry
