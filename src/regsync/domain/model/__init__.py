"""Public domain model surface."""

from __future__ import annotations

from regsync.domain.model.audit import AuditEntry
from regsync.domain.model.company import (
    Company,
    Contact,
    Officer,
    RosterMember,
    Shareholder,
    utc_now,
)
from regsync.domain.model.entity import Entity, new_id
from regsync.domain.model.enums import (
    AuditAction,
    CompanyStatus,
    EntityType,
    IdentificationType,
    OfficerRole,
    RosterAction,
    RosterKind,
    ShareholderType,
)
from regsync.domain.model.primitives import (
    MONEY_PLACES,
    PERCENT_PLACES,
    AsOf,
    CurrencyCode,
    RegistrationNumber,
    quantum,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "new_id",
    # company
    "Company",
    "Contact",
    "RosterMember",
    "Officer",
    "Shareholder",
    "utc_now",
    # audit
    "AuditEntry",
    # enums
    "AuditAction",
    "CompanyStatus",
    "EntityType",
    "IdentificationType",
    "OfficerRole",
    "RosterAction",
    "RosterKind",
    "ShareholderType",
    # primitives
    "AsOf",
    "CurrencyCode",
    "RegistrationNumber",
    "MONEY_PLACES",
    "PERCENT_PLACES",
    "quantum",
]
