"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Legal form of a registered company."""

    PRIVATE_LIMITED = "PRIVATE_LIMITED"
    EXEMPTED_PRIVATE_LIMITED = "EXEMPTED_PRIVATE_LIMITED"
    PUBLIC_LIMITED = "PUBLIC_LIMITED"
    SOLE_PROPRIETORSHIP = "SOLE_PROPRIETORSHIP"
    PARTNERSHIP = "PARTNERSHIP"
    LIMITED_PARTNERSHIP = "LIMITED_PARTNERSHIP"
    LIMITED_LIABILITY_PARTNERSHIP = "LIMITED_LIABILITY_PARTNERSHIP"
    FOREIGN_COMPANY = "FOREIGN_COMPANY"
    VARIABLE_CAPITAL_COMPANY = "VARIABLE_CAPITAL_COMPANY"
    OTHER = "OTHER"


class CompanyStatus(StrEnum):
    LIVE = "LIVE"
    STRUCK_OFF = "STRUCK_OFF"
    WINDING_UP = "WINDING_UP"
    DISSOLVED = "DISSOLVED"
    IN_LIQUIDATION = "IN_LIQUIDATION"
    IN_RECEIVERSHIP = "IN_RECEIVERSHIP"
    AMALGAMATED = "AMALGAMATED"
    CONVERTED = "CONVERTED"
    OTHER = "OTHER"


class OfficerRole(StrEnum):
    DIRECTOR = "DIRECTOR"
    MANAGING_DIRECTOR = "MANAGING_DIRECTOR"
    ALTERNATE_DIRECTOR = "ALTERNATE_DIRECTOR"
    SECRETARY = "SECRETARY"
    CEO = "CEO"
    CFO = "CFO"
    AUDITOR = "AUDITOR"
    LIQUIDATOR = "LIQUIDATOR"
    RECEIVER = "RECEIVER"
    JUDICIAL_MANAGER = "JUDICIAL_MANAGER"


class ShareholderType(StrEnum):
    INDIVIDUAL = "INDIVIDUAL"
    CORPORATE = "CORPORATE"


class IdentificationType(StrEnum):
    NRIC = "NRIC"
    FIN = "FIN"
    PASSPORT = "PASSPORT"
    UEN = "UEN"
    OTHER = "OTHER"


class RosterKind(StrEnum):
    OFFICER = "officer"
    SHAREHOLDER = "shareholder"


class RosterAction(StrEnum):
    """Caller disposition for an existing roster row the extract did not list."""

    KEEP = "keep"
    CEASE = "cease"
    IGNORE = "ignore"


class AuditAction(StrEnum):
    UPDATE = "update"
