"""SQLAlchemy adapter package for regsync."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyAuditSink,
    SqlAlchemyCompanyRepository,
    SqlAlchemyContactRepository,
    SqlAlchemyOfficerRepository,
    SqlAlchemyShareholderRepository,
)
from .unit_of_work import SqlAlchemyCompanyUnitOfWork, shutdown, startup

__all__ = [
    "SqlAlchemyAuditSink",
    "SqlAlchemyCompanyRepository",
    "SqlAlchemyCompanyUnitOfWork",
    "SqlAlchemyContactRepository",
    "SqlAlchemyOfficerRepository",
    "SqlAlchemyShareholderRepository",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
