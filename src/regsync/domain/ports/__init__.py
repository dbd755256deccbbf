"""Domain port definitions for adapters."""

from __future__ import annotations

from .audit import AuditSink
from .extraction import ExtractionInput, ExtractionOracle, ExtractionResult, TokenUsage
from .persistence import (
    CompanyRepository,
    ContactRepository,
    OfficerRepository,
    Repository,
    RosterRepository,
    ShareholderRepository,
)
from .unit_of_work import (
    CompanyRepositories,
    CompanyUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AuditSink",
    "CompanyRepositories",
    "CompanyRepository",
    "CompanyUnitOfWork",
    "ContactRepository",
    "ExtractionInput",
    "ExtractionOracle",
    "ExtractionResult",
    "OfficerRepository",
    "Repository",
    "RepositoryCollection",
    "RosterRepository",
    "ShareholderRepository",
    "TokenUsage",
    "UnitOfWork",
]
