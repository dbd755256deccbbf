"""Audit records for changes applied from registry extracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from .entity import Entity
from .enums import AuditAction

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class AuditEntry(Entity):
    """Human-readable summary of one category of applied changes."""

    company_id: UUID
    subject: str
    summary: str
    action: AuditAction = AuditAction.UPDATE
    actor: str | None = None
    details: dict[str, object] = field(default_factory=dict[str, object])
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
