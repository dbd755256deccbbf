"""Port for recording human-readable change summaries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from regsync.domain.model import AuditEntry


@runtime_checkable
class AuditSink(Protocol):
    """Receives audit entries inside the caller's transaction."""

    def record(self, entry: AuditEntry) -> None: ...
