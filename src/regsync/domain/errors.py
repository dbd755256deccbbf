"""Errors raised by the preview/apply pipeline.

``ValidationError`` and its subclasses describe caller input that can never
succeed as given; callers should not retry them automatically.
``NotFoundError`` means a record disappeared between preview and apply.
``StorageError`` wraps transaction failures; an identical retry is safe.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from regsync.domain.model import RosterKind


class RegsyncError(Exception):
    """Base class for pipeline errors."""


class ValidationError(RegsyncError):
    """Caller input or extracted data is malformed or inconsistent."""


class ExtractionShapeError(ValidationError):
    """Raw extraction output is not a structured object."""


class RegistrationMismatchError(ValidationError):
    """Extracted registration number does not belong to the target company."""

    def __init__(self, *, expected: str, extracted: str) -> None:
        super().__init__(
            f"Registration number mismatch: expected {expected}, extract shows {extracted}"
        )
        self.expected = expected
        self.extracted = extracted


class MissingRosterActionError(ValidationError):
    """Unmatched existing roster rows were left without a caller disposition."""

    def __init__(self, kind: RosterKind, missing: Iterable[UUID]) -> None:
        self.kind = kind
        self.missing = tuple(missing)
        ids = ", ".join(str(row_id) for row_id in self.missing)
        super().__init__(f"Missing {kind} action for unmatched row(s): {ids}")


class UnknownApprovalError(ValidationError):
    """Caller approved or disposed of something the preview never proposed."""


class NotFoundError(RegsyncError):
    """Company or referenced roster row no longer exists."""


class StorageError(RegsyncError):
    """The apply transaction could not be committed. Nothing was written."""
