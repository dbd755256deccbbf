"""Concurrency guard: detect that a record moved on since its preview was computed.

A stale preview does not block an apply. The caller is told who won the
race (the version and time of the newer write) and the apply still commits,
since every change it makes is re-checked against the current values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from regsync.domain.model import AsOf

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class ConcurrencyWarning:
    previewed_version: int
    current_version: int
    modified_at: datetime

    @property
    def message(self) -> str:
        return (
            f"This company was modified by another user at {self.modified_at.isoformat()} "
            f"(version {self.current_version}, preview was based on version "
            f"{self.previewed_version}). Your changes were applied to the latest data."
        )

    def __str__(self) -> str:
        return self.message


def check_concurrency(as_of: AsOf, current: AsOf) -> ConcurrencyWarning | None:
    """Warn when ``current`` is newer than the ``as_of`` the preview captured. Never raises."""

    if not as_of.is_older_than(current):
        return None
    warning = ConcurrencyWarning(
        previewed_version=as_of.version,
        current_version=current.version,
        modified_at=current.last_modified_at,
    )
    log.warning("Concurrent modification detected: %s", warning.message)
    return warning
