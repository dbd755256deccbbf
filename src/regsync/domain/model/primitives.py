"""Domain primitives: scalar aliases + small value objects."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Final

type CurrencyCode = str
type RegistrationNumber = str

MONEY_PLACES: Final[int] = 2
PERCENT_PLACES: Final[int] = 2


def quantum(places: int) -> Decimal:
    return Decimal(1).scaleb(-places)


@dataclass(frozen=True, slots=True)
class AsOf:
    """Version stamp of an authoritative record, captured when a preview was computed."""

    version: int
    last_modified_at: datetime

    def __post_init__(self) -> None:
        if self.version < 0:
            raise ValueError("version must be non-negative")
        if self.last_modified_at.tzinfo is None:
            object.__setattr__(self, "last_modified_at", self.last_modified_at.replace(tzinfo=UTC))

    def is_older_than(self, other: AsOf) -> bool:
        return other.version > self.version or other.last_modified_at > self.last_modified_at
