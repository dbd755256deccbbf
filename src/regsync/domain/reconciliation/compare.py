"""Type-aware value comparison for scalar diffs and roster sub-diffs.

Every comparable field is described by a ``FieldSpec``. Values are reduced
to a comparable form per ``ValueKind`` before equality is tested:

- ``DECIMAL`` quantizes to the field's precision (``100000.00 == 100000``)
- ``DATE`` compares calendar dates only
- ``TEXT`` compares case-sensitively after whitespace normalization, with
  ``None`` and ``""`` treated as the same (nothing recorded)
- ``CODE`` additionally upper-cases
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum, StrEnum
from typing import TYPE_CHECKING, Protocol

from regsync.domain.model import quantum
from regsync.domain.text import collapse_whitespace, normalize_code

if TYPE_CHECKING:
    from collections.abc import Iterable


class ValueKind(StrEnum):
    TEXT = "text"
    CODE = "code"
    DECIMAL = "decimal"
    INTEGER = "integer"
    DATE = "date"
    ENUM = "enum"


class FieldCategory(StrEnum):
    ENTITY = "entity"
    ACTIVITY = "activity"
    ADDRESS = "address"
    CAPITAL = "capital"
    COMPLIANCE = "compliance"
    TAX = "tax"
    ROSTER = "roster"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """A comparable attribute, shared by the record and the extracted shape."""

    name: str
    label: str
    kind: ValueKind
    category: FieldCategory = FieldCategory.ENTITY
    places: int | None = None
    required: bool = False

    def comparable(self, value: object) -> object:
        return comparable_value(self.kind, value, places=self.places)

    def equal(self, old: object, new: object) -> bool:
        return self.comparable(old) == self.comparable(new)


def comparable_value(kind: ValueKind, value: object, *, places: int | None = None) -> object:
    match kind:
        case ValueKind.TEXT:
            return "" if value is None else collapse_whitespace(str(value))
        case ValueKind.CODE:
            return "" if value is None else normalize_code(str(value))
        case ValueKind.DECIMAL:
            return _comparable_decimal(value, places)
        case ValueKind.INTEGER:
            return None if value is None else int(str(value))
        case ValueKind.DATE:
            return _comparable_date(value)
        case ValueKind.ENUM:
            if isinstance(value, Enum):
                return value.value
            return value


def _comparable_decimal(value: object, places: int | None) -> Decimal | None:
    if value is None:
        return None
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Not a decimal value: {value!r}") from exc
    if places is not None:
        # Too many digits to quantize: compare the exact value instead.
        with suppress(InvalidOperation):
            return number.quantize(quantum(places), rounding=ROUND_HALF_UP)
    return number.normalize()


def _comparable_date(value: object) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise ValueError(f"Not a date value: {value!r}")


@dataclass(frozen=True, slots=True)
class FieldDifference:
    field: str
    label: str
    category: FieldCategory
    old_value: object
    new_value: object


class ObservedValues(Protocol):
    def has(self, name: str) -> bool: ...


def diff_fields(
    current: object, extracted: ObservedValues, specs: Iterable[FieldSpec]
) -> tuple[FieldDifference, ...]:
    """Differences between ``current`` and ``extracted`` over ``specs``, in spec order.

    Fields the extract did not observe are skipped. A blank extracted value is
    skipped for required fields, so a record is never proposed to lose a
    value it must have.
    """

    differences: list[FieldDifference] = []
    for spec in specs:
        if not extracted.has(spec.name):
            continue
        old_value = getattr(current, spec.name)
        new_value = getattr(extracted, spec.name)
        if spec.required and spec.comparable(new_value) in (None, ""):
            continue
        if spec.equal(old_value, new_value):
            continue
        differences.append(
            FieldDifference(
                field=spec.name,
                label=spec.label,
                category=spec.category,
                old_value=old_value,
                new_value=new_value,
            )
        )
    return tuple(differences)
