"""Turn untyped extraction-oracle output into ``ExtractedCompanyData``.

Responsibilities of this stage:
- read the oracle's key layout (camelCase, snake_case aliases accepted)
- parse dates, money, share counts, percentages, currencies and enum labels
- record which fields were populated (``observed``) and which raw values
  could not be parsed (``warnings``)
- stay pure: no persistence, no I/O

Only a non-object payload is an error. Individual bad values are left
absent so that they can never propose a change.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Mapping, Sequence
from contextlib import suppress
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import StrEnum
from typing import Final

from regsync.domain.errors import ExtractionShapeError
from regsync.domain.extraction.contracts import (
    ExtractedCompanyData,
    ExtractedOfficer,
    ExtractedShareholder,
    NormalizationWarning,
)
from regsync.domain.model import (
    MONEY_PLACES,
    PERCENT_PLACES,
    CompanyStatus,
    EntityType,
    IdentificationType,
    OfficerRole,
    ShareholderType,
    quantum,
)
from regsync.domain.text import (
    collapse_whitespace,
    normalize_code,
    normalize_identifier,
    normalize_label,
)

log = logging.getLogger(__name__)

type Parser = Callable[[object], object]

DEFAULT_CURRENCY: Final[str] = "SGD"
DEFAULT_SHARE_CLASS: Final[str] = "ORDINARY"

# Storage limits: money is NUMERIC(18, 2), share counts a 32-bit INTEGER.
MONEY_LIMIT: Final[Decimal] = Decimal(10) ** 16
SHARE_COUNT_LIMIT: Final[Decimal] = Decimal(2**31)
PERCENT_MAX: Final[Decimal] = Decimal(100)

_NUMBER = re.compile(r"[-+]?(?:\d[\d,]*(?:\.\d+)?|\.\d+)")
_CODE_FENCE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?```$", re.DOTALL | re.IGNORECASE)
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

_DATE_FORMATS: Final[tuple[str, ...]] = (
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%d-%b-%Y",
    "%Y/%m/%d",
)

_CURRENCY_NAMES: Final[dict[str, str]] = {
    "SINGAPORE DOLLAR": "SGD",
    "SINGAPORE DOLLARS": "SGD",
    "S": "SGD",
    "US DOLLAR": "USD",
    "US DOLLARS": "USD",
    "UNITED STATES DOLLAR": "USD",
    "UNITED STATES DOLLARS": "USD",
    "EURO": "EUR",
    "EUROS": "EUR",
    "POUND STERLING": "GBP",
    "MALAYSIAN RINGGIT": "MYR",
    "HONG KONG DOLLAR": "HKD",
    "HONG KONG DOLLARS": "HKD",
}

_ENTITY_TYPE_LABELS: Final[dict[str, EntityType]] = {
    "PRIVATE COMPANY LIMITED BY SHARES": EntityType.PRIVATE_LIMITED,
    "EXEMPT PRIVATE LIMITED": EntityType.EXEMPTED_PRIVATE_LIMITED,
    "EXEMPT PRIVATE COMPANY LIMITED BY SHARES": EntityType.EXEMPTED_PRIVATE_LIMITED,
    "EXEMPTED PRIVATE COMPANY LIMITED BY SHARES": EntityType.EXEMPTED_PRIVATE_LIMITED,
    "PUBLIC COMPANY LIMITED BY SHARES": EntityType.PUBLIC_LIMITED,
    "LLP": EntityType.LIMITED_LIABILITY_PARTNERSHIP,
    "VCC": EntityType.VARIABLE_CAPITAL_COMPANY,
}

_COMPANY_STATUS_LABELS: Final[dict[str, CompanyStatus]] = {
    "LIVE COMPANY": CompanyStatus.LIVE,
    "GAZETTED TO BE STRUCK OFF": CompanyStatus.STRUCK_OFF,
}

_OFFICER_ROLE_LABELS: Final[dict[str, OfficerRole]] = {
    "COMPANY SECRETARY": OfficerRole.SECRETARY,
    "CHIEF EXECUTIVE OFFICER": OfficerRole.CEO,
    "CHIEF FINANCIAL OFFICER": OfficerRole.CFO,
}

_SHAREHOLDER_TYPE_LABELS: Final[dict[str, ShareholderType]] = {
    "COMPANY": ShareholderType.CORPORATE,
    "CORPORATION": ShareholderType.CORPORATE,
    "PERSON": ShareholderType.INDIVIDUAL,
}

_REQUIRED_FIELDS: Final[frozenset[str]] = frozenset(
    {"registration_number", "name", "entity_type", "status"}
)


# ---------------------------------------------------------------------------
# Value parsers
#
# Each parser returns ``None`` for a blank input and raises ``ValueError`` for
# a value it cannot interpret.
# ---------------------------------------------------------------------------


def parse_text(value: object) -> str:
    if isinstance(value, str):
        return collapse_whitespace(value)
    if isinstance(value, bool) or not isinstance(value, int | float | Decimal):
        raise ValueError("expected text")
    return str(value)


def parse_code(value: object) -> str | None:
    return normalize_code(parse_text(value)) or None


def parse_identifier(value: object) -> str | None:
    return normalize_identifier(parse_text(value)) or None


def parse_decimal(
    value: object,
    *,
    places: int | None = MONEY_PLACES,
    limit: Decimal | None = MONEY_LIMIT,
) -> Decimal | None:
    """Parse a number, tolerating currency prefixes and thousands separators.

    ``"SGD 100,000.00"``, ``"1,000"`` and ``100000`` all parse; the result is
    quantized to ``places`` decimal places (half-up). Magnitudes of ``limit``
    or more are rejected.
    """

    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("expected a number, got a boolean")
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int | float):
        number = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        match = _NUMBER.search(text)
        if match is None:
            raise ValueError("no number found")
        try:
            number = Decimal(match.group().replace(",", ""))
        except InvalidOperation as exc:
            raise ValueError("malformed number") from exc
    else:
        raise ValueError("expected a number")
    if not number.is_finite():
        raise ValueError("number is not finite")
    if limit is not None and abs(number) >= limit:
        raise ValueError(f"number out of range (limit {limit})")
    if places is None:
        return number
    return quantize_half_up(number, places)


def quantize_half_up(number: Decimal, places: int) -> Decimal:
    """Round to ``places`` decimal places; ``ValueError`` when the result has too many digits."""

    try:
        return number.quantize(quantum(places), rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError("number too large to round") from exc


def parse_percentage(value: object) -> Decimal | None:
    number = parse_decimal(value, places=PERCENT_PLACES, limit=None)
    if number is not None and not 0 <= number <= PERCENT_MAX:
        raise ValueError("percentage must be between 0 and 100")
    return number


def parse_int(value: object) -> int | None:
    number = parse_decimal(value, places=None, limit=SHARE_COUNT_LIMIT)
    if number is None:
        return None
    if number != number.to_integral_value():
        raise ValueError("expected a whole number")
    return int(number)


def parse_date(value: object) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError("expected a date string")
    text = collapse_whitespace(value)
    if not text:
        return None
    with suppress(ValueError):
        return date.fromisoformat(text)
    with suppress(ValueError):
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    for fmt in _DATE_FORMATS:
        with suppress(ValueError):
            return datetime.strptime(text, fmt).date()  # noqa: DTZ007
    raise ValueError("unrecognised date format")


def parse_currency(value: object) -> str | None:
    """Map a currency label to its ISO 4217 code (``"SINGAPORE DOLLAR"`` -> ``SGD``).

    Unknown labels are kept upper-cased rather than dropped.
    """

    text = parse_text(value).upper()
    if not text:
        return None
    compact = re.sub(r"[^A-Z]", "", text)
    if len(compact) == 3:
        return compact
    label = re.sub(r"[^A-Z]+", " ", text).strip()
    if label in _CURRENCY_NAMES:
        return _CURRENCY_NAMES[label]
    token = re.search(r"\b[A-Z]{3}\b", label)
    if token is not None:
        return token.group()
    return text


def _bounded_int(low: int, high: int) -> Parser:
    def parse(value: object) -> int | None:
        number = parse_int(value)
        if number is not None and not low <= number <= high:
            raise ValueError(f"expected a value between {low} and {high}")
        return number

    return parse


def _label_parser[E: StrEnum](
    enum_type: type[E], labels: Mapping[str, E], *, fallback: E | None = None
) -> Callable[[object], E | None]:
    def parse(value: object) -> E | None:
        text = parse_text(value)
        if not text:
            return None
        label = normalize_label(text)
        if label in labels:
            return labels[label]
        with suppress(ValueError):
            return enum_type(label.replace(" ", "_"))
        if fallback is None:
            raise ValueError(f"unknown {enum_type.__name__} label")
        log.debug("Mapping unknown %s label %r to %s", enum_type.__name__, text, fallback)
        return fallback

    return parse


parse_entity_type = _label_parser(EntityType, _ENTITY_TYPE_LABELS, fallback=EntityType.OTHER)
parse_company_status = _label_parser(
    CompanyStatus, _COMPANY_STATUS_LABELS, fallback=CompanyStatus.OTHER
)
parse_officer_role = _label_parser(OfficerRole, _OFFICER_ROLE_LABELS)
parse_shareholder_type = _label_parser(ShareholderType, _SHAREHOLDER_TYPE_LABELS)
parse_identification_type = _label_parser(
    IdentificationType, {}, fallback=IdentificationType.OTHER
)


def format_address(
    *,
    street_name: str | None,
    postal_code: str | None,
    block: str | None = None,
    level: str | None = None,
    unit: str | None = None,
    building_name: str | None = None,
) -> str:
    """Format address parts on one line.

    ``10 Anson Road #09-355 International Plaza Singapore 079903``
    """

    parts: list[str] = []
    if block:
        parts.append(block)
    if street_name:
        parts.append(street_name)
    clean_level = level.lstrip("#") if level else None
    clean_unit = unit.lstrip("#") if unit else None
    if clean_level and clean_unit:
        parts.append(f"#{clean_level}-{clean_unit}")
    elif clean_unit:
        parts.append(f"#{clean_unit}")
    if building_name:
        parts.append(building_name)
    if postal_code:
        parts.append(f"Singapore {postal_code}")
    return collapse_whitespace(" ".join(parts))


def parse_oracle_content(content: str) -> object:
    """Decode the JSON object from an oracle's text answer.

    Markdown code fences and prose around the object are discarded.
    """

    cleaned = content.strip()
    fenced = _CODE_FENCE.match(cleaned)
    if fenced is not None:
        cleaned = fenced.group(1).strip()
    obj = _JSON_OBJECT.search(cleaned)
    if obj is not None:
        cleaned = obj.group()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        log.error("Extraction response is not valid JSON: %.200s", content)
        raise ExtractionShapeError("Extraction response is not valid JSON") from exc


# ---------------------------------------------------------------------------
# Raw payload reading
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class _Source:
    field: str
    path: tuple[str, ...]
    parser: Parser


_COMPANY_SOURCES: Final[tuple[_Source, ...]] = (
    _Source("registration_number", ("entityDetails", "uen"), parse_identifier),
    _Source("name", ("entityDetails", "name"), parse_text),
    _Source("former_name", ("entityDetails", "formerName"), parse_text),
    _Source("entity_type", ("entityDetails", "entityType"), parse_entity_type),
    _Source("status", ("entityDetails", "status"), parse_company_status),
    _Source("status_date", ("entityDetails", "statusDate"), parse_date),
    _Source("incorporation_date", ("entityDetails", "incorporationDate"), parse_date),
    _Source("primary_activity_code", ("ssicActivities", "primary", "code"), parse_code),
    _Source(
        "primary_activity_description",
        ("ssicActivities", "primary", "description"),
        parse_text,
    ),
    _Source("secondary_activity_code", ("ssicActivities", "secondary", "code"), parse_code),
    _Source(
        "secondary_activity_description",
        ("ssicActivities", "secondary", "description"),
        parse_text,
    ),
    _Source("home_currency", ("homeCurrency",), parse_currency),
    _Source("paid_up_capital_amount", ("paidUpCapital", "amount"), parse_decimal),
    _Source("paid_up_capital_currency", ("paidUpCapital", "currency"), parse_currency),
    _Source("issued_capital_amount", ("issuedCapital", "amount"), parse_decimal),
    _Source("issued_capital_currency", ("issuedCapital", "currency"), parse_currency),
    _Source("financial_year_end_day", ("financialYear", "endDay"), _bounded_int(1, 31)),
    _Source("financial_year_end_month", ("financialYear", "endMonth"), _bounded_int(1, 12)),
    _Source("last_agm_date", ("compliance", "lastAgmDate"), parse_date),
    _Source("last_annual_return_date", ("compliance", "lastArFiledDate"), parse_date),
    _Source("accounts_due_date", ("compliance", "accountsDueDate"), parse_date),
    _Source("tax_registration_number", ("taxRegistration", "number"), parse_identifier),
    _Source("tax_registration_date", ("taxRegistration", "date"), parse_date),
)

_OFFICER_SOURCES: Final[tuple[_Source, ...]] = (
    _Source("designation", ("designation",), parse_text),
    _Source("identification_type", ("identificationType",), parse_identification_type),
    _Source("identification_number", ("identificationNumber",), parse_identifier),
    _Source("nationality", ("nationality",), parse_text),
    _Source("address", ("address",), parse_text),
    _Source("appointment_date", ("appointmentDate",), parse_date),
    _Source("cessation_date", ("cessationDate",), parse_date),
)

_SHAREHOLDER_SOURCES: Final[tuple[_Source, ...]] = (
    _Source("shareholder_type", ("type",), parse_shareholder_type),
    _Source("identification_type", ("identificationType",), parse_identification_type),
    _Source("identification_number", ("identificationNumber",), parse_identifier),
    _Source("nationality", ("nationality",), parse_text),
    _Source("place_of_origin", ("placeOfOrigin",), parse_text),
    _Source("address", ("address",), parse_text),
    _Source("number_of_shares", ("numberOfShares",), parse_int),
    _Source("percentage_held", ("percentageHeld",), parse_percentage),
    _Source("currency", ("currency",), parse_currency),
)


def _snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _lookup(mapping: Mapping[str, object], key: str) -> object:
    """Value under ``key`` or its snake_case alias; ``None`` when neither is set."""
    value = mapping.get(key)
    if value is None:
        value = mapping.get(_snake_case(key))
    return value


@dataclass(slots=True)
class _Reader:
    warnings: list[NormalizationWarning] = field(default_factory=list[NormalizationWarning])

    def warn(self, path: str, value: object, reason: str) -> None:
        log.warning("Ignoring extracted value at %s: %s", path, reason)
        self.warnings.append(NormalizationWarning(path=path, value=value, reason=reason))

    def resolve(
        self, source: Mapping[str, object], path: Sequence[str], *, prefix: str = ""
    ) -> tuple[bool, object]:
        """Walk ``path``; ``(False, None)`` when any step is missing or null."""

        current: object = source
        walked = prefix
        for key in path:
            walked = f"{walked}.{key}" if walked else key
            if not isinstance(current, Mapping):
                self.warn(walked, current, "expected an object")
                return False, None
            current = _lookup(current, key)  # pyright: ignore[reportUnknownArgumentType]
            if current is None:
                return False, None
        return True, current

    def read(
        self,
        source: Mapping[str, object],
        spec: _Source,
        *,
        prefix: str = "",
    ) -> tuple[bool, object]:
        present, raw = self.resolve(source, spec.path, prefix=prefix)
        if not present:
            return False, None
        try:
            return True, spec.parser(raw)
        except ValueError as exc:
            path = ".".join(filter(None, (prefix, *spec.path)))
            self.warn(path, raw, str(exc))
            return False, None

    def read_all(
        self,
        source: Mapping[str, object],
        specs: Sequence[_Source],
        *,
        prefix: str = "",
    ) -> dict[str, object]:
        values: dict[str, object] = {}
        for spec in specs:
            present, value = self.read(source, spec, prefix=prefix)
            if present:
                values[spec.field] = value
        return values

    def rows(
        self, source: Mapping[str, object], key: str
    ) -> list[tuple[int, Mapping[str, object]]]:
        raw = _lookup(source, key)
        if raw is None:
            return []
        if isinstance(raw, str | bytes) or not isinstance(raw, Sequence):
            self.warn(key, raw, "expected a list")
            return []
        rows: list[tuple[int, Mapping[str, object]]] = []
        items: Sequence[object] = raw  # pyright: ignore[reportUnknownVariableType]
        for index, item in enumerate(items):
            if isinstance(item, Mapping):
                rows.append((index, item))  # pyright: ignore[reportUnknownArgumentType]
            else:
                self.warn(f"{key}[{index}]", item, "expected an object")
        return rows


def normalize_extraction(raw: object) -> ExtractedCompanyData:
    """Normalize one oracle payload. Raises ``ExtractionShapeError`` for non-objects."""

    if not isinstance(raw, Mapping):
        raise ExtractionShapeError(
            f"Extraction output must be an object, got {type(raw).__name__}"
        )
    payload: Mapping[str, object] = raw  # pyright: ignore[reportUnknownVariableType]
    reader = _Reader()

    values: dict[str, object] = {}
    for spec in _COMPANY_SOURCES:
        present, value = reader.read(payload, spec)
        if not present:
            continue
        if value in (None, "") and spec.field in _REQUIRED_FIELDS:
            reader.warn(".".join(spec.path), value, "blank value for a required field")
            continue
        values[spec.field] = value

    address = _registered_address(payload, reader)
    if address is not None:
        values["registered_address"] = address

    values.update(_capital_from_share_rows(payload, reader, values))

    officers, reported_ceased = _officers(payload, reader)
    shareholders = _shareholders(payload, reader)

    extracted = ExtractedCompanyData(
        **values,  # pyright: ignore[reportArgumentType]
        officers=officers,
        reported_ceased_officers=reported_ceased,
        shareholders=shareholders,
        observed=frozenset(values),
        warnings=tuple(reader.warnings),
    )
    log.info(
        "Normalized extraction: fields=%d officers=%d ceased_officers=%d shareholders=%d "
        "warnings=%d",
        len(extracted.observed),
        len(officers),
        len(reported_ceased),
        len(shareholders),
        len(extracted.warnings),
    )
    return extracted


def _registered_address(payload: Mapping[str, object], reader: _Reader) -> str | None:
    raw = _lookup(payload, "registeredAddress")
    if raw is None:
        return None
    if isinstance(raw, str):
        return collapse_whitespace(raw) or None
    if not isinstance(raw, Mapping):
        reader.warn("registeredAddress", raw, "expected an object or text")
        return None
    parts = reader.read_all(
        raw,  # pyright: ignore[reportUnknownArgumentType]
        (
            _Source("full_address", ("fullAddress",), parse_text),
            _Source("block", ("block",), parse_text),
            _Source("street_name", ("streetName",), parse_text),
            _Source("level", ("level",), parse_text),
            _Source("unit", ("unit",), parse_text),
            _Source("building_name", ("buildingName",), parse_text),
            _Source("postal_code", ("postalCode",), parse_text),
        ),
        prefix="registeredAddress",
    )
    full = parts.pop("full_address", None)
    if isinstance(full, str) and full:
        return full
    formatted = format_address(
        street_name=_str_or_none(parts.get("street_name")),
        postal_code=_str_or_none(parts.get("postal_code")),
        block=_str_or_none(parts.get("block")),
        level=_str_or_none(parts.get("level")),
        unit=_str_or_none(parts.get("unit")),
        building_name=_str_or_none(parts.get("building_name")),
    )
    return formatted or None


def _str_or_none(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


def _capital_from_share_rows(
    payload: Mapping[str, object], reader: _Reader, values: Mapping[str, object]
) -> dict[str, object]:
    """Derive paid-up and issued capital from ``shareCapital`` rows when not stated directly.

    Treasury shares never count; paid-up capital only counts rows marked paid up.
    """

    wants_paid_up = "paid_up_capital_amount" not in values
    wants_issued = "issued_capital_amount" not in values
    if not (wants_paid_up or wants_issued):
        return {}
    rows = reader.rows(payload, "shareCapital")
    if not rows:
        return {}

    paid_up = Decimal(0)
    issued = Decimal(0)
    counted = 0
    currency: str | None = None
    for index, row in rows:
        prefix = f"shareCapital[{index}]"
        parsed = reader.read_all(
            row,
            (
                _Source("total_value", ("totalValue",), parse_decimal),
                _Source("number_of_shares", ("numberOfShares",), parse_int),
                _Source("par_value", ("parValue",), parse_decimal),
                _Source("currency", ("currency",), parse_currency),
            ),
            prefix=prefix,
        )
        total = _row_total(parsed)
        if total is None:
            reader.warn(prefix, dict(row), "share capital row has no value")
            continue
        if currency is None and isinstance(parsed.get("currency"), str):
            currency = str(parsed["currency"])
        counted += 1
        if bool(_lookup(row, "isTreasury")):
            continue
        issued += total
        if bool(_lookup(row, "isPaidUp")):
            paid_up += total

    if not counted:
        return {}

    derived: dict[str, object] = {}
    totals = (("paid_up", wants_paid_up, paid_up), ("issued", wants_issued, issued))
    for kind, wanted, amount in totals:
        if not wanted:
            continue
        try:
            if abs(amount) >= MONEY_LIMIT:
                raise ValueError(f"number out of range (limit {MONEY_LIMIT})")
            derived[f"{kind}_capital_amount"] = quantize_half_up(amount, MONEY_PLACES)
        except ValueError as exc:
            reader.warn("shareCapital", str(amount), f"derived {kind} capital: {exc}")
            continue
        derived[f"{kind}_capital_currency"] = (
            values.get(f"{kind}_capital_currency") or currency or DEFAULT_CURRENCY
        )
    return derived


def _row_total(parsed: Mapping[str, object]) -> Decimal | None:
    total = parsed.get("total_value")
    if isinstance(total, Decimal):
        return total
    shares = parsed.get("number_of_shares")
    par = parsed.get("par_value")
    if isinstance(shares, int) and isinstance(par, Decimal):
        return par * shares
    return None


def _row_name(reader: _Reader, row: Mapping[str, object], prefix: str) -> str | None:
    present, name = reader.read(row, _Source("name", ("name",), parse_text), prefix=prefix)
    if not present or not name:
        reader.warn(f"{prefix}.name", _lookup(row, "name"), "roster row has no name")
        return None
    return str(name)


def _officers(
    payload: Mapping[str, object], reader: _Reader
) -> tuple[tuple[ExtractedOfficer, ...], tuple[ExtractedOfficer, ...]]:
    current: list[ExtractedOfficer] = []
    ceased: list[ExtractedOfficer] = []
    for index, row in reader.rows(payload, "officers"):
        prefix = f"officers[{index}]"
        name = _row_name(reader, row, prefix)
        if name is None:
            continue
        role = _officer_role(reader, row, prefix)
        values = reader.read_all(row, _OFFICER_SOURCES, prefix=prefix)
        officer = ExtractedOfficer(
            index=index,
            name=name,
            role=role,
            observed=frozenset(values),
            **values,  # pyright: ignore[reportArgumentType]
        )
        if officer.cessation_date is not None:
            ceased.append(officer)
        else:
            current.append(officer)
    return tuple(current), tuple(ceased)


def _officer_role(reader: _Reader, row: Mapping[str, object], prefix: str) -> OfficerRole:
    present, role = reader.read(row, _Source("role", ("role",), parse_officer_role), prefix=prefix)
    if present and isinstance(role, OfficerRole):
        return role
    return OfficerRole.DIRECTOR


def _shareholders(
    payload: Mapping[str, object], reader: _Reader
) -> tuple[ExtractedShareholder, ...]:
    shareholders: list[ExtractedShareholder] = []
    for index, row in reader.rows(payload, "shareholders"):
        prefix = f"shareholders[{index}]"
        name = _row_name(reader, row, prefix)
        if name is None:
            continue
        _, share_class = reader.read(
            row, _Source("share_class", ("shareClass",), parse_code), prefix=prefix
        )
        values = reader.read_all(row, _SHAREHOLDER_SOURCES, prefix=prefix)
        shareholders.append(
            ExtractedShareholder(
                index=index,
                name=name,
                share_class=str(share_class) if share_class else DEFAULT_SHARE_CLASS,
                observed=frozenset(values),
                **values,  # pyright: ignore[reportArgumentType]
            )
        )
    return tuple(shareholders)
