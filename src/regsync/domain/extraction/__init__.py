"""Extraction normalization: untyped oracle output -> typed extracted shapes."""

from __future__ import annotations

from regsync.domain.extraction.contracts import (
    ExtractedCompanyData,
    ExtractedOfficer,
    ExtractedRosterRow,
    ExtractedShareholder,
    NormalizationWarning,
)
from regsync.domain.extraction.normalize import (
    format_address,
    normalize_extraction,
    parse_currency,
    parse_date,
    parse_decimal,
    parse_oracle_content,
    parse_percentage,
)

__all__ = [
    "ExtractedCompanyData",
    "ExtractedOfficer",
    "ExtractedRosterRow",
    "ExtractedShareholder",
    "NormalizationWarning",
    "format_address",
    "normalize_extraction",
    "parse_currency",
    "parse_date",
    "parse_decimal",
    "parse_oracle_content",
    "parse_percentage",
]
