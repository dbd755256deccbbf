"""Text normalization shared by extraction, diffing and roster matching."""

from __future__ import annotations

import re
import unicodedata

_WHITESPACE = re.compile(r"\s+")
_NAME_PUNCTUATION = re.compile(r"[^\w\s]")


def collapse_whitespace(value: str) -> str:
    """Trim and collapse internal runs of whitespace to one space."""
    return _WHITESPACE.sub(" ", value).strip()


def normalize_code(value: str) -> str:
    """Codes compare upper-cased with collapsed whitespace."""
    return collapse_whitespace(value).upper()


def normalize_identifier(value: str) -> str:
    """Identifiers (registration and identification numbers) drop all whitespace."""
    return _WHITESPACE.sub("", value).upper()


def normalize_name(value: str) -> str:
    """Matching key for person and corporate names.

    Case, accents, punctuation and whitespace are ignored, so
    ``"TAN  Wei-Ming"`` and ``"tan wei ming"`` produce the same key.
    """

    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    without_punctuation = _NAME_PUNCTUATION.sub(" ", stripped.replace("_", " "))
    return collapse_whitespace(without_punctuation).casefold()


def normalize_label(value: str) -> str:
    """Key for enum label tables: upper-case, separators as single spaces."""
    return collapse_whitespace(re.sub(r"[_\-]+", " ", value)).upper()
