from __future__ import annotations

import pytest

from regsync.domain.text import (
    collapse_whitespace,
    normalize_code,
    normalize_identifier,
    normalize_label,
    normalize_name,
)


@pytest.mark.parametrize(
    ("left", "right"),
    [
        ("TAN  Wei-Ming", "tan wei ming"),
        ("José Ng", "JOSE NG"),
        ("O'Brien, Sean", "o brien sean"),
        ("Lim_Mei Ling", "lim mei ling"),
    ],
)
def test_normalize_name_ignores_case_accents_and_punctuation(left: str, right: str) -> None:
    assert normalize_name(left) == normalize_name(right)


def test_normalize_name_keeps_distinct_names_apart() -> None:
    assert normalize_name("Jane Lim") != normalize_name("Jane Lim Tan")


def test_code_and_identifier_normalization() -> None:
    assert collapse_whitespace("  10   Anson\tRoad ") == "10 Anson Road"
    assert normalize_code(" sgd ") == "SGD"
    assert normalize_identifier(" 2019 12345a ") == "201912345A"
    assert normalize_label("private_limited-company") == "PRIVATE LIMITED COMPANY"
