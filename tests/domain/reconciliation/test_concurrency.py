from __future__ import annotations

from datetime import UTC, datetime, timedelta

from regsync.domain.model import AsOf
from regsync.domain.reconciliation import check_concurrency

PREVIEWED_AT = datetime(2026, 1, 5, 9, 0, tzinfo=UTC)


def test_current_preview_passes() -> None:
    as_of = AsOf(version=3, last_modified_at=PREVIEWED_AT)

    assert check_concurrency(as_of, AsOf(version=3, last_modified_at=PREVIEWED_AT)) is None


def test_newer_version_warns() -> None:
    modified_at = PREVIEWED_AT + timedelta(minutes=5)

    warning = check_concurrency(
        AsOf(version=3, last_modified_at=PREVIEWED_AT),
        AsOf(version=4, last_modified_at=modified_at),
    )

    assert warning is not None
    assert warning.previewed_version == 3
    assert warning.current_version == 4
    assert warning.modified_at == modified_at
    assert "modified by another user" in warning.message
    assert "version 4, preview was based on version 3" in str(warning)


def test_later_timestamp_alone_warns() -> None:
    warning = check_concurrency(
        AsOf(version=3, last_modified_at=PREVIEWED_AT),
        AsOf(version=3, last_modified_at=PREVIEWED_AT + timedelta(seconds=1)),
    )

    assert warning is not None


def test_naive_timestamps_are_treated_as_utc() -> None:
    naive = AsOf(version=1, last_modified_at=PREVIEWED_AT.replace(tzinfo=None))

    assert naive.last_modified_at == PREVIEWED_AT
    assert check_concurrency(naive, AsOf(version=1, last_modified_at=PREVIEWED_AT)) is None
