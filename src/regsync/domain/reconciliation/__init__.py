"""Preview and apply of registry-extract changes against authoritative company records.

Pipeline:
- ``diff``: scalar company fields
- ``roster``: officer and shareholder rows
- ``concurrency``: stale-preview detection
- ``apply``: selective, transactional write-back
"""

from __future__ import annotations

from .apply import (
    ApplyRequest,
    ApplyResult,
    RosterChanges,
    apply_company_update,
    validate_apply_request,
)
from .compare import FieldCategory, FieldDifference, FieldSpec, ValueKind
from .concurrency import ConcurrencyWarning, check_concurrency
from .diff import COMPANY_FIELDS, check_registration_number, diff_company
from .preview import CompanyPreview, build_preview
from .roster import (
    MatchedRow,
    MatchKind,
    RosterReconciliation,
    UnmatchedExisting,
    reconcile_officers,
    reconcile_roster,
    reconcile_shareholders,
)

__all__ = [
    "COMPANY_FIELDS",
    "ApplyRequest",
    "ApplyResult",
    "CompanyPreview",
    "ConcurrencyWarning",
    "FieldCategory",
    "FieldDifference",
    "FieldSpec",
    "MatchKind",
    "MatchedRow",
    "RosterChanges",
    "RosterReconciliation",
    "UnmatchedExisting",
    "ValueKind",
    "apply_company_update",
    "build_preview",
    "check_concurrency",
    "check_registration_number",
    "diff_company",
    "reconcile_officers",
    "reconcile_roster",
    "reconcile_shareholders",
    "validate_apply_request",
]
