# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import mimetypes
import sys
from datetime import UTC, date, datetime
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from regsync.app import apply_company_update, extract_document, preview_company_update
from regsync.config import configure_logging
from regsync.domain.errors import NotFoundError, ValidationError
from regsync.domain.model import AsOf, RosterAction
from regsync.domain.ports import ExtractionInput
from regsync.domain.reconciliation import ApplyRequest

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from regsync.domain.reconciliation import (
        ApplyResult,
        CompanyPreview,
        FieldDifference,
        RosterChanges,
        RosterReconciliation,
    )

log = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INVALID = 2
EXIT_NOT_FOUND = 3


def _add_company_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--company-id",
        type=str,
        required=True,
        help="Id of the company record to compare against",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Preview and apply registry extract changes to company records"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    preview = subparsers.add_parser("preview", help="Show proposed changes without writing")
    _add_company_argument(preview)
    source = preview.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--extraction",
        type=Path,
        help="JSON file holding an already extracted registry document",
    )
    source.add_argument(
        "--document",
        type=Path,
        help="Registry extract (PDF or image) to send to the extraction service",
    )
    preview.add_argument(
        "--save-extraction",
        type=Path,
        metavar="FILE",
        help="Write the extracted JSON to FILE so that apply can reuse it",
    )

    # apply only reads a pinned extraction file
    apply = subparsers.add_parser("apply", help="Apply approved changes")
    _add_company_argument(apply)
    apply.add_argument(
        "--extraction",
        type=Path,
        required=True,
        help="JSON file the reviewed preview was computed from (see preview --save-extraction)",
    )
    apply.add_argument(
        "--as-of-version",
        type=int,
        required=True,
        help="Company version the reviewed preview was based on",
    )
    apply.add_argument(
        "--as-of-modified-at",
        type=str,
        help="ISO-8601 modification timestamp of the reviewed preview (defaults to current)",
    )
    apply.add_argument(
        "--approve",
        action="append",
        metavar="FIELD",
        help="Scalar field to apply; repeat for several (default: all proposed fields)",
    )
    apply.add_argument(
        "--officer-action",
        action="append",
        default=[],
        metavar="ID=ACTION",
        help="Disposition for an unmatched officer: keep, cease or ignore",
    )
    apply.add_argument(
        "--shareholder-action",
        action="append",
        default=[],
        metavar="ID=ACTION",
        help="Disposition for an unmatched shareholder: keep, cease or ignore",
    )
    apply.add_argument(
        "--new-officer",
        action="append",
        type=int,
        metavar="INDEX",
        help="Extract index of a new officer to add (default: all new officers)",
    )
    apply.add_argument(
        "--new-shareholder",
        action="append",
        type=int,
        metavar="INDEX",
        help="Extract index of a new shareholder to add (default: all new shareholders)",
    )
    apply.add_argument(
        "--cessation-date",
        type=str,
        help="ISO date to record on ceased rows (default: reported date or today)",
    )
    apply.add_argument(
        "--actor",
        type=str,
        help="Name recorded in the audit log",
    )

    return parser.parse_args(list(argv))


def _parse_iso_datetime(value: str) -> datetime:
    try:
        normalized = value.strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        dt = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp: {value}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _parse_iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid ISO date: {value}") from exc


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _parse_actions(values: Sequence[str]) -> dict[UUID, RosterAction]:
    actions: dict[UUID, RosterAction] = {}
    for value in values:
        row_id, sep, action = value.partition("=")
        if not sep:
            raise ValueError(f"Expected ID=ACTION, got {value!r}")
        try:
            actions[_parse_uuid(row_id.strip())] = RosterAction(action.strip().lower())
        except ValueError as exc:
            raise ValueError(f"Invalid roster action: {value}") from exc
    return actions


def _read_extraction(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON") from exc


def _read_document(path: Path) -> ExtractionInput:
    media_type, _ = mimetypes.guess_type(path.name)
    return ExtractionInput(
        content=path.read_bytes(),
        media_type=media_type or "application/pdf",
        filename=path.name,
    )


def _write_extraction(path: Path, raw: object) -> None:
    path.write_text(json.dumps(raw, indent=2, default=str), encoding="utf-8")
    log.info(f"Saved extraction to {path}")


def _build_preview(args: argparse.Namespace) -> CompanyPreview:
    company_id = _parse_uuid(args.company_id)
    usage = None
    if getattr(args, "document", None) is not None:
        result = extract_document(_read_document(args.document))
        raw, usage = result.data, result.usage
    else:
        raw = _read_extraction(args.extraction)
    save_to: Path | None = getattr(args, "save_extraction", None)
    if save_to is not None:
        _write_extraction(save_to, raw)
    return preview_company_update(company_id, raw, usage=usage)


def _build_request(args: argparse.Namespace, preview: CompanyPreview) -> ApplyRequest:
    modified_at = (
        _parse_iso_datetime(args.as_of_modified_at)
        if args.as_of_modified_at
        else preview.as_of.last_modified_at
    )
    return ApplyRequest(
        as_of=AsOf(version=args.as_of_version, last_modified_at=modified_at),
        approved_fields=args.approve,
        officer_actions=_parse_actions(args.officer_action),
        shareholder_actions=_parse_actions(args.shareholder_action),
        approved_new_officers=args.new_officer,
        approved_new_shareholders=args.new_shareholder,
        cessation_date=_parse_iso_date(args.cessation_date) if args.cessation_date else None,
        actor=args.actor,
    )


def _difference_to_dict(difference: FieldDifference) -> dict[str, object]:
    return {
        "field": difference.field,
        "label": difference.label,
        "category": difference.category,
        "old": difference.old_value,
        "new": difference.new_value,
    }


def _roster_to_dict(reconciliation: RosterReconciliation) -> dict[str, object]:
    return {
        "matched": [
            {
                "id": match.existing_id,
                "name": match.existing.name,
                "role": match.existing.roster_role,
                "match": match.match_kind,
                "changes": [_difference_to_dict(change) for change in match.changes],
            }
            for match in reconciliation.matched
        ],
        "new": [
            {"index": row.index, "name": row.name, "role": row.roster_role}
            for row in reconciliation.new_candidates
        ],
        "unmatched": [
            {
                "id": row.existing_id,
                "name": row.existing.name,
                "role": row.existing.roster_role,
                "reported_cessation_date": row.reported_cessation_date,
            }
            for row in reconciliation.unmatched_existing
        ],
    }


def preview_to_dict(preview: CompanyPreview) -> dict[str, object]:
    return {
        "company_id": preview.company_id,
        "registration_number": preview.registration_number,
        "as_of": {
            "version": preview.as_of.version,
            "last_modified_at": preview.as_of.last_modified_at,
        },
        "differences": [_difference_to_dict(difference) for difference in preview.differences],
        "officers": _roster_to_dict(preview.officers),
        "shareholders": _roster_to_dict(preview.shareholders),
        "warnings": [
            {"path": warning.path, "value": warning.value, "reason": warning.reason}
            for warning in preview.warnings
        ],
        "usage": (
            {
                "input_tokens": preview.usage.input_tokens,
                "output_tokens": preview.usage.output_tokens,
                "total_tokens": preview.usage.total_tokens,
            }
            if preview.usage is not None
            else None
        ),
    }


def _changes_to_dict(changes: RosterChanges) -> dict[str, int]:
    return {
        "added": changes.added,
        "updated": changes.updated,
        "ceased": changes.ceased,
        "kept": changes.kept,
        "ignored": changes.ignored,
        "names_confirmed": changes.names_confirmed,
        "percentages_recalculated": changes.recalculated,
    }


def result_to_dict(result: ApplyResult) -> dict[str, object]:
    return {
        "company_id": result.company_id,
        "version": result.version,
        "updated_fields": list(result.updated_fields),
        "officers": _changes_to_dict(result.officers),
        "shareholders": _changes_to_dict(result.shareholders),
        "warning": result.concurrency_warning.message if result.concurrency_warning else None,
    }


def _print_json(payload: dict[str, object]) -> None:
    print(json.dumps(payload, indent=2, default=str))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        preview = _build_preview(parsed_args)
        if parsed_args.command == "preview":
            _print_json(preview_to_dict(preview))
        elif parsed_args.command == "apply":
            result = apply_company_update(preview, _build_request(parsed_args, preview))
            if result.concurrency_warning is not None:
                log.warning(result.concurrency_warning.message)
            _print_json(result_to_dict(result))
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (ValueError, ValidationError):
        log.exception("Invalid request")
        sys.exit(EXIT_INVALID)
    except NotFoundError:
        log.exception("Record not found")
        sys.exit(EXIT_NOT_FOUND)
    except Exception:
        log.exception("Fatal error")
        sys.exit(EXIT_FAILURE)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
