"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from regsync.adapters.extraction import HttpExtractionOracle
from regsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCompanyUnitOfWork,
    is_started,
    startup,
)
from regsync.domain.errors import NotFoundError
from regsync.domain.extraction import normalize_extraction
from regsync.domain.ports.unit_of_work import CompanyUnitOfWork
from regsync.domain.reconciliation import build_preview
from regsync.domain.reconciliation.apply import apply_company_update as apply_approved_changes

if TYPE_CHECKING:
    from uuid import UUID

    from regsync.domain.ports import (
        ExtractionInput,
        ExtractionOracle,
        ExtractionResult,
        TokenUsage,
    )
    from regsync.domain.reconciliation import ApplyRequest, ApplyResult, CompanyPreview

UnitOfWorkFactory = Callable[[], CompanyUnitOfWork]


log = getLogger(__name__)


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyCompanyUnitOfWork


def preview_company_update(
    company_id: UUID,
    raw_extraction: object,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    usage: TokenUsage | None = None,
) -> CompanyPreview:
    """Normalize ``raw_extraction`` and compare it with the stored company. Writes nothing."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    extracted = normalize_extraction(raw_extraction)

    with effective_uow() as uow:
        repositories = uow.repositories
        company = repositories.companies.get(company_id)
        if company is None:
            raise NotFoundError(f"Company {company_id} does not exist")
        officers = repositories.officers.list_current(company_id)
        shareholders = repositories.shareholders.list_current(company_id)
        contact_ids = {
            row.contact_id
            for row in (*officers, *shareholders)
            if row.contact_id is not None
        }
        contacts = repositories.contacts.get_many(contact_ids) if contact_ids else {}

        return build_preview(
            company,
            extracted,
            officers=officers,
            shareholders=shareholders,
            contacts=contacts,
            usage=usage,
        )


def extract_document(
    document: ExtractionInput, *, oracle: ExtractionOracle | None = None
) -> ExtractionResult:
    """Run the extraction oracle on ``document``; the raw output can be saved and reused."""

    effective_oracle = oracle or HttpExtractionOracle()
    log.info(f"Extracting registry document {document.filename or '<unnamed>'}")
    return effective_oracle(document)


def extract_and_preview(
    company_id: UUID,
    document: ExtractionInput,
    *,
    oracle: ExtractionOracle | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> CompanyPreview:
    """Run the extraction oracle on ``document`` and preview the result."""

    result = extract_document(document, oracle=oracle)
    return preview_company_update(
        company_id,
        result.data,
        unit_of_work_factory=unit_of_work_factory,
        usage=result.usage,
    )


def apply_company_update(
    preview: CompanyPreview,
    request: ApplyRequest,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ApplyResult:
    """Write the approved parts of ``preview`` using the configured adapters."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    return apply_approved_changes(preview, request, unit_of_work_factory=effective_uow)
