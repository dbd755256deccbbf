"""HTTP client for the document-extraction service."""

from __future__ import annotations

import asyncio
import base64
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from regsync.adapters.http_resilience import ResilientClient
from regsync.config.extraction import ExtractionConfig, get_extraction_config
from regsync.domain.extraction import parse_oracle_content
from regsync.domain.ports import ExtractionOracle, ExtractionResult, TokenUsage

from .schema import DocumentPayload, ErrorResponse, ExtractionRequestPayload, ExtractionResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from regsync.config.http_resilience import ResilienceConfig
    from regsync.domain.ports import ExtractionInput

log = getLogger(__name__)

EXTRACTION_SYSTEM_PROMPT = """\
You read Singapore business profile extracts and answer with one JSON object.
Use these top-level keys: entityDetails {uen, name, formerName, entityType,
status, statusDate, incorporationDate}, ssicActivities {primary, secondary}
each {code, description}, registeredAddress {block, streetName, level, unit,
buildingName, postalCode}, homeCurrency, paidUpCapital {amount, currency},
issuedCapital {amount, currency}, shareCapital [{shareClass, currency,
numberOfShares, parValue, totalValue, isPaidUp, isTreasury}], financialYear
{endDay, endMonth}, compliance {lastAgmDate, lastArFiledDate, accountsDueDate},
taxRegistration {number, date}, officers [{name, role, designation,
identificationType, identificationNumber, nationality, address,
appointmentDate, cessationDate}], shareholders [{name, type, shareClass,
identificationType, identificationNumber, nationality, placeOfOrigin, address,
numberOfShares, percentageHeld, currency}].
Use null for anything the document does not show. Dates as YYYY-MM-DD."""

EXTRACTION_USER_PROMPT = "Extract the company information from the attached business profile."


class ExtractionOracleError(RuntimeError):
    """Raised when the extraction service fails or answers with an unusable payload."""

    def __init__(self, message: str, *, code: str | int | None = None) -> None:
        super().__init__(message)
        self.code = code


class HttpExtractionOracle:
    """Sends a registry extract to the extraction service and returns its raw answer.

    The answer is only decoded into a JSON object here; all field-level
    interpretation is left to ``normalize_extraction``.
    """

    def __init__(
        self,
        *,
        config: ExtractionConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config or get_extraction_config()
        self._resilience = self._config.resilience
        self._client_factory = client_factory or ResilientClient

    def __call__(self, document: ExtractionInput) -> ExtractionResult:
        return asyncio.run(self._extract_async(document))

    async def _extract_async(self, document: ExtractionInput) -> ExtractionResult:
        payload = ExtractionRequestPayload(
            model=self._config.model,
            system_prompt=EXTRACTION_SYSTEM_PROMPT,
            user_prompt=EXTRACTION_USER_PROMPT,
            document=DocumentPayload(
                media_type=document.media_type,
                data=base64.b64encode(document.content).decode("ascii"),
                filename=document.filename,
            ),
        )
        log.info(
            "Requesting extraction: model=%s, media_type=%s, bytes=%d",
            self._config.model,
            document.media_type,
            len(document.content),
        )
        async with self._client_factory(self._resilience) as client:
            response = await client.post(
                self._config.api_url,
                json=payload.model_dump(mode="json", by_alias=True),
                headers={"Authorization": f"Bearer {self._config.api_key}"},
            )
        envelope = self._parse_response(response)

        data: object = envelope.content
        if isinstance(data, str):
            data = parse_oracle_content(data)

        usage = (
            TokenUsage(
                input_tokens=envelope.usage.input_tokens,
                output_tokens=envelope.usage.output_tokens,
            )
            if envelope.usage is not None
            else None
        )
        if usage is not None:
            log.info(
                "Extraction finished: model=%s, input_tokens=%d, output_tokens=%d",
                envelope.model or self._config.model,
                usage.input_tokens,
                usage.output_tokens,
            )
        return ExtractionResult(data=data, usage=usage, model=envelope.model or self._config.model)

    def _parse_response(self, response: httpx.Response) -> ExtractionResponse:
        try:
            payload = response.json()
        except ValueError as exc:
            raise ExtractionOracleError(
                f"Extraction service returned non-JSON response (HTTP {response.status_code})"
            ) from exc

        if isinstance(payload, dict) and "error" in payload:
            try:
                error_payload = ErrorResponse.model_validate(payload)
            except PydanticValidationError:
                error_payload = None
            if error_payload is not None:
                log.error(
                    f"Extraction service error {error_payload.error.code}: "
                    f"{error_payload.error.message}"
                )
                raise ExtractionOracleError(
                    error_payload.error.message, code=error_payload.error.code
                )

        if response.is_error:
            raise ExtractionOracleError(
                f"Extraction service failed with HTTP {response.status_code}",
                code=response.status_code,
            )

        try:
            return ExtractionResponse.model_validate(payload)
        except PydanticValidationError as exc:
            raise ExtractionOracleError("Unexpected extraction service payload") from exc


if TYPE_CHECKING:
    _oracle_check: ExtractionOracle = HttpExtractionOracle()
