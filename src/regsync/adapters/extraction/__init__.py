"""Public interface for the extraction service adapter."""

from __future__ import annotations

from .client import EXTRACTION_SYSTEM_PROMPT, ExtractionOracleError, HttpExtractionOracle
from .schema import ExtractionResponse, UsagePayload

__all__ = [
    "EXTRACTION_SYSTEM_PROMPT",
    "ExtractionOracleError",
    "ExtractionResponse",
    "HttpExtractionOracle",
    "UsagePayload",
]
