"""Port for the document-extraction oracle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class ExtractionInput:
    """A registry extract to read: raw document bytes plus their media type."""

    content: bytes
    media_type: str = "application/pdf"
    filename: str | None = None


@dataclass(frozen=True, slots=True)
class TokenUsage:
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Untyped structured output of the oracle; normalization happens downstream."""

    data: object
    usage: TokenUsage | None = None
    model: str | None = None


@runtime_checkable
class ExtractionOracle(Protocol):
    """Callable port turning a registry extract into untyped structured data."""

    def __call__(self, document: ExtractionInput) -> ExtractionResult: ...


__all__ = ["ExtractionInput", "ExtractionOracle", "ExtractionResult", "TokenUsage"]
