"""Pydantic models describing the extraction service payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _none_to_zero(value: object) -> object:
    return 0 if value is None else value


class ExtractionBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class DocumentPayload(ExtractionBaseModel):
    media_type: str = Field(serialization_alias="mediaType")
    data: str
    filename: str | None = None


class ExtractionRequestPayload(ExtractionBaseModel):
    model: str
    system_prompt: str = Field(serialization_alias="systemPrompt")
    user_prompt: str = Field(serialization_alias="userPrompt")
    document: DocumentPayload
    json_mode: bool = Field(default=True, serialization_alias="jsonMode")
    temperature: float = 0.1


class UsagePayload(ExtractionBaseModel):
    input_tokens: int = Field(default=0, alias="inputTokens")
    output_tokens: int = Field(default=0, alias="outputTokens")

    _normalize_counts = field_validator("input_tokens", "output_tokens", mode="before")(
        _none_to_zero
    )


class ErrorDetail(ExtractionBaseModel):
    message: str
    code: str | int | None = None


class ErrorResponse(ExtractionBaseModel):
    error: ErrorDetail


class ExtractionResponse(ExtractionBaseModel):
    """Envelope around the model answer.

    ``content`` is usually the model's text (JSON, possibly fenced); some
    deployments return the decoded object directly.
    """

    content: str | dict[str, object]
    model: str | None = None
    usage: UsagePayload | None = None
