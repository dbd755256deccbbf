"""Extraction oracle configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import optional_env_float, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

EXTRACTION_TIMEOUT_SECONDS = 120.0
DEFAULT_EXTRACTION_MODEL = "default"


@dataclass(frozen=True)
class ExtractionConfig:
    """Holds extraction oracle API configuration values."""

    api_url: str
    api_key: str
    model: str
    resilience: ResilienceConfig


def get_extraction_config(*, resilience: ResilienceConfig | None = None) -> ExtractionConfig:
    values = require_env_vars(("EXTRACTION_API_URL", "EXTRACTION_API_KEY"))
    api_url = values["EXTRACTION_API_URL"]
    return ExtractionConfig(
        api_url=api_url,
        api_key=values["EXTRACTION_API_KEY"],
        model=os.getenv("EXTRACTION_MODEL") or DEFAULT_EXTRACTION_MODEL,
        resilience=resilience
        or ResilienceConfig(
            name="extraction",
            base_url=api_url,
            timeout_seconds=optional_env_float(
                "EXTRACTION_TIMEOUT_SECONDS", EXTRACTION_TIMEOUT_SECONDS
            ),
            ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
        ),
    )
