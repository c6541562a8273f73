"""Pydantic schemas for visit ingestion.

Ingestion payloads come from untrusted browsers, so validation here never
fails: bad fields are dropped and long fields are cut to size.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# Per-field truncation limits (characters).
FIELD_LIMITS = {
    "user_agent": 1024,
    "page": 512,
    "referrer": 512,
    "tz": 128,
    "screen": 64,
}
LANGUAGE_MAX_LENGTH = 32
LANGUAGES_MAX_ITEMS = 10


def clean_text(value: Any, max_length: int) -> Optional[str]:
    """Trim and truncate a string; anything else (or blank) becomes None."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    return trimmed[:max_length]


class TrackRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    page: Optional[str] = None
    referrer: Optional[str] = None
    tz: Optional[str] = None
    screen: Optional[str] = None
    languages: List[str] = Field(default_factory=list)

    @field_validator("page", "referrer", "tz", "screen", mode="before")
    @classmethod
    def sanitize_text(cls, v: Any, info: ValidationInfo) -> Optional[str]:
        return clean_text(v, FIELD_LIMITS[info.field_name])

    @field_validator("languages", mode="before")
    @classmethod
    def sanitize_languages(cls, v: Any) -> List[str]:
        if not isinstance(v, (list, tuple)):
            return []
        cleaned = (clean_text(item, LANGUAGE_MAX_LENGTH) for item in v)
        return [item for item in cleaned if item][:LANGUAGES_MAX_ITEMS]

    @classmethod
    def from_payload(cls, payload: Any) -> "TrackRequest":
        if not isinstance(payload, dict):
            payload = {}
        return cls.model_validate(payload)
