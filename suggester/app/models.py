"""Suggester 데이터 모델(Suggester data models)."""
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class Suggestion(BaseModel):
    """요약/설명 제안(Suggested summary and description for a report)."""

    summary: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)

    @field_validator("summary", "description", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v
