"""AI 기반 요약/설명 제안 서비스(AI-assisted summary and description suggestions)."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from common_lib.ai_clients.base import IAIClient
from common_lib.logger import get_logger
from src.core.data.report import Report
from src.core.utils.text import remove_newlines, trim_whitespace

from .models import Suggestion
from .prompts import SUGGEST_PROMPT_TEMPLATE

logger = get_logger(__name__)


def build_prompt(r: Report) -> str:
    """리포트로부터 프롬프트 생성(Build the suggestion prompt for a report)."""

    packages = [p.package for m in r.modules for p in m.packages if p.package] or [m.module for m in r.modules]
    return SUGGEST_PROMPT_TEMPLATE.format(
        packages="\n".join(f"- {p}" for p in packages) or "- unknown",
        summary=r.summary or "(none)",
        description=r.description.strip() or "(none)",
        references="\n".join(f"- {ref.url}" for ref in r.references) or "- (none)",
    )


def _try_parse_json(text: str) -> Optional[Dict[str, Any]]:
    """JSON 파싱 시도(Attempt to parse a JSON object from model output)."""

    start_idx = text.find("{")
    end_idx = text.rfind("}")
    if start_idx == -1 or end_idx <= start_idx:
        return None
    try:
        data = json.loads(text[start_idx:end_idx + 1])
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def parse_suggestion(raw: str) -> Optional[Suggestion]:
    data = _try_parse_json(raw)
    if data is None:
        return None
    try:
        return Suggestion.model_validate(data)
    except ValidationError:
        return None


class Suggester:
    """요약/설명 제안기(Asks an AI client for report text suggestions)."""

    def __init__(self, client: IAIClient) -> None:
        self._client = client

    async def suggest(self, r: Report, max_tries: int = 1) -> List[Suggestion]:
        """
        제안 생성(Generate up to max_tries distinct suggestions).

        Unparsable answers are discarded. If the client is disabled or fails,
        the suggestions gathered so far are returned.
        """
        prompt = build_prompt(r)
        suggestions: List[Suggestion] = []
        for attempt in range(1, max_tries + 1):
            try:
                raw = await self._client.chat(prompt)
            except RuntimeError as exc:
                logger.warning("%s: suggestion request failed (attempt %d): %s", r.id, attempt, exc)
                break
            s = parse_suggestion(raw)
            if s is None:
                logger.info("%s: discarded unparsable suggestion (attempt %d)", r.id, attempt)
                continue
            if s not in suggestions:
                suggestions.append(s)
        logger.info("%s: got %d suggestion(s)", r.id, len(suggestions))
        return suggestions

    @staticmethod
    def apply(r: Report, s: Suggestion) -> None:
        """제안을 리포트에 반영(Copy a suggestion into the report)."""

        r.summary = remove_newlines(s.summary)
        r.description = trim_whitespace(s.description)
