"""Claude API 클라이언트 구현(Claude API client implementation)."""
from __future__ import annotations

import asyncio
from typing import Any, List

from anthropic import Anthropic

from ..config import get_settings
from ..logger import get_logger
from ..retry_config import get_retry_decorator
from .base import IAIClient

logger = get_logger(__name__)


class ClaudeClient(IAIClient):
    """Claude API 래퍼(Wrapper for Claude API using Anthropic SDK)."""

    def __init__(self, timeout: float = 30.0) -> None:
        settings = get_settings()
        self._api_key = settings.claude_api_key.strip()
        self._timeout = timeout
        self._allow_external = settings.allow_external_calls
        self._default_model = settings.claude_model
        self._default_max_tokens = 1024
        self._client = (
            Anthropic(api_key=self._api_key, timeout=timeout, max_retries=0) if self._api_key else None
        )
        if self._client is None:
            logger.warning("VR_CLAUDE_API_KEY is not set; text suggestions are unavailable.")

    @get_retry_decorator()
    async def _create(self, **params: Any) -> Any:
        # Anthropic SDK는 동기 클라이언트이므로 스레드에서 실행
        return await asyncio.to_thread(self._client.messages.create, **params)

    async def chat(self, prompt: str, **kwargs: Any) -> str:
        """Claude 채팅 호출(Invoke Claude chat using Anthropic SDK)."""

        if not self._allow_external:
            logger.info("Claude external calls disabled (set VR_ALLOW_EXTERNAL_CALLS=true to enable).")
            raise RuntimeError("Claude API disabled by configuration: VR_ALLOW_EXTERNAL_CALLS=false")

        if self._client is None:
            raise RuntimeError("VR_CLAUDE_API_KEY is not configured")

        model = kwargs.pop("model", self._default_model)
        max_tokens = kwargs.pop("max_tokens", self._default_max_tokens)
        messages = kwargs.pop("messages", [{"role": "user", "content": prompt}])

        try:
            response = await self._create(
                model=model,
                max_tokens=max_tokens,
                messages=messages,
                **kwargs,
            )
        except Exception as exc:
            logger.warning("Claude API 오류(Error): %s", exc)
            logger.debug("Claude failure details", exc_info=exc)
            raise RuntimeError(f"Claude API error: {exc}") from exc

        texts: List[str] = []
        for block in response.content or []:
            if hasattr(block, "text"):  # TextBlock
                texts.append(block.text)
        return "\n".join(texts).strip()
