"""
services/llm_service.py

Chat completion against Groq's OpenAI-compatible endpoint.
One call per request, no retries: a failure aborts the request.
"""

import time
from typing import Optional

import openai
from openai import AsyncOpenAI

from app.core.config import Settings
from app.core.errors import CompletionFailed, RateLimited
from app.core.logger import get_logger
from app.models.response import AssembledPrompt

logger = get_logger(__name__)


class CompletionService:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.groq.com/openai/v1",
        model: str = "llama3-8b-8192",
        timeout: float = 30.0,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "CompletionService":
        return cls(
            api_key=settings.GROQ_API_KEY,
            base_url=settings.GROQ_BASE_URL,
            model=settings.COMPLETION_MODEL,
            timeout=settings.LLM_TIMEOUT,
        )

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key or "none",
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def complete(self, prompt: AssembledPrompt) -> str:
        t0 = time.perf_counter()
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=list(prompt.messages),
            )
        except openai.RateLimitError as e:
            logger.warning(f"LLM rate limited: {e}")
            raise RateLimited(str(e)) from e
        except openai.OpenAIError as e:
            logger.error(f"LLM exception: {type(e).__name__}: {e}")
            raise CompletionFailed(str(e)) from e

        raw = response.choices[0].message.content if response.choices else None
        reply = raw.strip() if raw else ""
        latency_ms = int((time.perf_counter() - t0) * 1000)

        if not reply:
            logger.error(f"LLM returned EMPTY content [{latency_ms}ms] model={self.model}")
            raise CompletionFailed("empty completion")

        logger.info(f"LLM reply [{latency_ms}ms] model={self.model}: {repr(reply[:300])}")
        return reply
