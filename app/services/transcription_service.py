"""
services/transcription_service.py

Speech-to-text via Groq Whisper (OpenAI-compatible audio API).
Typed input passes straight through. For audio, every failure mode
(silence, API error, bad container) collapses to None.
"""

from typing import Optional, Union

from openai import AsyncOpenAI

from app.core.config import Settings
from app.core.logger import get_logger
from app.models.request import AudioInput

logger = get_logger(__name__)


class TranscriptionService:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.groq.com/openai/v1",
        model: str = "whisper-large-v3",
        timeout: float = 30.0,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "TranscriptionService":
        return cls(
            api_key=settings.GROQ_API_KEY,
            base_url=settings.GROQ_BASE_URL,
            model=settings.TRANSCRIPTION_MODEL,
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

    async def transcribe(self, user_input: Union[str, AudioInput]) -> Optional[str]:
        if isinstance(user_input, str):
            return user_input

        try:
            result = await self.client.audio.transcriptions.create(
                file=(user_input.filename, user_input.data, user_input.content_type),
                model=self.model,
            )
            text = (result.text or "").strip()
        except Exception as e:
            logger.warning(f"Transcription failed: {type(e).__name__}: {e}")
            return None

        if not text:
            logger.info(f"Empty transcription ({len(user_input.data)} bytes of audio)")
            return None
        return text
