"""
services/tts_service.py

Text-to-speech via Cartesia Sonic (POST /tts/bytes).
Returns raw PCM (f32le, mono) as an AudioStream so the route can
stream it to the browser while Cartesia is still generating.
"""

from dataclasses import dataclass
from typing import AsyncIterator, Mapping, Optional

import httpx

from app.core.config import Settings
from app.core.errors import SynthesisFailed
from app.core.logger import get_logger
from app.models.response import Language

logger = get_logger(__name__)


@dataclass(frozen=True)
class VoiceProfile:
    model_id: str
    voice_id: str


DEFAULT_VOICE = VoiceProfile(
    model_id="sonic-english",
    voice_id="79a125e8-cd45-4c13-8a67-188112f4dd22",
)


def build_voice_table(
    zh_tw_voice_id: str = "",
    zh_tw_model: str = "sonic-multilingual",
) -> dict[Language, VoiceProfile]:
    """English is always present; zh-TW only once a voice id is configured."""
    voices = {Language.EN: DEFAULT_VOICE}
    if zh_tw_voice_id:
        voices[Language.ZH_TW] = VoiceProfile(model_id=zh_tw_model, voice_id=zh_tw_voice_id)
    return voices


def select_voice(
    voices: Mapping[Language, VoiceProfile], language: Language
) -> VoiceProfile:
    return voices.get(language) or voices.get(Language.EN, DEFAULT_VOICE)


class SpeechSynthesisService:
    def __init__(
        self,
        api_key: str,
        url: str = "https://api.cartesia.ai/tts/bytes",
        version: str = "2024-06-30",
        sample_rate: int = 24000,
        timeout: float = 30.0,
        voices: Optional[Mapping[Language, VoiceProfile]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.url = url
        self.version = version
        self.sample_rate = sample_rate
        self.timeout = timeout
        self.voices = dict(voices) if voices else build_voice_table()
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "SpeechSynthesisService":
        return cls(
            api_key=settings.CARTESIA_API_KEY,
            url=settings.CARTESIA_URL,
            version=settings.CARTESIA_VERSION,
            sample_rate=settings.TTS_SAMPLE_RATE,
            timeout=settings.TTS_TIMEOUT,
            voices=build_voice_table(settings.TTS_ZH_TW_VOICE_ID, settings.TTS_ZH_TW_MODEL),
        )

    def build_payload(self, text: str, language: Language) -> dict:
        voice = select_voice(self.voices, language)
        return {
            "model_id": voice.model_id,
            "transcript": text,
            "voice": {"mode": "id", "id": voice.voice_id},
            "output_format": {
                "container": "raw",
                "encoding": "pcm_f32le",
                "sample_rate": self.sample_rate,
            },
        }

    async def synthesize(self, text: str, language: Language) -> "AudioStream":
        """
        Start synthesis and return the audio body as it arrives.
        Raises SynthesisFailed (upstream body logged) on non-2xx or network error.
        """
        client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        request = client.build_request(
            "POST",
            self.url,
            headers={
                "Cartesia-Version": self.version,
                "X-API-Key": self.api_key,
            },
            json=self.build_payload(text, language),
        )

        try:
            response = await client.send(request, stream=True)
        except httpx.HTTPError as e:
            await client.aclose()
            logger.error(f"Cartesia request failed: {type(e).__name__}: {e}")
            raise SynthesisFailed(str(e)) from e

        if response.is_success:
            return AudioStream(client, response)

        try:
            body = (await response.aread()).decode("utf-8", errors="replace")
        except httpx.HTTPError as e:
            body = f"<error body unreadable: {type(e).__name__}: {e}>"
        finally:
            await response.aclose()
            await client.aclose()

        logger.error(f"Cartesia error {response.status_code}: {body}")
        raise SynthesisFailed(f"{response.status_code}: {body}")


class AudioStream:
    """
    Cartesia response body as an async byte iterator.
    aclose() releases the response and its client whether or not iteration
    ever started, so the route can hand it to a BackgroundTask.
    """

    def __init__(self, client: httpx.AsyncClient, response: httpx.Response):
        self._client = client
        self._response = response

    async def __aiter__(self) -> AsyncIterator[bytes]:
        async for chunk in self._response.aiter_bytes():
            yield chunk

    @property
    def closed(self) -> bool:
        return self._response.is_closed and self._client.is_closed

    async def aclose(self) -> None:
        if self.closed:
            return
        await self._response.aclose()
        await self._client.aclose()
