"""
core/config.py
All environment variables and settings in one place.
Groq (Whisper + Llama) · Cartesia Sonic TTS · PubMed E-utilities
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ─── App ───────────────────────────────────────────────
    APP_NAME: str = "Swift Voice Assistant"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: list[str] = ["*"]   # tighten in production

    # ─── Groq (OpenAI-compatible) ──────────────────────────
    GROQ_API_KEY: str = ""
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"
    COMPLETION_MODEL: str = "llama3-8b-8192"
    TRANSCRIPTION_MODEL: str = "whisper-large-v3"
    LLM_TIMEOUT: float = 30.0          # seconds, per call

    # ─── Cartesia TTS ──────────────────────────────────────
    CARTESIA_API_KEY: str = ""
    CARTESIA_URL: str = "https://api.cartesia.ai/tts/bytes"
    CARTESIA_VERSION: str = "2024-06-30"
    TTS_SAMPLE_RATE: int = 24000       # client player expects 24kHz f32le
    TTS_TIMEOUT: float = 30.0
    TTS_ZH_TW_MODEL: str = "sonic-multilingual"
    TTS_ZH_TW_VOICE_ID: str = ""       # unset = zh-TW replies use the English voice

    # ─── PubMed ────────────────────────────────────────────
    PUBMED_BASE_URL: str = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/"
    PUBMED_MAX_RESULTS: int = 3
    PUBMED_TIMEOUT: float = 10.0

    # ─── Hosting headers (Vercel names by default) ─────────
    REQUEST_ID_HEADER: str = "x-vercel-id"
    GEO_COUNTRY_HEADER: str = "x-vercel-ip-country"
    GEO_REGION_HEADER: str = "x-vercel-ip-country-region"
    GEO_CITY_HEADER: str = "x-vercel-ip-city"
    TIMEZONE_HEADER: str = "x-vercel-ip-timezone"

    @property
    def speech_configured(self) -> bool:
        return bool(self.CARTESIA_API_KEY)


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
