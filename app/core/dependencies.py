"""
core/dependencies.py
FastAPI providers for the external-service adapters.
Tests swap any of these via app.dependency_overrides.
"""

from functools import lru_cache

from app.core.config import get_settings
from app.services.context_service import Clock, system_clock
from app.services.llm_service import CompletionService
from app.services.pubmed_service import PubMedClient
from app.services.transcription_service import TranscriptionService
from app.services.tts_service import SpeechSynthesisService


@lru_cache()
def get_transcription_service() -> TranscriptionService:
    return TranscriptionService.from_settings(get_settings())


@lru_cache()
def get_completion_service() -> CompletionService:
    return CompletionService.from_settings(get_settings())


@lru_cache()
def get_speech_service() -> SpeechSynthesisService:
    return SpeechSynthesisService.from_settings(get_settings())


@lru_cache()
def get_literature_client() -> PubMedClient:
    return PubMedClient.from_settings(get_settings())


def get_clock() -> Clock:
    return system_clock
