"""
models/response.py
Outgoing / internal result shapes.
The browser only gets audio bytes, so text travels back in headers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterator, Optional
from urllib.parse import quote
from pydantic import BaseModel, ConfigDict


class Language(str, Enum):
    EN = "en"
    ZH_TW = "zh-TW"

    @classmethod
    def resolve(cls, value: Optional[str]) -> "Language":
        """Unknown / empty tags fall back to English instead of failing."""
        try:
            return cls(value)
        except ValueError:
            return cls.EN


class LiteratureRecord(BaseModel):
    pmid: str
    title: str
    authors: str = "Unknown"
    journal: Optional[str] = None
    pub_date: Optional[str] = None
    abstract: Optional[str] = None
    url: str


class AssembledPrompt(BaseModel):
    model_config = ConfigDict(frozen=True)

    system_prompt: str
    messages: tuple[dict[str, str], ...]


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    completion_model: str
    transcription_model: str
    speech_configured: bool


def encode_uri_component(text: str) -> str:
    # Same escaping as JS encodeURIComponent so the client can decodeURIComponent
    return quote(text, safe="!~*'()")


@dataclass
class SynthesisResult:
    audio: AsyncIterator[bytes]
    transcript: str
    reply: str
    language: Language

    def headers(self) -> dict[str, str]:
        return {
            "X-Transcript": encode_uri_component(self.transcript),
            "X-Response": encode_uri_component(self.reply),
            "X-Language": self.language.value,
            "X-Chinese-UI": "true" if self.language is Language.ZH_TW else "false",
        }
