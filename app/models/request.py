"""
models/request.py
Incoming request schemas + multipart form parsing for POST /api.

Form fields:
  input     text, or an audio file
  language  optional locale tag ("en" | "zh-TW"), default "en"
  message   repeated, each a JSON ConversationTurn
"""

import json
from typing import Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from starlette.datastructures import FormData, UploadFile

from app.core.errors import InvalidRequest
from app.models.response import Language


class ConversationTurn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: Literal["user", "assistant"]
    content: str
    latency: Optional[int] = Field(None, description="Client-measured round trip in ms")

    def as_message(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


class AudioInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: bytes
    filename: str = "audio.wav"
    content_type: str = "audio/wav"


class VoiceRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    input: Union[str, AudioInput]
    language: Language = Language.EN
    history: tuple[ConversationTurn, ...] = ()


async def parse_voice_form(form: FormData) -> VoiceRequest:
    """Validate the raw form once; raises InvalidRequest on any bad field."""
    raw_input = form.get("input")
    if isinstance(raw_input, UploadFile):
        data = await raw_input.read()
        if not data:
            raise InvalidRequest("empty audio upload")
        user_input: Union[str, AudioInput] = AudioInput(
            data=data,
            filename=raw_input.filename or "audio.wav",
            content_type=raw_input.content_type or "audio/wav",
        )
    elif isinstance(raw_input, str) and raw_input:
        user_input = raw_input
    else:
        raise InvalidRequest("missing input")

    language = form.get("language")
    if language is not None and not isinstance(language, str):
        raise InvalidRequest("language must be text")

    history = []
    for raw in form.getlist("message"):
        if not isinstance(raw, str):
            raise InvalidRequest("message must be text")
        try:
            history.append(ConversationTurn.model_validate(json.loads(raw)))
        except (json.JSONDecodeError, ValidationError) as e:
            raise InvalidRequest(f"bad message: {e}") from e

    return VoiceRequest(
        input=user_input,
        language=Language.resolve(language),
        history=tuple(history),
    )
