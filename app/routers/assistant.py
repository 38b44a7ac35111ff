"""
routers/assistant.py

Main POST /api endpoint.
Orchestration flow (strictly sequential, no retries):
  1. Parse + validate the multipart form
  2. Transcribe audio (text input passes through)
  3. Research keywords → PubMed references (best effort)
  4. Compose persona prompt → LLM reply
  5. Cartesia TTS
  6. Stream PCM back; transcript + reply ride in headers
"""

from typing import AsyncIterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from app.core.config import Settings, get_settings
from app.core.dependencies import (
    get_clock,
    get_completion_service,
    get_literature_client,
    get_speech_service,
    get_transcription_service,
)
from app.core.errors import InvalidAudio, InvalidRequest
from app.core.logger import get_logger, log_timing
from app.models.request import parse_voice_form
from app.models.response import SynthesisResult
from app.services.context_service import Clock, resolve_location, resolve_time
from app.services.intent_router import needs_literature_search
from app.services.llm_service import CompletionService
from app.services.prompt_service import assemble_prompt, compose_system_prompt
from app.services.pubmed_service import PubMedClient
from app.services.transcription_service import TranscriptionService
from app.services.tts_service import AudioStream, SpeechSynthesisService

logger = get_logger(__name__)
router = APIRouter(tags=["assistant"])


async def _timed_stream(audio: AudioStream, request_id: str) -> AsyncIterator[bytes]:
    with log_timing(logger, "stream", request_id):
        try:
            async for chunk in audio:
                yield chunk
        finally:
            await audio.aclose()


@router.post("/api")
async def respond(
    request: Request,
    settings: Settings = Depends(get_settings),
    transcriber: TranscriptionService = Depends(get_transcription_service),
    completer: CompletionService = Depends(get_completion_service),
    synthesizer: SpeechSynthesisService = Depends(get_speech_service),
    literature: PubMedClient = Depends(get_literature_client),
    clock: Clock = Depends(get_clock),
):
    """
    Core voice endpoint.
    Browser posts mic audio (or typed text) + history, gets back PCM audio.
    """
    request_id = request.headers.get(settings.REQUEST_ID_HEADER) or "local"

    # ── Step 1: Validate form ───────────────────────────────────────────────
    try:
        form = await request.form()
    except Exception as e:
        raise InvalidRequest(f"unreadable form: {e}") from e
    req = await parse_voice_form(form)

    # ── Step 2: Transcript ──────────────────────────────────────────────────
    with log_timing(logger, "transcribe", request_id):
        transcript = await transcriber.transcribe(req.input)
    if not transcript:
        raise InvalidAudio()

    logger.info(
        f"[{request_id}] lang={req.language.value} history={len(req.history)} "
        f"transcript='{transcript[:80]}'"
    )

    # ── Step 3: Optional PubMed augmentation ────────────────────────────────
    records = None
    if needs_literature_search(transcript):
        with log_timing(logger, "pubmed search", request_id):
            records = await literature.search(transcript, settings.PUBMED_MAX_RESULTS)

    # ── Step 4: Prompt + completion ─────────────────────────────────────────
    system_prompt = compose_system_prompt(
        req.language,
        location=resolve_location(
            request.headers,
            country_header=settings.GEO_COUNTRY_HEADER,
            region_header=settings.GEO_REGION_HEADER,
            city_header=settings.GEO_CITY_HEADER,
        ),
        current_time=resolve_time(
            request.headers,
            timezone_header=settings.TIMEZONE_HEADER,
            clock=clock,
        ),
        records=records,
    )
    prompt = assemble_prompt(system_prompt, req.history, transcript)

    with log_timing(logger, "text completion", request_id):
        reply = await completer.complete(prompt)

    # ── Step 5: Speech synthesis ────────────────────────────────────────────
    with log_timing(logger, "speech request", request_id):
        audio = await synthesizer.synthesize(reply, req.language)

    # ── Step 6: Stream audio, text in headers ───────────────────────────────
    result = SynthesisResult(
        audio=audio,
        transcript=transcript,
        reply=reply,
        language=req.language,
    )
    return StreamingResponse(
        _timed_stream(audio, request_id),
        media_type="application/octet-stream",
        headers=result.headers(),
        # closes Cartesia even if the client disconnects before the first chunk
        background=BackgroundTask(audio.aclose),
    )
