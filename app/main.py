"""
main.py
FastAPI application · Swift voice assistant backend
Groq Whisper + Llama 3, Cartesia Sonic TTS, PubMed references
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
import time

from app.core.config import settings
from app.core.errors import AssistantError
from app.core.logger import get_logger
from app.routers import assistant, health

logger = get_logger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# LIFESPAN
# ─────────────────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 60)
    logger.info(f"  🚀  {settings.APP_NAME}  v{settings.APP_VERSION}")
    logger.info("=" * 60)
    logger.info(f"  LLM Base URL  : {settings.GROQ_BASE_URL}")
    logger.info(f"  Completion    : {settings.COMPLETION_MODEL}")
    logger.info(f"  Transcription : {settings.TRANSCRIPTION_MODEL}")
    logger.info(f"  TTS           : {'Cartesia' if settings.speech_configured else 'NOT CONFIGURED'}")
    logger.info(f"  Host          : {settings.HOST}:{settings.PORT}")
    logger.info(f"  Debug         : {settings.DEBUG}")
    logger.info("=" * 60)

    if not settings.GROQ_API_KEY:
        logger.warning("GROQ_API_KEY is empty; transcription and completion will fail")
    if not settings.TTS_ZH_TW_VOICE_ID:
        logger.warning("TTS_ZH_TW_VOICE_ID is empty; zh-TW replies will be spoken with the English voice")

    yield

    logger.info("🔴 Shutting down Swift backend...")


# ─────────────────────────────────────────────────────────────────────────────
# APP
# ─────────────────────────────────────────────────────────────────────────────

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "Swift · AI Voice Assistant Backend\n\n"
        "POST /api with mic audio or text, get streamed speech back.\n"
        "Medical questions are grounded with PubMed abstracts."
    ),
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# ─────────────────────────────────────────────────────────────────────────────
# MIDDLEWARE
# ─────────────────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    # the browser client reads the text side-channel from these
    expose_headers=["X-Transcript", "X-Response", "X-Language", "X-Chinese-UI"],
)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Log every request with method, path, status, and time-to-headers."""
    t0 = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = int((time.perf_counter() - t0) * 1000)

    response.headers["X-Latency-Ms"] = str(elapsed_ms)

    log_level = "warning" if response.status_code >= 400 else "info"
    getattr(logger, log_level)(
        f"{request.method} {request.url.path} → {response.status_code} [{elapsed_ms}ms]"
    )

    return response


# ─────────────────────────────────────────────────────────────────────────────
# EXCEPTION HANDLERS
# ─────────────────────────────────────────────────────────────────────────────

@app.exception_handler(AssistantError)
async def assistant_error_handler(request: Request, exc: AssistantError):
    if exc.detail:
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.detail}")
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return PlainTextResponse(
        f"Internal server error: {exc}" if settings.DEBUG else "Internal server error",
        status_code=500,
    )


# ─────────────────────────────────────────────────────────────────────────────
# ROUTERS
# ─────────────────────────────────────────────────────────────────────────────

app.include_router(health.router, tags=["Health"])
app.include_router(assistant.router, tags=["Assistant"])


# ─────────────────────────────────────────────────────────────────────────────
# ROOT
# ─────────────────────────────────────────────────────────────────────────────

@app.get("/", tags=["Root"])
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "online",
        "docs": "/docs",
    }


# ─────────────────────────────────────────────────────────────────────────────
# DEV RUN
# ─────────────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
        workers=1,
        access_log=False,  # handled by our middleware
    )
