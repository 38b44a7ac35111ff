"""
core/logger.py
Structured JSON logging for production.
Latency timers attach step / request_id / elapsed_ms as real JSON fields
so per-step timings can be grepped or charted without parsing messages.
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from typing import Any, Iterator
from app.core.config import settings

TIMING_FIELDS = ("step", "request_id", "elapsed_ms")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for field in TIMING_FIELDS:
            if hasattr(record, field):
                log_obj[field] = getattr(record, field)
        if record.exc_info:
            log_obj["exc"] = self.formatException(record.exc_info)
        return json.dumps(log_obj, ensure_ascii=False)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        if settings.DEBUG:
            handler.setFormatter(
                logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
            )
        else:
            handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    return logger


@contextmanager
def log_timing(logger: logging.Logger, step: str, request_id: str = "local") -> Iterator[None]:
    """
    Time the wrapped block, console.time style:
        ⏱  transcribe iad1::abc: 412ms
    Logged even when the block raises; never alters control flow.
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = int((time.perf_counter() - t0) * 1000)
        logger.info(
            f"⏱  {step} {request_id}: {elapsed_ms}ms",
            extra={"step": step, "request_id": request_id, "elapsed_ms": elapsed_ms},
        )
