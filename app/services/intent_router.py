"""
services/intent_router.py

Fast rule-based check: does this transcript ask for medical / research info?
If so the orchestrator pulls PubMed abstracts into the prompt.

Keywords are English only (Whisper output for zh-TW will not match).
"""

import re
from app.core.logger import get_logger

logger = get_logger(__name__)


RESEARCH_KEYWORDS: tuple[str, ...] = (
    "treatment",
    "research",
    "study",
    "medicine",
    "disease",
    "syndrome",
    "latest",
    "update",
)

_RESEARCH_PATTERN = re.compile("|".join(RESEARCH_KEYWORDS), re.IGNORECASE)


def needs_literature_search(transcript: str) -> bool:
    match = _RESEARCH_PATTERN.search(transcript)
    if match:
        logger.debug(f"Research keyword '{match.group()}' in: '{transcript[:60]}'")
        return True
    return False
