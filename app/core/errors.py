"""
core/errors.py

Failure classes for the /api pipeline.
Each one maps to a status code + plain-text body the browser client shows
(it special-cases 429, everything else is displayed as-is).
"""


class AssistantError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.message)
        self.detail = detail


class InvalidRequest(AssistantError):
    """Form could not be parsed or failed validation."""
    status_code = 400
    message = "Invalid request"


class InvalidAudio(AssistantError):
    """Audio produced no usable transcript."""
    status_code = 400
    message = "Invalid audio"


class RateLimited(AssistantError):
    status_code = 429
    message = "Too many requests"


class CompletionFailed(AssistantError):
    status_code = 500
    message = "Text completion failed"


class SynthesisFailed(AssistantError):
    status_code = 500
    message = "Voice synthesis failed"
