"""
Errors surfaced to callers of /api/generate.
Each one maps to a single JSON error response (see main.spec_generation_error_handler).
"""

from typing import Optional


class SpecGenerationError(Exception):
    """Base class. Terminal for the current request -- no partial result is returned."""

    status_code: int = 500
    error_code: str = "GENERATION_FAILED"
    default_message: str = "Failed to generate the PC spec list."

    def __init__(self, details: Optional[str] = None, message: Optional[str] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(details or self.message)

    def to_dict(self) -> dict:
        body = {"message": self.message, "errorCode": self.error_code}
        if self.details:
            body["errorDetails"] = self.details
        return body


class ConfigurationMissingError(SpecGenerationError):
    error_code = "NO_API_KEY_CONFIGURED"
    default_message = (
        "Server configuration error: API key not found. "
        "Check that the GEMINI_API_KEY environment variable is set."
    )


class InvalidInputError(SpecGenerationError):
    status_code = 400
    error_code = "INVALID_INPUT"
    default_message = "Invalid JSON body or missing prompt/hardwareData."


class ProviderError(SpecGenerationError):
    """Failures reported by the Gemini API itself."""

    default_message = (
        "Could not generate the spec list. The Gemini API call failed; "
        "check the API key, billing and quota."
    )


class ProviderRequestError(ProviderError):
    """400/403 -- bad key, API not enabled, or malformed request. Never retried."""

    error_code = "GEMINI_REQUEST_REJECTED"


class ProviderUnhandledStatusError(ProviderError):
    """Non-success status outside 400/403/429/5xx. Never retried."""

    error_code = "GEMINI_UNHANDLED_STATUS"


class ProviderTransientError(ProviderError):
    """429, 5xx, transport failure or unreadable body. Retried until the attempt budget runs out."""

    error_code = "GEMINI_TRANSIENT_ERROR"


class ProviderUnavailableError(ProviderError):
    """Attempt budget exhausted; details carry the last transient failure."""

    error_code = "GEMINI_UNAVAILABLE"


class EmptyGenerationError(SpecGenerationError):
    error_code = "EMPTY_GENERATION"
    default_message = (
        "Gemini returned no content, possibly because of safety filtering "
        "or a model output error."
    )


class OutputParseError(SpecGenerationError):
    error_code = "INVALID_JSON_OUTPUT"
    default_message = (
        "The AI produced invalid JSON, possibly because of safety filtering "
        "or a model output error."
    )
