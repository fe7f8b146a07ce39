from typing import List, Tuple


class ProfileValidationError(ValueError):
    """Client-supplied profile data broke the request contract."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class ConfigurationError(RuntimeError):
    """The AI capability cannot be used at all (missing API key)."""


class LLMError(RuntimeError):
    """Base class for failures of a single AI call."""


class LLMRequestError(LLMError):
    pass


class LLMQuotaError(LLMError):
    pass


class LLMUpstreamError(LLMError):
    pass


class LLMTimeoutError(LLMError):
    pass


class LLMServiceError(LLMError):
    """Network failures, unexpected status codes and malformed bodies."""


class SkillExtractionError(ValueError):
    """The AI answered but the skill payload could not be parsed."""


def classify_error(exc: Exception) -> Tuple[int, str]:
    """Map an uncaught failure to (status_code, user-facing error message)."""
    msg = str(exc)
    if isinstance(exc, ConfigurationError) or "API key" in msg:
        return 500, "AI service configuration error"
    if isinstance(exc, LLMQuotaError) or "quota" in msg:
        return 429, "Service quota exceeded. Please try again later."
    if isinstance(exc, LLMTimeoutError) or "timeout" in msg:
        return 408, "Request timeout. Please try again."
    return 500, "Internal server error"
