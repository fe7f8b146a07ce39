import logging
import time
from typing import Callable, Optional

import requests

import config
from .errors import (
    ConfigurationError,
    LLMError,
    LLMQuotaError,
    LLMRequestError,
    LLMServiceError,
    LLMTimeoutError,
    LLMUpstreamError,
)
from .prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after failed attempt number `attempt` (1-based)."""
    return min(config.LLM_BACKOFF_BASE_SECONDS * (2 ** (attempt - 1)), config.LLM_BACKOFF_CAP_SECONDS)


def _error_for_status(status: int) -> LLMError:
    if status == 400:
        return LLMRequestError("Invalid request to AI service")
    if status == 429:
        return LLMQuotaError("AI service quota exceeded")
    if status == 500:
        return LLMUpstreamError("AI service internal error")
    return LLMServiceError(f"AI service error: {status}")


class GroqClient:
    """Text generation over Groq's OpenAI-compatible chat completions API."""

    def __init__(
        self,
        api_key: str,
        model_name: str = config.MODEL_NAME,
        url: str = config.GROQ_API_URL,
        max_retries: int = config.LLM_MAX_RETRIES,
        timeout: float = config.LLM_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not api_key:
            raise ConfigurationError("GROQ_API_KEY not set. Missing API key for the AI service.")
        self.api_key = api_key
        self.model_name = model_name
        self.url = url
        self.max_retries = max_retries
        self.timeout = timeout
        self.session = session or requests.Session()
        self.sleep = sleep

    def close(self) -> None:
        self.session.close()

    def _payload(self, prompt: str) -> dict:
        return {
            "model": self.model_name,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": config.LLM_TEMPERATURE,
            "max_tokens": config.LLM_MAX_TOKENS,
        }

    def _attempt(self, prompt: str) -> str:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = self.session.post(self.url, headers=headers, json=self._payload(prompt), timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise LLMTimeoutError(f"AI service timeout after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise LLMServiceError(f"AI service unreachable: {e}") from e

        if not response.ok:
            logger.error(f"Groq API error: {response.status_code} {response.text[:200]}")
            raise _error_for_status(response.status_code)

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMServiceError("Invalid response from AI service") from e
        if not isinstance(content, str):
            raise LLMServiceError("Invalid response from AI service")
        return content

    def generate(self, prompt: str) -> str:
        """Return generated text, retrying every failure kind the same way."""
        last_error = None
        for attempt in range(1, self.max_retries + 1):
            try:
                return self._attempt(prompt)
            except LLMError as e:
                last_error = e
                if attempt < self.max_retries:
                    delay = backoff_delay(attempt)
                    logger.warning(f"AI call failed (attempt {attempt}/{self.max_retries}): {e}. Retrying in {delay:.1f}s")
                    self.sleep(delay)
        logger.error(f"AI call failed after {self.max_retries} attempts: {last_error}")
        raise last_error or LLMServiceError("AI request failed")


def client_from_env(**kwargs) -> GroqClient:
    """Build a client from GROQ_API_KEY; raises ConfigurationError when unset."""
    return GroqClient(config.get_api_key(), **kwargs)
