"""
LLM Client for the AI tutor.

Provides a wrapper around the OpenAI SDK for any OpenAI-compatible endpoint.
Includes retry logic with exponential backoff and token accounting.
"""

import time

from openai import APIConnectionError, APIStatusError, OpenAI, RateLimitError
from pydantic import BaseModel, ConfigDict

from quiz_grader.config import Settings, get_settings


class TutorError(Exception):
    """Raised when a tutor API call fails."""

    def __init__(self, message: str, cause: Exception | None = None, retryable: bool = False):
        self.cause = cause
        self.retryable = retryable
        super().__init__(message)


class TutorReply(BaseModel):
    """Text generated by the tutor model and the tokens it cost."""

    model_config = ConfigDict(frozen=True)

    content: str
    tokens_used: int = 0


class TutorClient:
    """
    Client for the tutor's chat-completion API.

    Uses the OpenAI SDK with a configurable base URL.
    Implements retry logic with exponential backoff.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize the tutor client.

        Args:
            settings: Configuration settings. Uses global settings if not provided.

        Raises:
            TutorError: If no API key is configured.
        """
        self._settings = settings or get_settings()
        if not self._settings.openai_api_key:
            raise TutorError("OPENAI_API_KEY is not configured")

        self._client = OpenAI(
            api_key=self._settings.openai_api_key,
            base_url=self._settings.openai_base_url,
        )

        # Retry configuration
        self._max_retries = 3
        self._base_delay = 1.0  # seconds
        self._max_delay = 30.0  # seconds

    def generate(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> TutorReply:
        """
        Generate a tutor reply for a conversation.

        Args:
            messages: Chat messages, system prompt first.
            temperature: Override temperature (uses config default if None).
            max_tokens: Override reply length (uses config default if None).

        Returns:
            The generated reply.

        Raises:
            TutorError: If generation fails after all retries.
        """
        temp = temperature if temperature is not None else self._settings.tutor_temperature
        limit = max_tokens if max_tokens is not None else self._settings.tutor_max_tokens
        return self._call_with_retry(messages, temp, limit)

    def _call_with_retry(
        self,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> TutorReply:
        """
        Call the API with exponential backoff retry.

        Raises:
            TutorError: If all retries fail.
        """
        last_error: Exception | None = None

        for attempt in range(self._max_retries + 1):
            try:
                response = self._client.chat.completions.create(
                    model=self._settings.tutor_model,
                    messages=messages,  # type: ignore[arg-type]
                    temperature=temperature,
                    max_tokens=max_tokens,
                )

                if response.choices and response.choices[0].message.content:
                    usage = getattr(response, "usage", None)
                    tokens = getattr(usage, "total_tokens", 0) or 0
                    return TutorReply(
                        content=response.choices[0].message.content,
                        tokens_used=int(tokens),
                    )

                raise TutorError("Empty response from tutor model")

            except (RateLimitError, APIConnectionError) as e:
                last_error = e
                if attempt < self._max_retries:
                    time.sleep(self._calculate_delay(attempt))
                    continue
                raise TutorError(
                    f"Tutor API unavailable after {self._max_retries} retries",
                    cause=e,
                    retryable=True,
                ) from e

            except APIStatusError as e:
                # Don't retry on client errors (4xx except 429)
                if 400 <= e.status_code < 500 and e.status_code != 429:
                    raise TutorError(f"API error: {e.message}", cause=e) from e

                last_error = e
                if attempt < self._max_retries:
                    time.sleep(self._calculate_delay(attempt))
                    continue
                raise TutorError(
                    f"API error after {self._max_retries} retries: {e.message}",
                    cause=e,
                    retryable=True,
                ) from e

            except TutorError:
                raise

            except Exception as e:
                raise TutorError(f"Unexpected error: {e}", cause=e) from e

        raise TutorError(f"Failed after {self._max_retries} retries", cause=last_error)

    def _calculate_delay(self, attempt: int) -> float:
        """Delay in seconds before retry number `attempt` (0-indexed)."""
        delay = self._base_delay * (2**attempt)
        return min(delay, self._max_delay)
