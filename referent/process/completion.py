"""Completion service client (OpenRouter through the OpenAI SDK)."""

import logging

from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI

from ..config import Settings, get_settings
from ..errors import (
    CompletionError,
    MalformedResponseError,
    NetworkError,
    UpstreamAuthError,
    user_message_for_status,
)
from .schema import CompletionResult, Usage

logger = logging.getLogger(__name__)


def _get_client(settings: Settings) -> OpenAI:
    """Get OpenAI-compatible client, checking for API key."""
    if not settings.openrouter_api_key:
        raise UpstreamAuthError(
            "OPENROUTER_API_KEY is not configured. "
            "Set it with: export OPENROUTER_API_KEY='sk-or-...'",
            status_code=500,
        )
    return OpenAI(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        default_headers={"HTTP-Referer": settings.app_url, "X-Title": settings.app_title},
        max_retries=0,
    )


class CompletionClient:
    """Issues single chat completion calls and normalizes their failures."""

    def __init__(self, settings: Settings | None = None, client: OpenAI | None = None) -> None:
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = _get_client(self.settings)
        return self._client

    @property
    def model(self) -> str:
        return self.settings.completion_model

    def complete(
        self,
        system: str,
        user: str,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ) -> CompletionResult:
        """
        Run one completion call.

        Raises:
            UpstreamAuthError: API key missing
            CompletionError: Upstream answered with an error status
            NetworkError: Transport failure or timeout
            MalformedResponseError: Success status without usable content
        """
        client = self.client
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except APIStatusError as e:
            logger.warning("Completion API error %s: %s", e.status_code, e.body)
            raise CompletionError(
                user_message_for_status(e.status_code, str(e.message)),
                status_code=e.status_code,
                details=e.body,
            ) from e
        except (APITimeoutError, APIConnectionError) as e:
            raise NetworkError(f"Completion service unreachable: {e}") from e

        choices = getattr(response, "choices", None)
        if not choices or getattr(choices[0], "message", None) is None:
            logger.warning("Invalid response from completion API: %r", response)
            raise MalformedResponseError("Invalid response from completion API")

        content = choices[0].message.content
        if not isinstance(content, str) or not content.strip():
            raise MalformedResponseError("Empty result from AI")

        return CompletionResult(
            text=content,
            model=getattr(response, "model", None) or self.model,
            usage=Usage.from_response(getattr(response, "usage", None)),
        )
