"""Error taxonomy shared by the fetcher, the AI clients and the HTTP layer."""

from typing import Any

STATUS_MESSAGES = {
    401: "API authentication failed. Check the API key settings.",
    403: "Access denied. Check the API key permissions.",
    404: "The requested model or resource was not found.",
    410: "The model is no longer available. Try again later or use another service.",
    429: "Too many requests to the API. Please wait a moment and try again.",
    503: "The model is loading. Please wait a moment and try again.",
}


def user_message_for_status(status_code: int, reason: str = "") -> str:
    """Translate an upstream status code into a human-readable message."""
    if status_code in STATUS_MESSAGES:
        return STATUS_MESSAGES[status_code]
    if status_code >= 500:
        return "The service is temporarily unavailable. Try again later."
    return f"API error ({status_code}): {reason or 'Unknown error'}"


def category_for_status(status_code: int) -> str:
    if status_code in (401, 403):
        return "upstream-auth"
    return "upstream-unavailable"


class ReferentError(Exception):
    """Base exception for all Referent errors."""

    category = "internal"
    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_payload(self, include_details: bool = False) -> dict[str, Any]:
        """Structured error body returned to the UI."""
        payload: dict[str, Any] = {"error": self.message, "category": self.category}
        if include_details and self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(ReferentError):
    """Raised when a required input field is missing or malformed."""

    category = "validation"
    status_code = 400


class UpstreamError(ReferentError):
    """Raised when a third-party API answers with an error status."""

    def __init__(self, message: str, *, status_code: int = 502, details: Any = None) -> None:
        super().__init__(message, status_code=status_code, details=details)
        self.category = category_for_status(status_code)


class UpstreamAuthError(ReferentError):
    """Raised when an API credential is missing or rejected."""

    category = "upstream-auth"
    status_code = 401


class MalformedResponseError(ReferentError):
    """Raised when an API succeeds but the payload lacks the expected fields."""

    category = "upstream-malformed-response"
    status_code = 502


class NetworkError(ReferentError):
    """Raised when a request fails at the transport level."""

    category = "network"
    status_code = 502


class FetchTimeoutError(NetworkError):
    """Raised when fetching a page exceeds the timeout budget."""

    category = "timeout"
    status_code = 504


class CompletionError(UpstreamError):
    """Raised when the completion service returns an error status."""


class ImageGenerationError(UpstreamError):
    """Raised when no image candidate model produced an image."""

    def __init__(
        self,
        message: str,
        *,
        attempted_models: list[str],
        status_code: int = 500,
        details: Any = None,
    ) -> None:
        super().__init__(message, status_code=status_code, details=details)
        self.attempted_models = attempted_models
