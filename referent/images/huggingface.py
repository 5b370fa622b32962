"""Illustration generation through the Hugging Face inference API."""

import base64
import logging
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..config import Settings, get_settings
from ..errors import ImageGenerationError, UpstreamAuthError, user_message_for_status

logger = logging.getLogger(__name__)

INFERENCE_URL = "https://api-inference.huggingface.co/models/{model}"

# Tried in order until one returns an image
CANDIDATE_MODELS = (
    "runwayml/stable-diffusion-v1-5",
    "stabilityai/stable-diffusion-2-1",
    "CompVis/stable-diffusion-v1-4",
    "deepseek-ai/Janus-Pro-7B",
)

MODEL_LOADING_STATUS = 503
REQUEST_TIMEOUT = 120.0


@dataclass(frozen=True)
class RetryPolicy:
    """Delayed retries of the same model while it is loading."""

    max_retries: int = 1
    delay_seconds: float = 10.0


@dataclass
class GeneratedImage:
    """Image bytes returned by a candidate model."""

    data: bytes
    content_type: str
    model: str

    def data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


@dataclass
class Attempt:
    """Outcome of one request to one model."""

    model: str
    status_code: int | None = None
    reason: str = ""
    error: str = ""


@dataclass
class _AttemptLog:
    attempts: list[Attempt] = field(default_factory=list)

    @property
    def models(self) -> list[str]:
        return list(dict.fromkeys(a.model for a in self.attempts))

    @property
    def last(self) -> Attempt | None:
        return self.attempts[-1] if self.attempts else None


def _get_api_key(settings: Settings) -> str:
    if not settings.huggingface_api_key:
        raise UpstreamAuthError(
            "Hugging Face API key is not configured. "
            "Set HUGGINGFACE_API_KEY in the environment or .env file.",
            status_code=500,
        )
    return settings.huggingface_api_key


def _request_image(
    client: httpx.Client, model: str, prompt: str
) -> tuple[GeneratedImage | None, Attempt]:
    """Send one request to one model."""
    try:
        response = client.post(INFERENCE_URL.format(model=model), json={"inputs": prompt})
    except httpx.HTTPError as e:
        logger.warning("Error with model %s: %s", model, e)
        return None, Attempt(model=model, error=str(e))

    attempt = Attempt(model=model, status_code=response.status_code, reason=response.reason_phrase)
    if not response.is_success:
        attempt.error = response.text[:500]
        return None, attempt

    content_type = response.headers.get("content-type", "").split(";")[0].strip()
    if not content_type.startswith("image/") or not response.content:
        size = len(response.content)
        attempt.error = f"Unexpected {content_type or 'unknown'} payload of {size} bytes"
        return None, attempt

    return GeneratedImage(data=response.content, content_type=content_type, model=model), attempt


def _failure(log: _AttemptLog) -> ImageGenerationError:
    """Aggregate every failed attempt into one error."""
    last = log.last
    models = ", ".join(log.models)
    status = last.status_code if last and last.status_code else 500

    if last and last.status_code:
        message = user_message_for_status(last.status_code, last.reason)
    else:
        message = "Failed to generate an image. All models are unavailable."

    details: dict[str, Any] = {
        "attempted_models": log.models,
        "last_model": last.model if last else None,
        "status": last.status_code if last else None,
        "error_preview": last.error[:500] if last else None,
    }
    return ImageGenerationError(
        f"{message} Tried models: {models}.",
        attempted_models=log.models,
        status_code=status,
        details=details,
    )


def generate_image(
    prompt: str,
    models: tuple[str, ...] = CANDIDATE_MODELS,
    retry: RetryPolicy | None = None,
    settings: Settings | None = None,
) -> GeneratedImage:
    """
    Generate an illustration, trying each candidate model in order.

    A model that reports it is still loading is retried after the policy's
    delay; any other failure moves on to the next candidate.

    Args:
        prompt: Image description
        models: Ordered candidate model identifiers
        retry: Retry policy for loading models
        settings: Settings carrying the API key

    Returns:
        The first image returned by a candidate

    Raises:
        UpstreamAuthError: API key missing
        ImageGenerationError: Every candidate failed
    """
    settings = settings or get_settings()
    retry = retry or RetryPolicy(delay_seconds=settings.image_retry_delay)
    api_key = _get_api_key(settings)
    log = _AttemptLog()

    headers = {"Authorization": f"Bearer {api_key}"}
    with httpx.Client(headers=headers, timeout=REQUEST_TIMEOUT) as client:
        for model in models:
            for attempt_no in range(retry.max_retries + 1):
                logger.info("Attempting to generate image with model: %s", model)
                image, attempt = _request_image(client, model, prompt)
                log.attempts.append(attempt)

                if image is not None:
                    logger.info("Generated image using model: %s", model)
                    return image

                if attempt.status_code != MODEL_LOADING_STATUS or attempt_no >= retry.max_retries:
                    logger.warning(
                        "Model %s failed with status %s, trying next", model, attempt.status_code
                    )
                    break

                logger.info("Model %s is loading, retrying in %.0fs", model, retry.delay_seconds)
                time.sleep(retry.delay_seconds)

    logger.error("All image models failed. Last attempt: %s", log.last)
    raise _failure(log)
