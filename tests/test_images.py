"""Tests for image generation."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from referent.config import Settings
from referent.errors import ImageGenerationError, UpstreamAuthError
from referent.images.huggingface import (
    CANDIDATE_MODELS,
    Attempt,
    GeneratedImage,
    RetryPolicy,
    _request_image,
    generate_image,
)

SETTINGS = Settings(huggingface_api_key="hf-test")
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def _mock_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _png_response(content: bytes = PNG_BYTES) -> httpx.Response:
    return httpx.Response(200, content=content, headers={"content-type": "image/png"})


def _failed(model: str, status: int) -> tuple[None, Attempt]:
    return None, Attempt(model=model, status_code=status, reason="Service Unavailable")


class TestRequestImage:
    """Tests for a single model request."""

    def test_image_response(self) -> None:
        client = _mock_client(lambda request: _png_response())
        image, attempt = _request_image(client, "model/a", "a cat")

        assert image is not None
        assert image.data == PNG_BYTES
        assert image.content_type == "image/png"
        assert attempt.status_code == 200

    def test_sends_prompt_as_inputs(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.content
            return _png_response()

        _request_image(_mock_client(handler), "model/a", "a cat")
        assert seen["url"].endswith("/models/model/a")
        assert b'"inputs"' in seen["body"]

    def test_json_payload_is_not_an_image(self) -> None:
        client = _mock_client(lambda request: httpx.Response(200, json={"error": "nope"}))
        image, attempt = _request_image(client, "model/a", "a cat")
        assert image is None
        assert "application/json" in attempt.error

    def test_empty_image_is_rejected(self) -> None:
        client = _mock_client(lambda request: _png_response(b""))
        image, _ = _request_image(client, "model/a", "a cat")
        assert image is None

    def test_error_status(self) -> None:
        client = _mock_client(lambda request: httpx.Response(404, text="Not Found"))
        image, attempt = _request_image(client, "model/a", "a cat")
        assert image is None
        assert attempt.status_code == 404

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        image, attempt = _request_image(_mock_client(handler), "model/a", "a cat")
        assert image is None
        assert attempt.status_code is None
        assert "refused" in attempt.error


class TestGenerateImage:
    """Tests for the candidate model fallback."""

    def test_missing_api_key(self) -> None:
        with pytest.raises(UpstreamAuthError):
            generate_image("a cat", settings=Settings(huggingface_api_key=""))

    @patch("referent.images.huggingface.time.sleep")
    @patch("referent.images.huggingface._request_image")
    def test_first_success_wins(self, mock_request: MagicMock, mock_sleep: MagicMock) -> None:
        image = GeneratedImage(data=PNG_BYTES, content_type="image/png", model=CANDIDATE_MODELS[1])
        mock_request.side_effect = [
            _failed(CANDIDATE_MODELS[0], 410),
            (image, Attempt(model=CANDIDATE_MODELS[1], status_code=200)),
        ]

        result = generate_image("a cat", settings=SETTINGS)

        assert result.model == CANDIDATE_MODELS[1]
        assert mock_request.call_count == 2
        mock_sleep.assert_not_called()

    @patch("referent.images.huggingface.time.sleep")
    @patch("referent.images.huggingface._request_image")
    def test_loading_model_retried_once(
        self, mock_request: MagicMock, mock_sleep: MagicMock
    ) -> None:
        model = CANDIDATE_MODELS[0]
        image = GeneratedImage(data=PNG_BYTES, content_type="image/png", model=model)
        mock_request.side_effect = [
            _failed(model, 503),
            (image, Attempt(model=model, status_code=200)),
        ]

        result = generate_image(
            "a cat", retry=RetryPolicy(max_retries=1, delay_seconds=7), settings=SETTINGS
        )

        assert result.model == model
        mock_sleep.assert_called_once_with(7)

    @patch("referent.images.huggingface.time.sleep")
    @patch("referent.images.huggingface._request_image")
    def test_all_loading_aggregates_failure(
        self, mock_request: MagicMock, mock_sleep: MagicMock
    ) -> None:
        mock_request.side_effect = lambda client, model, prompt: _failed(model, 503)

        with pytest.raises(ImageGenerationError) as exc_info:
            generate_image("a cat", retry=RetryPolicy(max_retries=1), settings=SETTINGS)

        error = exc_info.value
        assert error.status_code == 503
        assert error.attempted_models == list(CANDIDATE_MODELS)
        for model in CANDIDATE_MODELS:
            assert model in error.message
        # one retry per candidate
        assert mock_request.call_count == 2 * len(CANDIDATE_MODELS)
        assert mock_sleep.call_count == len(CANDIDATE_MODELS)

    @patch("referent.images.huggingface.time.sleep")
    @patch("referent.images.huggingface._request_image")
    def test_status_from_last_attempt(
        self, mock_request: MagicMock, mock_sleep: MagicMock
    ) -> None:
        mock_request.side_effect = [
            _failed("model/a", 503),
            _failed("model/b", 429),
        ]

        with pytest.raises(ImageGenerationError) as exc_info:
            generate_image(
                "a cat",
                models=("model/a", "model/b"),
                retry=RetryPolicy(max_retries=0),
                settings=SETTINGS,
            )

        assert exc_info.value.status_code == 429
        assert exc_info.value.details["last_model"] == "model/b"
        mock_sleep.assert_not_called()

    @patch("referent.images.huggingface._request_image")
    def test_transport_failures_default_to_500(self, mock_request: MagicMock) -> None:
        mock_request.side_effect = lambda client, model, prompt: (
            None,
            Attempt(model=model, error="refused"),
        )

        with pytest.raises(ImageGenerationError) as exc_info:
            generate_image("a cat", models=("model/a",), settings=SETTINGS)

        assert exc_info.value.status_code == 500
        assert "model/a" in exc_info.value.message


class TestGeneratedImage:
    """Tests for image encoding."""

    def test_data_url(self) -> None:
        image = GeneratedImage(data=b"abc", content_type="image/jpeg", model="m")
        assert image.data_url() == "data:image/jpeg;base64,YWJj"
