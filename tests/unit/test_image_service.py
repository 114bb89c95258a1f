"""Unit tests for the Gemini image service client.

The google-genai client is replaced by a MagicMock whose
``aio.models.generate_content`` is an AsyncMock, so no network access occurs.
"""

import asyncio
import base64
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from nanoart.core.data_uri import decode_data_uri
from nanoart.core.image_service import (
    EDIT_FALLBACK_MESSAGE,
    GENERATE_FALLBACK_MESSAGE,
    GeminiImageService,
    ImageServiceError,
)


def _response(*parts) -> SimpleNamespace:
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


def _image_part(data, mime_type="image/png") -> SimpleNamespace:
    return SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type), text=None)


def _text_part(text) -> SimpleNamespace:
    return SimpleNamespace(inline_data=None, text=text)


@pytest.fixture
def mock_client(png_bytes):
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=_response(_image_part(png_bytes)))
    return client


@pytest.fixture
def service(test_config, mock_client) -> GeminiImageService:
    return GeminiImageService(test_config, client=mock_client)


class TestImageServiceError:
    """Tests for error normalisation."""

    def test_message_is_used_when_present(self):
        assert ImageServiceError("Quota exceeded").display_message == "Quota exceeded"

    @pytest.mark.parametrize("message", [None, "", "   "])
    def test_fallback_when_message_missing(self, message):
        error = ImageServiceError(message, fallback=EDIT_FALLBACK_MESSAGE)
        assert error.message is None
        assert error.display_message == EDIT_FALLBACK_MESSAGE

    def test_from_exception_wraps_foreign_errors(self):
        error = ImageServiceError.from_exception(RuntimeError("boom"))
        assert isinstance(error, ImageServiceError)
        assert error.display_message == "boom"

    def test_from_exception_uses_fallback_for_empty_message(self):
        error = ImageServiceError.from_exception(RuntimeError())
        assert error.display_message == GENERATE_FALLBACK_MESSAGE

    def test_from_exception_passes_through_service_errors(self):
        original = ImageServiceError("already normalised")
        assert ImageServiceError.from_exception(original) is original


class TestGenerate:
    """Tests for GeminiImageService.generate."""

    def test_returns_data_uri(self, service, png_bytes):
        result = asyncio.run(service.generate("a red fox", "16:9"))

        data, mime = decode_data_uri(result)
        assert data == png_bytes
        assert mime == "image/png"

    def test_sends_prompt_model_and_aspect_ratio(self, service, mock_client, test_config):
        asyncio.run(service.generate("a red fox", "9:16"))

        mock_client.aio.models.generate_content.assert_awaited_once()
        kwargs = mock_client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == test_config.model_id
        assert kwargs["contents"][0].text == "a red fox"
        assert kwargs["config"].image_config.aspect_ratio == "9:16"

    def test_base64_text_inline_data_is_decoded(self, service, mock_client, png_bytes):
        encoded = base64.b64encode(png_bytes).decode()
        mock_client.aio.models.generate_content.return_value = _response(_image_part(encoded))

        data, _ = decode_data_uri(asyncio.run(service.generate("a red fox", "1:1")))
        assert data == png_bytes

    def test_transport_error_is_normalised(self, service, mock_client):
        mock_client.aio.models.generate_content.side_effect = RuntimeError("Quota exceeded")

        with pytest.raises(ImageServiceError) as exc_info:
            asyncio.run(service.generate("a red fox", "1:1"))
        assert exc_info.value.display_message == "Quota exceeded"

    def test_error_without_message_uses_generate_fallback(self, service, mock_client):
        mock_client.aio.models.generate_content.side_effect = RuntimeError()

        with pytest.raises(ImageServiceError) as exc_info:
            asyncio.run(service.generate("a red fox", "1:1"))
        assert exc_info.value.display_message == GENERATE_FALLBACK_MESSAGE

    def test_text_only_response_becomes_error(self, service, mock_client):
        mock_client.aio.models.generate_content.return_value = _response(
            _text_part("I can't draw that.")
        )

        with pytest.raises(ImageServiceError, match="I can't draw that."):
            asyncio.run(service.generate("a red fox", "1:1"))

    def test_empty_response_becomes_error(self, service, mock_client):
        mock_client.aio.models.generate_content.return_value = SimpleNamespace(candidates=None)

        with pytest.raises(ImageServiceError, match="No image was returned"):
            asyncio.run(service.generate("a red fox", "1:1"))

    def test_client_construction_failure_is_normalised(self, test_config):
        service = GeminiImageService(test_config)

        with patch("nanoart.core.image_service.genai.Client", side_effect=ValueError("Missing key")):
            with pytest.raises(ImageServiceError, match="Missing key"):
                asyncio.run(service.generate("a red fox", "1:1"))

    def test_client_created_lazily_with_configured_key(self, test_config, mock_client):
        service = GeminiImageService(test_config)

        with patch("nanoart.core.image_service.genai.Client", return_value=mock_client) as factory:
            asyncio.run(service.generate("a", "1:1"))
            asyncio.run(service.generate("b", "1:1"))

        factory.assert_called_once_with(api_key="test-key")


class TestEdit:
    """Tests for GeminiImageService.edit."""

    def test_sends_source_bytes_then_instruction(self, service, mock_client, png_bytes):
        payload = base64.b64encode(png_bytes).decode()

        asyncio.run(service.edit("make it blue", payload, "image/png"))

        contents = mock_client.aio.models.generate_content.call_args.kwargs["contents"]
        assert contents[0].inline_data.data == png_bytes
        assert contents[0].inline_data.mime_type == "image/png"
        assert contents[1].text == "make it blue"

    def test_invalid_payload_fails_without_calling_service(self, service, mock_client):
        with pytest.raises(ImageServiceError, match="not valid base64"):
            asyncio.run(service.edit("make it blue", "***", "image/png"))

        mock_client.aio.models.generate_content.assert_not_awaited()

    def test_error_without_message_uses_edit_fallback(self, service, mock_client, png_bytes):
        mock_client.aio.models.generate_content.side_effect = RuntimeError()
        payload = base64.b64encode(png_bytes).decode()

        with pytest.raises(ImageServiceError) as exc_info:
            asyncio.run(service.edit("make it blue", payload, "image/png"))
        assert exc_info.value.display_message == EDIT_FALLBACK_MESSAGE


def test_close_drops_client(service):
    service.close()
    assert service._client is None
