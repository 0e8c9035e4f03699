"""Contract tests for the Gemini boundary (client mocked, no real API calls)."""

from unittest.mock import MagicMock, patch

import pytest
from google.genai import types

from declutter.errors import GeminiServiceError
from declutter.models.schemas import ChatMessage
from declutter.services.gemini_service import GeminiService


@pytest.fixture
def client():
    with patch("declutter.services.gemini_service.genai.Client") as client_cls:
        instance = client_cls.return_value
        instance.models.generate_content.return_value = MagicMock(text="Room Type: Office")
        yield instance


@pytest.fixture
def service(client):
    return GeminiService(api_key="test-key", model="test-model")


class TestInit:

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            GeminiService(api_key="")

    def test_uses_configured_model(self, service):
        assert service.model == "test-model"


class TestImageRequest:

    async def test_sends_inline_image_and_prompt(self, service, client, png_bytes):
        text = await service.generate_from_image_and_text(png_bytes, "image/png", "Analyze this")

        assert text == "Room Type: Office"
        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "test-model"
        image_part, prompt = kwargs["contents"]
        assert image_part.inline_data.data == png_bytes
        assert image_part.inline_data.mime_type == "image/png"
        assert prompt == "Analyze this"

    async def test_missing_text_becomes_empty_string(self, service, client, png_bytes):
        client.models.generate_content.return_value = MagicMock(text=None)
        assert await service.generate_from_image_and_text(png_bytes, "image/png", "x") == ""

    async def test_sdk_error_is_wrapped(self, service, client, png_bytes):
        client.models.generate_content.side_effect = RuntimeError("403 PERMISSION_DENIED")
        with pytest.raises(GeminiServiceError, match="PERMISSION_DENIED"):
            await service.generate_from_image_and_text(png_bytes, "image/png", "x")


class TestConversationRequest:

    async def test_maps_roles_and_system_instruction(self, service, client):
        history = [
            ChatMessage(role="assistant", text="I've analyzed your Office."),
            ChatMessage(role="user", text="Where do cables go?"),
            ChatMessage(role="assistant", text="Use a cable tray."),
        ]
        client.models.generate_content.return_value = MagicMock(text="Label them.")

        reply = await service.generate_from_conversation("framing text", history, "And the printer?")

        assert reply == "Label them."
        kwargs = client.models.generate_content.call_args.kwargs
        contents = kwargs["contents"]
        assert [c.role for c in contents] == ["model", "user", "model", "user"]
        assert [c.parts[0].text for c in contents][-1] == "And the printer?"
        assert isinstance(kwargs["config"], types.GenerateContentConfig)
        assert kwargs["config"].system_instruction == "framing text"

    async def test_sdk_error_is_wrapped(self, service, client):
        client.models.generate_content.side_effect = ConnectionError("reset by peer")
        with pytest.raises(GeminiServiceError):
            await service.generate_from_conversation("framing", [], "hello")
