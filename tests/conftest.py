"""Shared fixtures for all tests."""

import io
import os
from unittest.mock import AsyncMock, MagicMock

# Ensure tests never use a real API key
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")

import pytest
from PIL import Image

from declutter.models.schemas import AnalysisRecord
from declutter.services.controller import SessionController


BEDROOM_RESPONSE = "Room Type: Bedroom\n\nSuggestions:\n- Use under-bed storage"


@pytest.fixture
def png_bytes() -> bytes:
    """Minimal valid PNG image."""
    img = Image.new("RGB", (320, 200), color="beige")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def gemini():
    """Mocked Gemini boundary; both calls succeed by default."""
    service = MagicMock()
    service.generate_from_image_and_text = AsyncMock(return_value=BEDROOM_RESPONSE)
    service.generate_from_conversation = AsyncMock(return_value="Put the pots in the lower drawer.")
    return service


@pytest.fixture
def controller(gemini) -> SessionController:
    return SessionController(service_factory=lambda: gemini)


def _make_record(room_type: str = "Kitchen", suggestions: str = None) -> AnalysisRecord:
    return AnalysisRecord(
        image_reference="data:image/png;base64,iVBORw0KGgo=",
        mime_type="image/png",
        room_type=room_type,
        suggestions_text=suggestions or f"Room Type: {room_type}\n\nSuggestions:\n- Clear the counters",
    )


@pytest.fixture
def make_record():
    """Factory for standalone AnalysisRecord instances."""
    return _make_record
