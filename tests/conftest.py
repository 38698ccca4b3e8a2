"""Shared pytest fixtures and configurations for the OutfitAI application.

This module provides test fixtures used across all test files, including:
- Real (tiny) test images built with Pillow
- Domain fixtures for attributes and outfit suggestions
- A fake AI service standing in for the model provider
- Test client setup with dependency overrides
"""

import asyncio
import base64
import io
from typing import Generator, List, Optional, Set

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from outfitai.api.dependencies import get_ai_service
from outfitai.core.config import Settings
from outfitai.core.exceptions import ImageGenerationError
from outfitai.main import app
from outfitai.models.domain.analysis import ClothingAttributes
from outfitai.models.domain.image import ImagePayload, StylingHints
from outfitai.models.domain.item import RecommendedItem
from outfitai.models.domain.outfit import OutfitSuggestion

RENDERED_PNG = b"\x89PNG\r\n\x1a\nrendered"


def make_image_bytes(fmt: str = "PNG", color: str = "red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color).save(buffer, format=fmt)
    return buffer.getvalue()


def make_suggestion(style_name: str, items: Optional[List[RecommendedItem]] = None) -> OutfitSuggestion:
    slug = style_name.lower().replace("/", "-")
    return OutfitSuggestion(
        style_name=style_name,
        description=f"A {style_name.lower()} look.",
        explanation="The colors complement the red silk dress.",
        recommended_items=items or [
            RecommendedItem(
                type="top",
                name="Cropped denim jacket",
                shopping_link=f"https://www.zara.com/{slug}/jacket"
            ),
            RecommendedItem(
                type="footwear",
                name="White sneakers",
                shopping_link=f"https://www.amazon.com/{slug}/dp/sneakers"
            ),
        ]
    )


class FakeAIService:
    """In-memory stand-in for ``AIService`` recording every call."""

    status = "ready"

    def __init__(self, attributes: ClothingAttributes, suggestions: List[OutfitSuggestion]):
        self.attributes = attributes
        self.suggestions = suggestions
        self.analyze_error: Optional[Exception] = None
        self.recommend_error: Optional[Exception] = None
        self.failing_styles: Set[str] = set()
        self.slow_styles: Set[str] = set()
        self.render_delay = 5.0
        self.analyze_calls = 0
        self.recommend_calls = 0
        self.rendered_styles: List[str] = []
        self.received_hints: List[Optional[StylingHints]] = []

    async def analyze_clothing_image(self, image: ImagePayload) -> ClothingAttributes:
        self.analyze_calls += 1
        if self.analyze_error:
            raise self.analyze_error
        return self.attributes

    async def recommend_outfit_styles(self, attributes, hints=None) -> List[OutfitSuggestion]:
        self.recommend_calls += 1
        self.received_hints.append(hints)
        if self.recommend_error:
            raise self.recommend_error
        return self.suggestions

    async def recommend_items(self, attributes):
        return []

    async def render_outfit_image(self, image, suggestion, hints=None) -> ImagePayload:
        self.rendered_styles.append(suggestion.style_name)
        if suggestion.style_name in self.slow_styles:
            await asyncio.sleep(self.render_delay)
        if suggestion.style_name in self.failing_styles:
            raise ImageGenerationError("Image generation failed to return a valid image.")
        return ImagePayload(mime_type="image/png", data=RENDERED_PNG)

    async def close(self) -> None:
        return None


# Test data fixtures
@pytest.fixture
def png_bytes() -> bytes:
    """Get raw bytes of a small, valid PNG."""
    return make_image_bytes()


@pytest.fixture
def test_image(png_bytes: bytes) -> str:
    """Get base64 data URI of the test image."""
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode()


@pytest.fixture
def image_payload(png_bytes: bytes) -> ImagePayload:
    return ImagePayload(mime_type="image/png", data=png_bytes)


@pytest.fixture
def attributes() -> ClothingAttributes:
    return ClothingAttributes(item_type="dress", color="red", fabric="silk", style="formal")


@pytest.fixture
def suggestions() -> List[OutfitSuggestion]:
    return [make_suggestion(name) for name in ("Casual", "Formal/Smart", "Trendy/Party")]


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        OPENAI_API_KEY="test-key",
        MODEL_TIMEOUT_SECONDS=0.2,
        EXPECTED_SUGGESTION_COUNT=3,
        STRICT_SUGGESTION_COUNT=False
    )


# Mock service fixtures
@pytest.fixture
def fake_ai_service(attributes, suggestions) -> FakeAIService:
    return FakeAIService(attributes, suggestions)


# FastAPI test client
@pytest.fixture
def client(fake_ai_service: FakeAIService) -> Generator[TestClient, None, None]:
    """Get test client wired to the fake AI service."""
    app.dependency_overrides[get_ai_service] = lambda: fake_ai_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
